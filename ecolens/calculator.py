# ecolens/calculator.py — monthly footprint from lifestyle inputs
from __future__ import annotations
import math
from types import MappingProxyType
from typing import Mapping

from .errors import ValidationError
from .schemas import Breakdown, FootprintResult, LifestyleInput

DAYS_PER_MONTH = 30

# kg CO2 per unit; read-only
EMISSION_FACTORS = MappingProxyType({
    "transport": MappingProxyType({
        "car": 0.21,              # per km
        "bike": 0.0,
        "publicTransport": 0.089, # per km
        "walking": 0.0,
    }),
    "electricity": 0.85,          # per kWh
    "food": MappingProxyType({    # per day
        "veg": 1.5,
        "nonVeg": 7.2,
        "vegan": 1.0,
        "mixed": 4.0,
    }),
    "shopping": MappingProxyType({  # per month
        "low": 10.0,
        "medium": 30.0,
        "high": 60.0,
    }),
    "devices": 0.5,               # per hour of use per day
})

ZERO_EMISSION_MODES = {"walking", "bike"}


def _factor(table: Mapping[str, float], key: str, field: str) -> float:
    try:
        return table[key]
    except KeyError:
        allowed = ", ".join(table)
        raise ValidationError(f"Unknown {field} {key!r}; expected one of: {allowed}") from None


def calculate_footprint(inputs: LifestyleInput, factors: Mapping = EMISSION_FACTORS) -> FootprintResult:
    """Monthly kg CO2 per category plus the total.

    Each figure is rounded to 2 decimals on its own; the total is rounded from
    the unrounded category sums.
    """
    mode = inputs.transport.mode
    mode_factor = _factor(factors["transport"], mode, "transport mode")
    if mode in ZERO_EMISSION_MODES:
        transport = 0.0
    else:
        transport = mode_factor * inputs.transport.distance_per_day * DAYS_PER_MONTH

    electricity = inputs.electricity.units_per_month * factors["electricity"]

    food = _factor(factors["food"], inputs.food.habit, "food habit") * DAYS_PER_MONTH

    shopping = _factor(factors["shopping"], inputs.lifestyle.shopping_frequency, "shopping frequency")
    devices = factors["devices"] * inputs.lifestyle.device_hours * DAYS_PER_MONTH
    lifestyle = shopping + devices

    total = transport + electricity + food + lifestyle
    if not math.isfinite(total):
        raise ValidationError("Inputs are too large to compute a footprint")

    return FootprintResult(
        total=round(total, 2),
        breakdown=Breakdown(
            transport=round(transport, 2),
            electricity=round(electricity, 2),
            food=round(food, 2),
            lifestyle=round(lifestyle, 2),
        ),
    )
