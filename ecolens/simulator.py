# ecolens/simulator.py — projected savings from proposed improvements
from __future__ import annotations
import math
from typing import Iterable

from .errors import ValidationError
from .schemas import ImpactBand, ImprovementItem, SimulationResult

MONTHS_PER_YEAR = 12
KG_CO2_PER_TREE_YEAR = 21  # one tree absorbs ~21 kg CO2 a year


def _band(monthly: float) -> ImpactBand:
    yearly = monthly * MONTHS_PER_YEAR
    if not math.isfinite(yearly):
        raise ValidationError("Footprint figures are too large to simulate")
    return ImpactBand(monthly=monthly, yearly=yearly, trees=math.ceil(yearly / KG_CO2_PER_TREE_YEAR))


def simulate_impact(current_footprint: float, improvements: Iterable[ImprovementItem]) -> SimulationResult:
    # each band gets its own tree count; savings.trees is not current - improved
    savings = sum((it.potential_savings or 0) for it in improvements)
    improved = max(0, current_footprint - savings)
    return SimulationResult(
        current=_band(current_footprint),
        improved=_band(improved),
        savings=_band(savings),
    )
