from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional

TransportMode = Literal["car", "bike", "publicTransport", "walking"]
FoodHabit = Literal["veg", "nonVeg", "vegan", "mixed"]
ShoppingFrequency = Literal["low", "medium", "high"]
MessageType = Literal["greeting", "celebration", "reminder"]
ProductSource = Literal["Open Food Facts", "UPC Item DB"]


class _Model(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False)


# ---- Lifestyle input ---------------------------------------------------------
class TransportInput(_Model):
    mode: TransportMode
    distance_per_day: float = Field(0.0, ge=0, alias="distancePerDay")  # km

class ElectricityInput(_Model):
    units_per_month: float = Field(0.0, ge=0, alias="unitsPerMonth")  # kWh

class FoodInput(_Model):
    habit: FoodHabit

class LifestyleHabits(_Model):
    shopping_frequency: ShoppingFrequency = Field(alias="shoppingFrequency")
    device_hours: float = Field(0.0, ge=0, alias="deviceHours")  # hours/day

class LifestyleInput(_Model):
    transport: TransportInput
    electricity: ElectricityInput
    food: FoodInput
    lifestyle: LifestyleHabits


# ---- Footprint ---------------------------------------------------------------
class Breakdown(_Model):
    transport: float
    electricity: float
    food: float
    lifestyle: float

class FootprintResult(_Model):
    total: float
    breakdown: Breakdown
    unit: str = "kg CO₂/month"

class AdviceRequest(_Model):
    footprint_data: FootprintResult = Field(alias="footprintData")
    user_inputs: LifestyleInput = Field(alias="userInputs")


# ---- Simulation --------------------------------------------------------------
class ImprovementItem(_Model):
    potential_savings: Optional[float] = Field(None, ge=0, alias="potentialSavings")

class SimulationRequest(_Model):
    current_footprint: float = Field(ge=0, alias="currentFootprint")
    improvements: List[ImprovementItem] = Field(default_factory=list)

class ImpactBand(_Model):
    monthly: float
    yearly: float
    trees: int

class SimulationResult(_Model):
    current: ImpactBand
    improved: ImpactBand
    savings: ImpactBand


# ---- Products ----------------------------------------------------------------
class ProductRecord(_Model):
    """One product, whichever database it came from.

    Provider-only fields stay None when the other provider answered:
    ingredients/packaging/labels/nutriscore/ecoscore come from Open Food Facts,
    description from UPC Item DB.
    """
    found: bool
    source: Optional[ProductSource] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    categories: Optional[str] = None
    ingredients: Optional[str] = None
    packaging: Optional[str] = None
    labels: Optional[str] = None
    nutriscore: Optional[str] = None
    ecoscore: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    def summary(self) -> dict:
        """The trimmed view returned to the frontend."""
        return {
            "name": self.name,
            "brand": self.brand,
            "source": self.source,
            "image_url": self.image_url,
        }

class EcoScanRequest(_Model):
    product_name: Optional[str] = Field(None, alias="productName")
    product_description: Optional[str] = Field(None, alias="productDescription")
    image: Optional[str] = None  # data URI or bare base64
    barcode: Optional[str] = None


# ---- Companion + chat --------------------------------------------------------
class UserActions(_Model):
    last_action: Optional[str] = Field(None, alias="lastAction")
    total_saved: float = Field(0.0, ge=0, alias="totalSaved")

class PlantData(_Model):
    stage: Optional[str] = None

class EcoBloomRequest(_Model):
    user_actions: UserActions = Field(default_factory=UserActions, alias="userActions")
    plant_data: PlantData = Field(default_factory=PlantData, alias="plantData")
    message_type: MessageType = Field(alias="messageType")

class AwarenessRequest(_Model):
    question: str


# ---- Challenges --------------------------------------------------------------
class Challenge(_Model):
    id: int
    title: str
    description: str
    co2_saved: int = Field(alias="co2Saved")  # kg CO2
    difficulty: Literal["easy", "medium", "hard"]
    category: Literal["transport", "food", "electricity", "lifestyle"]
    duration: Literal["weekly", "monthly"]
    points: int
