from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag


class ActivityType(str, Enum):
    ENERGY = "energy"
    TRANSPORT = "transport"
    MACHINERY = "machinery"
    WASTE = "waste"
    WATER = "water"
    RENEWABLE = "renewable"
    MATERIAL = "material"
    RECYCLING = "recycling"
    WATER_REUSE = "waterReuse"


class FuelType(str, Enum):
    GRID = "grid"
    DIESEL = "diesel"
    PETROL = "petrol"
    HYBRID = "hybrid"
    ELECTRIC = "electric"


ACTIVITY_UNITS: dict[ActivityType, str] = {
    ActivityType.ENERGY: "kWh",
    ActivityType.RENEWABLE: "kWh",
    ActivityType.TRANSPORT: "km",
    ActivityType.MACHINERY: "L",
    ActivityType.WASTE: "kg",
    ActivityType.RECYCLING: "kg",
    ActivityType.WATER: "m3",
    ActivityType.WATER_REUSE: "m3",
    ActivityType.MATERIAL: "t",
}


class BaseActivity(BaseModel):
    """Fields shared by every logged activity, after cleaning."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    timestamp: datetime
    value: float = 0.0
    description: str | None = None
    siteId: str | None = None


class EnergyActivity(BaseActivity):
    type: Literal["energy"] = "energy"
    fuelType: FuelType = FuelType.GRID


class TransportActivity(BaseActivity):
    type: Literal["transport"] = "transport"


class MachineryActivity(BaseActivity):
    type: Literal["machinery"] = "machinery"


class WasteActivity(BaseActivity):
    type: Literal["waste"] = "waste"


class WaterActivity(BaseActivity):
    type: Literal["water"] = "water"


class RenewableActivity(BaseActivity):
    type: Literal["renewable"] = "renewable"


class MaterialActivity(BaseActivity):
    type: Literal["material"] = "material"
    standardEF: float | None = None
    sustainableEF: float | None = None


class RecyclingActivity(BaseActivity):
    type: Literal["recycling"] = "recycling"


class WaterReuseActivity(BaseActivity):
    type: Literal["waterReuse"] = "waterReuse"


class UnknownActivity(BaseActivity):
    # keeps the raw type string so unrecognised records still round-trip
    type: str = ""


UNKNOWN_TAG = "unknown"


def record_tag(value: Any) -> str:
    """Discriminator for ActivityRecord: the activity type, or ``unknown``."""
    if isinstance(value, dict):
        activity_type = value.get("type")
    else:
        activity_type = getattr(value, "type", None)
    if isinstance(activity_type, str) and activity_type in ActivityType._value2member_map_:
        return ActivityType(activity_type).value
    return UNKNOWN_TAG


ActivityRecord = Annotated[
    Union[
        Annotated[EnergyActivity, Tag("energy")],
        Annotated[TransportActivity, Tag("transport")],
        Annotated[MachineryActivity, Tag("machinery")],
        Annotated[WasteActivity, Tag("waste")],
        Annotated[WaterActivity, Tag("water")],
        Annotated[RenewableActivity, Tag("renewable")],
        Annotated[MaterialActivity, Tag("material")],
        Annotated[RecyclingActivity, Tag("recycling")],
        Annotated[WaterReuseActivity, Tag("waterReuse")],
        Annotated[UnknownActivity, Tag(UNKNOWN_TAG)],
    ],
    Discriminator(record_tag),
]

RECORD_CLASSES: dict[ActivityType, type[BaseActivity]] = {
    ActivityType.ENERGY: EnergyActivity,
    ActivityType.TRANSPORT: TransportActivity,
    ActivityType.MACHINERY: MachineryActivity,
    ActivityType.WASTE: WasteActivity,
    ActivityType.WATER: WaterActivity,
    ActivityType.RENEWABLE: RenewableActivity,
    ActivityType.MATERIAL: MaterialActivity,
    ActivityType.RECYCLING: RecyclingActivity,
    ActivityType.WATER_REUSE: WaterReuseActivity,
}
