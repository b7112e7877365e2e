from datetime import datetime
from typing import Any, Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .models.activity import ActivityRecord

# ten years of daily points
MAX_FORECAST_HORIZON = 3660


class ActivityInput(BaseModel):
    """Activity as it arrives over JSON. Every field stays loose on purpose;
    the engine cleans and coerces instead of rejecting the request."""

    id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("id", "_id"),
        description="Opaque activity identifier",
    )
    type: Any = Field(default=None, description="Activity type, e.g. energy or recycling")
    value: Any = Field(default=None, description="Quantity in the unit implied by the type")
    fuelType: Any = Field(default=None, description="grid or diesel for energy/machinery")
    standardEF: Any = Field(default=None, description="Conventional material kg CO2e per unit")
    sustainableEF: Any = Field(default=None, description="Substitute material kg CO2e per unit")
    timestamp: Any = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "createdAt", "date"),
        description="ISO timestamp of the activity; invalid values become now",
    )
    description: Any = None
    siteId: Any = None


class TrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    time: datetime
    emissions: float
    savings: float
    net: float


class CarbonSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    activities: List[ActivityRecord] = Field(default_factory=list)
    totalEmissions: float = Field(
        0.0,
        description="kg CO2e emitted, including the magnitude of any negative material savings",
    )
    totalSavings: float = Field(0.0, description="kg CO2e avoided")
    netEmissions: float = Field(0.0, description="totalEmissions - totalSavings")
    trend: List[TrendPoint] = Field(default_factory=list)
    forecast: List[TrendPoint] = Field(default_factory=list)


class EfficiencyScore(BaseModel):
    grade: str = Field(..., description="A+, A, B, C or D")
    efficiency: float | None = Field(
        default=None, description="Savings as a percentage of emissions; null without emissions"
    )


class CarbonSummaryRequest(BaseModel):
    activities: List[ActivityInput] = Field(default_factory=list)
    horizon: int | None = Field(
        default=None,
        ge=0,
        le=MAX_FORECAST_HORIZON,
        description="Forecast periods; defaults to settings",
    )


class CarbonSummaryResponse(CarbonSummary):
    efficiency: EfficiencyScore
    diagnostics: Dict[str, int] = Field(
        default_factory=dict, description="How often each degrade path fired"
    )


class EfficiencyRequest(BaseModel):
    totalEmissions: float = Field(..., ge=0)
    totalSavings: float = Field(..., ge=0)


class InsightsRequest(BaseModel):
    activities: List[ActivityInput] = Field(default_factory=list)


class InsightsResponse(BaseModel):
    insights: List[str]
    sourceModel: str | None = None
