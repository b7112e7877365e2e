from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SortOption = Literal["recommended", "carbon", "price", "rating"]


class EcoImpact(BaseModel):
    model_config = ConfigDict(extra="allow")

    carbonFootprint: Optional[float] = Field(default=None, description="kg CO2e per unit")
    waterUsage: Optional[float] = Field(default=None, description="liters per unit")
    energyConsumption: Optional[float] = Field(default=None, description="kWh per unit")
    recycledContent: Optional[float] = None
    recyclability: Optional[float] = Field(default=None, description="percentage")
    lifespan: Optional[float] = Field(default=None, description="years")
    renewable: Optional[bool] = None
    local: Optional[bool] = None
    certifications: List[str] = Field(default_factory=list)


class Supplier(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    location: Optional[str] = None
    certifications: List[str] = Field(default_factory=list)
    rating: Optional[float] = Field(default=None, description="1-5, 3 when unknown")


class SustainableMaterial(BaseModel):
    id: str
    name: str = "Unnamed Material"
    description: str = ""
    category: str = "other"
    cost: float = 0.0
    unit: str = "unit"
    availability: str = "medium"
    ecoImpact: Optional[EcoImpact] = None
    supplier: Optional[Supplier] = None
    technicalSpecs: Dict[str, Any] = Field(default_factory=dict)


class UserCarbonMetrics(BaseModel):
    userId: Optional[str] = None
    totalEmissions: float = 0.0
    totalSavings: float = 0.0
    netEmissions: float = 0.0
    reductionTarget: Optional[float] = None
    highImpactCategories: List[str] = Field(default_factory=list)


class ScoredMaterial(SustainableMaterial):
    recommendationScore: float = Field(..., ge=0, le=100)
    potentialSavings: float = Field(..., description="kg CO2e versus the industry average; may be negative")
    industryAverage: float
    badge: str
    ecoImpactLevel: Optional[str] = None


class RecommendationRequest(BaseModel):
    materials: List[Dict[str, Any]] = Field(
        default_factory=list, description="Raw material records from any catalogue source"
    )
    userMetrics: Optional[UserCarbonMetrics] = None
    industryAverages: Dict[str, float] = Field(default_factory=dict)
    category: str = "all"
    search: str = ""
    sortBy: SortOption = "recommended"
    estimatedQuantity: Optional[float] = Field(default=None, ge=0)


class RecommendationResponse(BaseModel):
    materials: List[ScoredMaterial]
    personalized: List[ScoredMaterial]


class IndustryAveragesResponse(BaseModel):
    averages: Dict[str, float]
