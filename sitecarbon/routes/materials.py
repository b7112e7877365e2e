from typing import List

from fastapi import APIRouter, Query

from ..models.material_schema import (
    IndustryAveragesResponse,
    RecommendationRequest,
    RecommendationResponse,
)
from ..services.industry_averages import IndustryAverageService
from ..services.recommendation import (
    normalize_material,
    personalized_recommendations,
    rank_materials,
)
from ..settings import settings

router = APIRouter(prefix="/materials", tags=["materials"])


@router.post("/recommendations", response_model=RecommendationResponse)
async def material_recommendations(payload: RecommendationRequest) -> RecommendationResponse:
    materials = [normalize_material(raw) for raw in payload.materials]
    quantity = (
        settings.estimated_quantity if payload.estimatedQuantity is None else payload.estimatedQuantity
    )
    ranked = rank_materials(
        materials,
        payload.userMetrics,
        payload.industryAverages,
        category=payload.category,
        search=payload.search,
        sort_by=payload.sortBy,
        estimated_quantity=quantity,
    )
    return RecommendationResponse(
        materials=ranked,
        personalized=personalized_recommendations(ranked, payload.userMetrics),
    )


@router.get("/industry-averages", response_model=IndustryAveragesResponse)
async def industry_averages(
    category: List[str] | None = Query(default=None),
) -> IndustryAveragesResponse:
    averages = await IndustryAverageService().get_industry_averages(category)
    return IndustryAveragesResponse(averages=averages)
