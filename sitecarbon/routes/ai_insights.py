from fastapi import APIRouter, Depends

from ..schemas import InsightsRequest, InsightsResponse
from ..services.activities import parse_activities
from ..services.aggregation import summarize
from ..services.co2 import ActivityEvaluator
from ..services.emission_factors import EmissionFactors, get_emission_factors
from ..services.gemini_insights import narrate_insights
from ..services.insights import generate_insights
from ..settings import settings

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/insights", response_model=InsightsResponse)
async def ai_insights(
    payload: InsightsRequest,
    factors: EmissionFactors = Depends(get_emission_factors),
) -> InsightsResponse:
    records = parse_activities(payload.activities)
    summary = summarize(records, ActivityEvaluator(factors), settings.forecast_horizon)
    return await narrate_insights(summary, generate_insights(records, factors))
