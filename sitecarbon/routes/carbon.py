import logging

from fastapi import APIRouter, Depends

from ..schemas import (
    CarbonSummaryRequest,
    CarbonSummaryResponse,
    EfficiencyRequest,
    EfficiencyScore,
    InsightsRequest,
    InsightsResponse,
)
from ..services.activities import DegradeCounter, parse_activities
from ..services.aggregation import summarize
from ..services.co2 import ActivityEvaluator
from ..services.efficiency import efficiency_grade, efficiency_percentage, score_summary
from ..services.emission_factors import EmissionFactors, get_emission_factors
from ..services.insights import generate_insights
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/carbon", tags=["carbon"])


@router.post("/summary", response_model=CarbonSummaryResponse)
async def carbon_summary(
    payload: CarbonSummaryRequest,
    factors: EmissionFactors = Depends(get_emission_factors),
) -> CarbonSummaryResponse:
    diagnostics = DegradeCounter()
    records = parse_activities(payload.activities, diagnostics=diagnostics)
    horizon = settings.forecast_horizon if payload.horizon is None else payload.horizon

    summary = summarize(records, ActivityEvaluator(factors, diagnostics), horizon)

    if diagnostics:
        logger.info("Carbon summary degraded inputs: %s", dict(diagnostics))

    return CarbonSummaryResponse(
        **dict(summary),
        efficiency=score_summary(summary),
        diagnostics=dict(diagnostics),
    )


@router.post("/efficiency", response_model=EfficiencyScore)
async def carbon_efficiency(payload: EfficiencyRequest) -> EfficiencyScore:
    return EfficiencyScore(
        grade=efficiency_grade(payload.totalEmissions, payload.totalSavings),
        efficiency=efficiency_percentage(payload.totalEmissions, payload.totalSavings),
    )


@router.post("/insights", response_model=InsightsResponse)
async def carbon_insights(
    payload: InsightsRequest,
    factors: EmissionFactors = Depends(get_emission_factors),
) -> InsightsResponse:
    records = parse_activities(payload.activities)
    return InsightsResponse(insights=generate_insights(records, factors))
