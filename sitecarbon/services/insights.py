from collections import defaultdict
from typing import Iterable

from ..models.activity import ActivityRecord, ActivityType, UnknownActivity
from .emission_factors import CANONICAL_FACTORS, EmissionFactors

NO_DATA_MESSAGE = "No activity data found yet. Start logging emissions/savings!"
PERFORMING_WELL_MESSAGE = "Your site is performing well. Keep monitoring for improvements!"

RENEWABLE_TARGET_PCT = 20.0
TRANSPORT_LIMIT_KM = 1000.0
WASTE_LIMIT_KG = 500.0
WATER_LIMIT_M3 = 200.0


def quantities_by_type(records: Iterable[ActivityRecord]) -> dict[ActivityType, float]:
    totals: dict[ActivityType, float] = defaultdict(float)
    for record in records:
        if isinstance(record, UnknownActivity):
            continue
        totals[ActivityType(record.type)] += record.value
    return totals


def generate_insights(
    records: Iterable[ActivityRecord],
    factors: EmissionFactors = CANONICAL_FACTORS,
) -> list[str]:
    """Plain-language suggestions derived from the quantities logged per type."""
    records = list(records)
    if not records:
        return [NO_DATA_MESSAGE]

    totals = quantities_by_type(records)
    total_energy = totals[ActivityType.ENERGY]
    renewable_pct = totals[ActivityType.RENEWABLE] / total_energy * 100 if total_energy > 0 else 0.0

    insights: list[str] = []
    if renewable_pct < RENEWABLE_TARGET_PCT:
        insights.append(
            f"Only {renewable_pct:.1f}% of your energy comes from renewables. "
            "Consider on-site solar or a green power purchase agreement."
        )
    else:
        insights.append(
            f"Great work: {renewable_pct:.1f}% of your energy is renewable, "
            "above the local industry baseline."
        )

    suggestions = 0
    if totals[ActivityType.TRANSPORT] > TRANSPORT_LIMIT_KM:
        insights.append(
            "Transport fuel usage is high. Explore EV fleets or optimize logistics to cut emissions."
        )
        suggestions += 1
    if totals[ActivityType.WASTE] > WASTE_LIMIT_KG:
        insights.append(
            "Waste generation is above average. Implement recycling or composting "
            "to offset landfill emissions."
        )
        suggestions += 1
    water = totals[ActivityType.WATER]
    if water > WATER_LIMIT_M3:
        insights.append(
            "Your water usage is significant. Water reuse/recycling could save "
            f"~{water * factors.water:.1f} kgCO2."
        )
        suggestions += 1

    if suggestions == 0 and renewable_pct >= RENEWABLE_TARGET_PCT:
        insights.append(PERFORMING_WELL_MESSAGE)
    return insights
