"""
Fold activity records into carbon totals and a per-activity trend.
"""

import logging
import math
import sys
from typing import Iterable

from ..models.activity import ActivityRecord
from ..schemas import CarbonSummary, TrendPoint
from .activities import DegradeCounter, note_degrade
from .co2 import ActivityEvaluator
from .forecast import forecast

logger = logging.getLogger(__name__)


def _total(values: list[float], diagnostics: DegradeCounter | None) -> float:
    """Exact sum of finite values, clamped to the largest float on overflow."""
    try:
        return math.fsum(values)
    except OverflowError:
        note_degrade(diagnostics, "non_finite_total", "totals")
        return sys.float_info.max


def aggregate(
    records: Iterable[ActivityRecord],
    evaluator: ActivityEvaluator | None = None,
) -> CarbonSummary:
    """
    Build a CarbonSummary (without forecast) from the full set of records.

    Records are ordered by timestamp; equal timestamps keep their input order.
    Each record contributes one trend point. A negative saving (a material
    substitute worse than the standard) stays signed on its trend point but is
    counted as emissions in the totals, so both totals are non-negative and
    netEmissions equals the sum of the trend's net values.
    """
    evaluator = evaluator or ActivityEvaluator()
    ordered = sorted(records, key=lambda record: record.timestamp)

    trend: list[TrendPoint] = []
    emitted: list[float] = []
    avoided: list[float] = []

    for record in ordered:
        impact = evaluator.evaluate(record)
        trend.append(
            TrendPoint(
                time=record.timestamp,
                emissions=impact.emissions,
                savings=impact.savings,
                net=impact.emissions - impact.savings,
            )
        )
        emitted.append(impact.emissions)
        if impact.savings >= 0:
            avoided.append(impact.savings)
        else:
            emitted.append(-impact.savings)

    total_emissions = _total(emitted, evaluator.diagnostics)
    total_savings = _total(avoided, evaluator.diagnostics)

    return CarbonSummary(
        activities=ordered,
        totalEmissions=total_emissions,
        totalSavings=total_savings,
        netEmissions=total_emissions - total_savings,
        trend=trend,
    )


def summarize(
    records: Iterable[ActivityRecord],
    evaluator: ActivityEvaluator | None = None,
    horizon: int = 6,
) -> CarbonSummary:
    """Aggregate the records and extend the trend ``horizon`` periods ahead."""
    summary = aggregate(records, evaluator)
    projected = forecast(summary.trend, horizon)
    logger.debug(
        "Summarised %d activities: emissions=%.3f savings=%.3f forecast=%d",
        len(summary.trend),
        summary.totalEmissions,
        summary.totalSavings,
        len(projected),
    )
    return summary.model_copy(update={"forecast": projected})
