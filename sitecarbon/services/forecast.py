"""
Deterministic projection of a carbon trend.

Each series (emissions, savings) gets its own least-squares line against
elapsed time. Projected points are spaced by the median gap of the history,
so a weekly log projects weekly and a daily log projects daily.
"""

import logging
import math
import statistics
from datetime import timedelta
from typing import Sequence

from ..schemas import TrendPoint

logger = logging.getLogger(__name__)

# used when every historical point shares one timestamp
DEFAULT_STEP = timedelta(days=1)


def _fit_line(xs: Sequence[float], ys: Sequence[float]) -> tuple[float, float]:
    try:
        slope, intercept = statistics.linear_regression(xs, ys)
    except statistics.StatisticsError:
        # constant x: no slope to speak of, project the mean
        return 0.0, statistics.fmean(ys)
    return slope, intercept


def median_step(history: Sequence[TrendPoint]) -> timedelta:
    gaps = [
        (later.time - earlier.time).total_seconds()
        for earlier, later in zip(history, history[1:])
    ]
    step = statistics.median(gaps) if gaps else 0.0
    if step <= 0:
        return DEFAULT_STEP
    return timedelta(seconds=step)


def forecast(
    trend: Sequence[TrendPoint],
    horizon: int,
    window: int | None = None,
) -> list[TrendPoint]:
    """Project ``horizon`` points past the last point of ``trend``.

    ``window`` limits the fit to the trailing N points. Fewer than two
    points, or a non-positive horizon, give an empty forecast. Projection
    stops early once the next time would pass the last representable date.
    """
    if horizon <= 0:
        return []

    history = sorted(trend, key=lambda point: point.time)
    if window:
        history = history[-window:]
    if len(history) < 2:
        return []

    origin = history[0].time
    xs = [(point.time - origin).total_seconds() for point in history]
    try:
        emission_line = _fit_line(xs, [point.emissions for point in history])
        savings_line = _fit_line(xs, [point.savings for point in history])
    except (OverflowError, ValueError):
        logger.debug("Trend values too large to fit a line; no forecast")
        return []

    step = median_step(history)
    last_time = history[-1].time
    last_x = xs[-1]

    projected: list[TrendPoint] = []
    for period in range(1, horizon + 1):
        try:
            time = last_time + period * step
        except OverflowError:
            logger.debug("Forecast stopped after %d periods: past the last representable date", period - 1)
            break
        x = last_x + period * step.total_seconds()
        emissions = max(0.0, emission_line[0] * x + emission_line[1])
        savings = max(0.0, savings_line[0] * x + savings_line[1])
        if not (math.isfinite(emissions) and math.isfinite(savings)):
            break
        projected.append(
            TrendPoint(
                time=time,
                emissions=emissions,
                savings=savings,
                net=emissions - savings,
            )
        )

    logger.debug("Forecast %d periods at %s spacing from %d points", len(projected), step, len(history))
    return projected
