import logging
import math
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable

from ..models.activity import (
    ActivityRecord,
    ActivityType,
    EnergyActivity,
    FuelType,
    MaterialActivity,
    RECORD_CLASSES,
    UnknownActivity,
)
from ..schemas import ActivityInput

logger = logging.getLogger(__name__)

SAVINGS_TYPES = frozenset(
    {
        ActivityType.RENEWABLE,
        ActivityType.MATERIAL,
        ActivityType.RECYCLING,
        ActivityType.WATER_REUSE,
    }
)


class DegradeCounter(Counter):
    """Counts how often bad input was replaced with a neutral value."""

    def record(self, reason: str) -> None:
        self[reason] += 1


def note_degrade(diagnostics: DegradeCounter | None, reason: str, record_id: Any) -> None:
    logger.debug("Degraded activity %s: %s", record_id, reason)
    if diagnostics is not None:
        diagnostics.record(reason)


def is_savings_type(activity_type: str | ActivityType | None) -> bool:
    """True for activity types that avoid emissions rather than cause them."""
    return activity_type in SAVINGS_TYPES


def clean(value: Any) -> float | None:
    """Return ``value`` as a finite float, or None when it is not a usable number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def text(value: Any) -> str | None:
    """Scalar JSON value as a string; containers and null give None."""
    if value is None or isinstance(value, (dict, list, tuple)):
        return None
    return value if isinstance(value, str) else str(value)


def clean_quantity(value: Any) -> float | None:
    number = clean(value)
    if number is None or number < 0:
        return None
    return number


def parse_timestamp(raw: Any) -> datetime | None:
    if isinstance(raw, datetime):
        timestamp = raw
    elif isinstance(raw, str):
        try:
            timestamp = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _fuel_type(raw: str | None) -> FuelType:
    if not raw:
        return FuelType.GRID
    try:
        return FuelType(raw.strip().lower())
    except ValueError:
        return FuelType.GRID


def to_activity_record(
    activity: ActivityInput,
    now: datetime | None = None,
    diagnostics: DegradeCounter | None = None,
) -> ActivityRecord:
    """Turn a wire activity into its typed record, cleaning as it goes.

    Malformed quantities become 0 and missing or unparseable timestamps
    become ``now``; neither is an error.
    """
    record_id = None if activity.id is None else str(activity.id)
    activity_type = text(activity.type)

    timestamp = parse_timestamp(activity.timestamp)
    if timestamp is None:
        note_degrade(diagnostics, "invalid_timestamp", record_id)
        timestamp = now or datetime.now(timezone.utc)

    value = clean_quantity(activity.value)
    if value is None:
        note_degrade(diagnostics, "invalid_value", record_id)
        value = 0.0

    common = {
        "id": record_id,
        "timestamp": timestamp,
        "value": value,
        "description": text(activity.description),
        "siteId": text(activity.siteId),
    }

    try:
        known_type = ActivityType(activity_type)
    except ValueError:
        # counted once, when the evaluator skips it
        return UnknownActivity(type=activity_type or "", **common)

    if known_type is ActivityType.ENERGY:
        return EnergyActivity(fuelType=_fuel_type(text(activity.fuelType)), **common)
    if known_type is ActivityType.MATERIAL:
        return MaterialActivity(
            standardEF=clean(activity.standardEF),
            sustainableEF=clean(activity.sustainableEF),
            **common,
        )
    return RECORD_CLASSES[known_type](**common)


def parse_activities(
    activities: Iterable[ActivityInput],
    now: datetime | None = None,
    diagnostics: DegradeCounter | None = None,
) -> list[ActivityRecord]:
    now = now or datetime.now(timezone.utc)
    return [to_activity_record(activity, now, diagnostics) for activity in activities]
