from datetime import datetime, timedelta, timezone

import pytest

from sitecarbon.schemas import ActivityInput, TrendPoint
from sitecarbon.services.activities import parse_activities

START = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_activity():
    def _make(type_: str, value=10, day: int = 0, **fields) -> ActivityInput:
        fields.setdefault("timestamp", (START + timedelta(days=day)).isoformat())
        return ActivityInput(type=type_, value=value, **fields)

    return _make


@pytest.fixture
def make_records(now):
    def _make(*activities: ActivityInput, diagnostics=None):
        return parse_activities(activities, now=now, diagnostics=diagnostics)

    return _make


@pytest.fixture
def make_trend():
    def _make(points, step=timedelta(days=1)):
        return [
            TrendPoint(
                time=START + index * step,
                emissions=emissions,
                savings=savings,
                net=emissions - savings,
            )
            for index, (emissions, savings) in enumerate(points)
        ]

    return _make
