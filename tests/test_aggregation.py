import math
import sys

import pytest

from sitecarbon.schemas import ActivityInput, CarbonSummary
from sitecarbon.services.activities import DegradeCounter
from sitecarbon.services.aggregation import aggregate, summarize
from sitecarbon.services.co2 import ActivityEvaluator


def test_empty_input_gives_zero_summary():
    summary = aggregate([])

    assert summary.totalEmissions == 0
    assert summary.totalSavings == 0
    assert summary.netEmissions == 0
    assert summary.trend == []
    assert summary.forecast == []


def test_totals_and_trend(make_activity, make_records):
    records = make_records(
        make_activity("energy", 100, day=0),
        make_activity("recycling", 200, day=1),
        make_activity("transport", 100, day=2),
    )

    summary = aggregate(records)

    assert summary.totalEmissions == pytest.approx(67.0)
    assert summary.totalSavings == pytest.approx(100.0)
    assert summary.netEmissions == pytest.approx(-33.0)
    assert [(p.emissions, p.savings) for p in summary.trend] == [
        (50.0, 0.0),
        (0.0, 100.0),
        (pytest.approx(17.0), 0.0),
    ]
    assert [p.net for p in summary.trend] == [50.0, -100.0, pytest.approx(17.0)]


def test_trend_is_time_ordered_and_stable(make_activity, make_records):
    records = make_records(
        make_activity("water", 1, day=5, id="late"),
        make_activity("waste", 1, day=1, id="tie-first"),
        make_activity("energy", 1, day=1, id="tie-second"),
        make_activity("transport", 1, day=0, id="early"),
    )

    summary = aggregate(records)

    assert [record.id for record in summary.activities] == ["early", "tie-first", "tie-second", "late"]
    times = [point.time for point in summary.trend]
    assert times == sorted(times)


def test_negative_savings_count_as_emissions(make_activity, make_records):
    records = make_records(
        make_activity("energy", 100, day=0),
        make_activity("recycling", 200, day=1),
        make_activity("material", 2, day=2, standardEF=100, sustainableEF=150),
    )

    summary = aggregate(records)

    assert summary.trend[2].savings == -100.0
    assert summary.totalEmissions == pytest.approx(150.0)
    assert summary.totalSavings == pytest.approx(100.0)
    assert summary.netEmissions == pytest.approx(sum(point.net for point in summary.trend))


def test_malformed_records_cannot_poison_totals(make_records):
    records = make_records(
        ActivityInput(type="energy", value=math.nan, timestamp="2024-03-01"),
        ActivityInput(type="energy", value=-10, timestamp="2024-03-02"),
        ActivityInput(type="renewable", value="lots", timestamp="2024-03-03"),
        ActivityInput(type="water", value=math.inf, timestamp=None),
        ActivityInput(type="energy", value=4, timestamp="2024-03-04"),
    )

    summary = aggregate(records)

    for total in (summary.totalEmissions, summary.totalSavings, summary.netEmissions):
        assert math.isfinite(total)
    assert summary.totalEmissions == pytest.approx(2.0)
    assert summary.totalSavings == 0


def test_aggregate_is_idempotent(make_activity, make_records):
    records = make_records(
        make_activity("energy", 12.3, day=0),
        make_activity("renewable", 4.56, day=1),
        make_activity("material", 7, day=1, standardEF=3.3, sustainableEF=1.1),
        make_activity("machinery", 0.1, day=3),
    )

    first = aggregate(records)
    second = aggregate(records)

    assert first.model_dump_json() == second.model_dump_json()


@pytest.mark.parametrize("count", [0, 1, 5, 40])
def test_net_identity_and_non_negative_totals(make_activity, make_records, count):
    kinds = ["energy", "renewable", "material", "waste", "recycling", "water", "waterReuse"]
    records = make_records(
        *[
            make_activity(kinds[i % len(kinds)], (i * 37) % 11 - 2, day=i, standardEF=5, sustainableEF=i % 9)
            for i in range(count)
        ]
    )

    summary = aggregate(records)

    assert summary.totalEmissions >= 0
    assert summary.totalSavings >= 0
    assert summary.netEmissions == pytest.approx(summary.totalEmissions - summary.totalSavings, abs=1e-9)


def test_summarize_adds_forecast(make_activity, make_records):
    records = make_records(*[make_activity("energy", 10 * (day + 1), day=day) for day in range(4)])

    summary = summarize(records, horizon=3)

    assert len(summary.forecast) == 3
    assert summary.forecast[0].time > summary.trend[-1].time
    assert summary.trend == aggregate(records).trend


def test_overflowing_totals_are_clamped(make_records):
    diagnostics = DegradeCounter()
    records = make_records(
        *[ActivityInput(type="energy", value=1e308, timestamp=f"2024-03-0{day}") for day in range(1, 5)]
    )

    summary = summarize(records, ActivityEvaluator(diagnostics=diagnostics), horizon=3)

    for total in (summary.totalEmissions, summary.totalSavings, summary.netEmissions):
        assert math.isfinite(total)
    assert summary.totalEmissions == sys.float_info.max
    assert diagnostics == {"non_finite_total": 1}
    assert all(math.isfinite(point.emissions) for point in summary.forecast)


def test_total_emissions_documents_negative_savings():
    description = CarbonSummary.model_fields["totalEmissions"].description
    assert "negative material savings" in description
