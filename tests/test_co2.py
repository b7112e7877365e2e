from datetime import datetime, timezone

import pytest

from sitecarbon.models.activity import ActivityType, EnergyActivity, MachineryActivity, MaterialActivity
from sitecarbon.services.activities import DegradeCounter
from sitecarbon.services.co2 import HANDLERS, ActivityEvaluator, Impact
from sitecarbon.services.emission_factors import ACTIVITY_FORM_FACTORS, EmissionFactors

WHEN = datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.fixture
def evaluator():
    return ActivityEvaluator()


def test_every_activity_type_has_a_handler():
    assert set(HANDLERS) == set(ActivityType)


def test_grid_energy(evaluator, make_activity, make_records):
    [record] = make_records(make_activity("energy", 100, fuelType="grid"))
    assert evaluator.evaluate(record) == Impact(emissions=50.0, savings=0.0)


def test_material_substitution(evaluator, make_activity, make_records):
    [record] = make_records(make_activity("material", 10, standardEF=300, sustainableEF=150))
    assert evaluator.evaluate(record) == Impact(emissions=0.0, savings=1500.0)


@pytest.mark.parametrize(
    "activity_type, fields, emissions, savings",
    [
        ("energy", {"fuelType": "diesel"}, 270.0, 0.0),
        ("transport", {}, 17.0, 0.0),
        ("machinery", {}, 268.0, 0.0),
        ("machinery", {"fuelType": "grid"}, 268.0, 0.0),
        ("waste", {}, 50.0, 0.0),
        ("water", {}, 34.0, 0.0),
        ("renewable", {}, 0.0, 50.0),
        ("recycling", {}, 0.0, 50.0),
        ("waterReuse", {}, 0.0, 34.0),
    ],
)
def test_canonical_factors(evaluator, make_activity, make_records, activity_type, fields, emissions, savings):
    [record] = make_records(make_activity(activity_type, 100, **fields))

    impact = evaluator.evaluate(record)

    assert impact.emissions == pytest.approx(emissions)
    assert impact.savings == pytest.approx(savings)


@pytest.mark.parametrize(
    "activity_type",
    ["energy", "transport", "machinery", "waste", "water", "renewable", "material", "recycling", "waterReuse"],
)
def test_one_side_is_always_zero(evaluator, make_activity, make_records, activity_type):
    [record] = make_records(make_activity(activity_type, 7.5, standardEF=20, sustainableEF=5))

    impact = evaluator.evaluate(record)

    assert impact.emissions == 0 or impact.savings == 0
    assert (impact.emissions != 0) != (impact.savings != 0)


def test_dirtier_substitute_gives_negative_savings(evaluator, make_activity, make_records):
    [record] = make_records(make_activity("material", 2, standardEF=100, sustainableEF=150))
    assert evaluator.evaluate(record) == Impact(emissions=0.0, savings=-100.0)


@pytest.mark.parametrize("fields", [{}, {"standardEF": 300}, {"sustainableEF": 150}])
def test_material_without_both_factors_saves_nothing(make_activity, make_records, fields):
    diagnostics = DegradeCounter()
    [record] = make_records(make_activity("material", 10, **fields))

    impact = ActivityEvaluator(diagnostics=diagnostics).evaluate(record)

    assert impact == Impact(0.0, 0.0)
    assert diagnostics["missing_material_ef"] == 1


def test_unknown_type_is_zero_and_counted(make_activity, make_records):
    diagnostics = DegradeCounter()
    [record] = make_records(make_activity("teleport", 1000))

    assert ActivityEvaluator(diagnostics=diagnostics).evaluate(record) == Impact(0.0, 0.0)
    assert diagnostics["unknown_type"] == 1


def test_directly_built_negative_value_is_cleaned():
    diagnostics = DegradeCounter()
    record = MachineryActivity(timestamp=WHEN, value=-40)

    assert ActivityEvaluator(diagnostics=diagnostics).evaluate(record) == Impact(0.0, 0.0)
    assert diagnostics["invalid_value"] == 1


def test_overflowing_impact_is_dropped():
    diagnostics = DegradeCounter()
    record = MaterialActivity(timestamp=WHEN, value=1e308, standardEF=1e308, sustainableEF=0)

    assert ActivityEvaluator(diagnostics=diagnostics).evaluate(record) == Impact(0.0, 0.0)
    assert diagnostics["non_finite_impact"] == 1


def test_injected_factor_table(make_activity, make_records):
    custom = EmissionFactors(energy_grid=1.0, transport=2.0)
    records = make_records(make_activity("energy", 10), make_activity("transport", 10))

    impacts = [ActivityEvaluator(custom).evaluate(record) for record in records]

    assert impacts == [Impact(emissions=10.0), Impact(emissions=20.0)]


def test_activity_form_profile_uses_drifted_constants():
    record = EnergyActivity(timestamp=WHEN, value=100)
    impact = ActivityEvaluator(ACTIVITY_FORM_FACTORS).evaluate(record)
    assert impact.emissions == pytest.approx(85.0)
