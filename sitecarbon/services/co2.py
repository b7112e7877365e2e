import logging
import math
from typing import Callable, NamedTuple

from ..models.activity import (
    ActivityRecord,
    ActivityType,
    FuelType,
    MaterialActivity,
    UnknownActivity,
)
from .activities import DegradeCounter, clean_quantity, note_degrade
from .emission_factors import CANONICAL_FACTORS, EmissionFactors

logger = logging.getLogger(__name__)


class Impact(NamedTuple):
    emissions: float = 0.0
    savings: float = 0.0


NO_IMPACT = Impact()

Handler = Callable[[ActivityRecord, EmissionFactors, DegradeCounter | None], Impact]


def estimate_energy_co2(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    """Grid draw unless the energy came from a diesel generator."""
    if getattr(activity, "fuelType", FuelType.GRID) is FuelType.DIESEL:
        factor = factors.energy_diesel
    else:
        factor = factors.energy_grid
    return Impact(emissions=activity.value * factor)


def estimate_transport_co2(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    return Impact(emissions=activity.value * factors.transport)


def estimate_machinery_co2(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    """Machinery always burns diesel, whatever fuel the form claimed."""
    return Impact(emissions=activity.value * factors.machinery_diesel)


def estimate_waste_co2(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    return Impact(emissions=activity.value * factors.waste_landfill)


def estimate_water_co2(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    return Impact(emissions=activity.value * factors.water)


def estimate_renewable_savings(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    """Renewable generation displaces the same amount of grid draw."""
    return Impact(savings=activity.value * factors.energy_grid)


def estimate_material_savings(
    activity: MaterialActivity, factors: EmissionFactors, diagnostics=None
) -> Impact:
    """Savings from swapping a standard material for a lower-carbon one.

    Both factors are required. A substitute dirtier than the standard gives
    negative savings, which is kept as is.
    """
    if activity.standardEF is None or activity.sustainableEF is None:
        note_degrade(diagnostics, "missing_material_ef", activity.id)
        return NO_IMPACT
    return Impact(savings=activity.value * (activity.standardEF - activity.sustainableEF))


def estimate_recycling_savings(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    return Impact(savings=activity.value * factors.waste_landfill)


def estimate_water_reuse_savings(activity, factors: EmissionFactors, diagnostics=None) -> Impact:
    return Impact(savings=activity.value * factors.water)


HANDLERS: dict[ActivityType, Handler] = {
    ActivityType.ENERGY: estimate_energy_co2,
    ActivityType.TRANSPORT: estimate_transport_co2,
    ActivityType.MACHINERY: estimate_machinery_co2,
    ActivityType.WASTE: estimate_waste_co2,
    ActivityType.WATER: estimate_water_co2,
    ActivityType.RENEWABLE: estimate_renewable_savings,
    ActivityType.MATERIAL: estimate_material_savings,
    ActivityType.RECYCLING: estimate_recycling_savings,
    ActivityType.WATER_REUSE: estimate_water_reuse_savings,
}

_unhandled = set(ActivityType) - set(HANDLERS)
if _unhandled:
    raise RuntimeError(f"No impact handler for activity types: {sorted(_unhandled)}")


class ActivityEvaluator:
    """Computes the signed impact of single activity records.

    The factor table is injected so callers (and tests) can swap it; one
    evaluator can be shared freely since it holds no per-call state apart from
    the optional diagnostics counter.
    """

    def __init__(
        self,
        factors: EmissionFactors = CANONICAL_FACTORS,
        diagnostics: DegradeCounter | None = None,
    ):
        self.factors = factors
        self.diagnostics = diagnostics

    def evaluate(self, record: ActivityRecord) -> Impact:
        if isinstance(record, UnknownActivity):
            note_degrade(self.diagnostics, "unknown_type", record.id)
            return NO_IMPACT

        quantity = clean_quantity(record.value)
        if quantity is None:
            note_degrade(self.diagnostics, "invalid_value", record.id)
            quantity = 0.0
        if quantity != record.value:
            record = record.model_copy(update={"value": quantity})

        handler = HANDLERS[ActivityType(record.type)]
        impact = handler(record, self.factors, self.diagnostics)

        if not (math.isfinite(impact.emissions) and math.isfinite(impact.savings)):
            note_degrade(self.diagnostics, "non_finite_impact", record.id)
            return NO_IMPACT
        return impact
