"""Emission factor table (kg CO2e per unit of activity quantity)."""

import logging
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from ..settings import settings

logger = logging.getLogger(__name__)


class EmissionFactors(BaseModel):
    model_config = ConfigDict(frozen=True)

    energy_grid: float = Field(0.5, description="kg CO2e per kWh drawn from the grid")
    energy_diesel: float = Field(2.7, description="kg CO2e per kWh from a diesel generator")
    transport: float = Field(0.17, description="kg CO2e per km, average truck")
    machinery_diesel: float = Field(2.68, description="kg CO2e per liter of machinery diesel")
    waste_landfill: float = Field(0.5, description="kg CO2e per kg of waste sent to landfill")
    water: float = Field(0.34, description="kg CO2e per m3 of treated water")

    @classmethod
    def from_profile(cls, profile: str) -> "EmissionFactors":
        try:
            factors = PROFILES[profile]
        except KeyError:
            logger.warning("Unknown emission factor profile %r, using canonical", profile)
            return CANONICAL_FACTORS

        if factors != CANONICAL_FACTORS:
            canonical = CANONICAL_FACTORS.model_dump()
            for name, value in factors.model_dump().items():
                if value != canonical[name]:
                    logger.warning(
                        "Emission factor %s=%s (profile %s) differs from canonical %s",
                        name,
                        value,
                        profile,
                        canonical[name],
                    )
        return factors

    @classmethod
    def from_settings(cls, settings) -> "EmissionFactors":
        return cls.from_profile(settings.emission_factor_profile)


CANONICAL_FACTORS = EmissionFactors()

# Factors hard-coded in the activity entry form; grid and transport drifted
# from the canonical table.
ACTIVITY_FORM_FACTORS = EmissionFactors(
    energy_grid=0.85,
    energy_diesel=2.68,
    transport=0.21,
    machinery_diesel=2.68,
    waste_landfill=0.5,
    water=0.34,
)

PROFILES: dict[str, EmissionFactors] = {
    "canonical": CANONICAL_FACTORS,
    "activity_form": ACTIVITY_FORM_FACTORS,
}


@lru_cache(maxsize=1)
def get_emission_factors() -> EmissionFactors:
    """Process-wide factor table, resolved from settings on first use."""
    return EmissionFactors.from_settings(settings)
