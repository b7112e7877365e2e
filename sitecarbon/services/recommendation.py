import logging
import math
import uuid
from typing import Any, Iterable, Mapping

from ..models.material_schema import (
    EcoImpact,
    ScoredMaterial,
    SortOption,
    Supplier,
    SustainableMaterial,
    UserCarbonMetrics,
)

logger = logging.getLogger(__name__)

# kg CO2e per unit for conventional products in each category
DEFAULT_INDUSTRY_AVERAGES: dict[str, float] = {
    "concrete": 900.0,
    "steel": 1800.0,
    "wood": 50.0,
    "insulation": 150.0,
    "finishes": 120.0,
    "other": 200.0,
}
FALLBACK_INDUSTRY_AVERAGE = 200.0
DEFAULT_CARBON_FOOTPRINT = 200.0
DEFAULT_SUPPLIER_RATING = 3.0
DEFAULT_PRIORITY_CATEGORIES = ("concrete", "steel", "insulation")

NEUTRAL_SCORE = 50.0
CARBON_WEIGHT = 40.0
CATEGORY_WEIGHT = 30.0
SUPPLIER_POINTS_PER_STAR = 4.0
LOCAL_BONUS = 10.0


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _string_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


def industry_average_for(category: str | None, industry_averages: Mapping[str, float] | None) -> float:
    """Reference footprint for a category: caller-supplied first, then the static table."""
    supplied = _number((industry_averages or {}).get(category))
    if supplied:
        return supplied
    return DEFAULT_INDUSTRY_AVERAGES.get(category, FALLBACK_INDUSTRY_AVERAGE)


def calculate_recommendation_score(
    material: SustainableMaterial,
    user_metrics: UserCarbonMetrics | None,
    industry_averages: Mapping[str, float] | None,
) -> float:
    """Score 0-100 for how well a material fits the user's emissions profile.

    Weights: carbon savings vs. industry average 40, high-impact category 30,
    supplier rating 20, local sourcing 10. Missing user metrics or a material
    too incomplete to score get the neutral 50.
    """
    if user_metrics is None:
        return NEUTRAL_SCORE

    try:
        industry_avg = industry_average_for(material.category, industry_averages)
        footprint = float(material.ecoImpact.carbonFootprint)
        carbon_score = max(0.0, (industry_avg - footprint) / industry_avg * CARBON_WEIGHT)

        category_score = (
            CATEGORY_WEIGHT if material.category in user_metrics.highImpactCategories else 0.0
        )

        rating = material.supplier.rating if material.supplier is not None else None
        supplier_score = max(0.0, float(rating or DEFAULT_SUPPLIER_RATING) * SUPPLIER_POINTS_PER_STAR)

        local_score = LOCAL_BONUS if material.ecoImpact.local else 0.0
    except (AttributeError, TypeError, ValueError, ZeroDivisionError) as exc:
        logger.warning("Could not score material %s: %s", getattr(material, "id", None), exc)
        return NEUTRAL_SCORE

    score = carbon_score + category_score + supplier_score + local_score
    if not math.isfinite(score):
        logger.warning("Non-finite score for material %s", material.id)
        return NEUTRAL_SCORE
    return min(100.0, max(0.0, score))


def potential_savings(material: SustainableMaterial, industry_average: float, quantity: float) -> float:
    """kg CO2e saved by using ``quantity`` units instead of the industry average."""
    footprint = material.ecoImpact.carbonFootprint if material.ecoImpact else None
    if footprint is None:
        return 0.0
    return (industry_average - footprint) * quantity


def recommendation_badge(score: float) -> str:
    if score >= 80:
        return "Highly Recommended"
    if score >= 60:
        return "Recommended"
    return "Good Option"


def eco_impact_level(carbon_footprint: float | None) -> str | None:
    if carbon_footprint is None:
        return None
    if carbon_footprint < 50:
        return "low"
    if carbon_footprint < 150:
        return "medium"
    return "high"


def normalize_material(raw: Mapping[str, Any]) -> SustainableMaterial:
    """Coerce a loosely shaped catalogue record into a SustainableMaterial."""
    eco = raw.get("ecoImpact")
    if not isinstance(eco, Mapping):
        eco = {}

    def eco_field(name: str) -> Any:
        value = eco.get(name)
        return raw.get(name) if value is None else value

    footprint = None
    for candidate in (eco.get("carbonFootprint"), raw.get("carbonFootprint"), raw.get("gwpA1A3")):
        footprint = _number(candidate)
        if footprint is not None:
            break

    category = str(raw.get("category") or "other").lower()
    if category not in DEFAULT_INDUSTRY_AVERAGES:
        category = "other"

    supplier = None
    raw_supplier = raw.get("supplier")
    if isinstance(raw_supplier, Mapping):
        supplier = Supplier(
            id=str(raw_supplier.get("id") or raw_supplier.get("_id") or "unknown"),
            name=str(raw_supplier.get("name") or "Unknown Supplier"),
            location=str(raw_supplier.get("location") or "Unknown"),
            certifications=_string_list(
                raw_supplier.get("certifications") or raw_supplier.get("certification")
            ),
            rating=_number(raw_supplier.get("rating")),
        )

    specs = raw.get("technicalSpecs")
    material_id = raw.get("id") or raw.get("_id") or f"material-{uuid.uuid4().hex[:9]}"

    return SustainableMaterial(
        id=str(material_id),
        name=str(raw.get("name") or "Unnamed Material"),
        description=str(raw.get("description") or "No description available"),
        category=category,
        cost=_number(raw.get("cost")) or _number(raw.get("price")) or 0.0,
        unit=str(raw.get("unit") or "unit"),
        availability=str(raw.get("availability") or "medium"),
        ecoImpact=EcoImpact(
            carbonFootprint=DEFAULT_CARBON_FOOTPRINT if footprint is None else footprint,
            waterUsage=_number(eco_field("waterUsage")) or 0.0,
            energyConsumption=_number(eco_field("energyConsumption")) or 0.0,
            recycledContent=_number(eco_field("recycledContent")) or 0.0,
            recyclability=_number(eco_field("recyclability")),
            renewable=bool(eco_field("renewable")),
            local=bool(eco_field("local")),
            certifications=_string_list(eco_field("certifications")),
        ),
        supplier=supplier,
        technicalSpecs=dict(specs) if isinstance(specs, Mapping) else {},
    )


def _matches_search(material: SustainableMaterial, search: str) -> bool:
    if not search:
        return True
    needle = search.lower()
    supplier_name = material.supplier.name if material.supplier else None
    haystacks = (material.name, material.description, supplier_name)
    return any(needle in text.lower() for text in haystacks if text)


def _footprint_key(material: ScoredMaterial) -> float:
    footprint = material.ecoImpact.carbonFootprint if material.ecoImpact else None
    return math.inf if footprint is None else footprint


SORT_KEYS = {
    "recommended": lambda m: -m.recommendationScore,
    "carbon": _footprint_key,
    "price": lambda m: m.cost,
    "rating": lambda m: -((m.supplier.rating if m.supplier else None) or 0.0),
}


def score_material(
    material: SustainableMaterial,
    user_metrics: UserCarbonMetrics | None,
    industry_averages: Mapping[str, float] | None,
    estimated_quantity: float,
) -> ScoredMaterial:
    industry_avg = industry_average_for(material.category, industry_averages)
    score = calculate_recommendation_score(material, user_metrics, industry_averages)
    footprint = material.ecoImpact.carbonFootprint if material.ecoImpact else None
    return ScoredMaterial(
        **dict(material),
        recommendationScore=score,
        potentialSavings=potential_savings(material, industry_avg, estimated_quantity),
        industryAverage=industry_avg,
        badge=recommendation_badge(score),
        ecoImpactLevel=eco_impact_level(footprint),
    )


def rank_materials(
    materials: Iterable[SustainableMaterial],
    user_metrics: UserCarbonMetrics | None,
    industry_averages: Mapping[str, float] | None,
    category: str = "all",
    search: str = "",
    sort_by: SortOption = "recommended",
    estimated_quantity: float = 1000.0,
) -> list[ScoredMaterial]:
    """Filter, score and sort a material listing."""
    scored = [
        score_material(material, user_metrics, industry_averages, estimated_quantity)
        for material in materials
        if (category == "all" or material.category == category) and _matches_search(material, search)
    ]
    sort_key = SORT_KEYS.get(sort_by)
    if sort_key is not None:
        scored.sort(key=sort_key)
    return scored


def personalized_recommendations(
    scored: Iterable[ScoredMaterial],
    user_metrics: UserCarbonMetrics | None,
    limit: int = 3,
) -> list[ScoredMaterial]:
    if user_metrics is None:
        priority = DEFAULT_PRIORITY_CATEGORIES
    else:
        priority = tuple(user_metrics.highImpactCategories)
    return [material for material in scored if material.category in priority][:limit]
