from ..schemas import CarbonSummary, EfficiencyScore

# (minimum savings-to-emissions percentage, grade), best first
GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (50.0, "A"),
    (30.0, "B"),
    (10.0, "C"),
)


def efficiency_percentage(total_emissions: float, total_savings: float) -> float | None:
    if total_emissions == 0:
        return None
    return total_savings / total_emissions * 100


def efficiency_grade(total_emissions: float, total_savings: float) -> str:
    """Letter grade for savings relative to emissions; no emissions at all is A+."""
    efficiency = efficiency_percentage(total_emissions, total_savings)
    if efficiency is None:
        return "A+"
    for threshold, grade in GRADE_THRESHOLDS:
        if efficiency >= threshold:
            return grade
    return "D"


def score_summary(summary: CarbonSummary) -> EfficiencyScore:
    return EfficiencyScore(
        grade=efficiency_grade(summary.totalEmissions, summary.totalSavings),
        efficiency=efficiency_percentage(summary.totalEmissions, summary.totalSavings),
    )
