"""Aggregator - combines dimension scores into an overall score and confidence."""

from .config import ScoringWeightsConfig
from .schema import DimensionBreakdown
from .scorer import clamp_score


def aggregate(breakdown: DimensionBreakdown, weights: ScoringWeightsConfig) -> int:
    """Weighted overall score (0-100).

    Weights are fixed per configuration and sum to 1.0, so the result can
    never exceed the highest dimension score.
    """
    total = (
        breakdown.technical * weights.technical
        + breakdown.performance * weights.performance
        + breakdown.cost * weights.cost
        + breakdown.complexity * weights.complexity
        + breakdown.features * weights.features
    )
    return clamp_score(total)


def population_variance(values: list[int]) -> float:
    """Population variance; 0.0 for an empty list."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def calculate_confidence(overall: int, breakdown: DimensionBreakdown) -> int:
    """Confidence from the overall score and how much the dimensions agree.

    A configuration that is excellent on one dimension and poor on another
    keeps a middling overall score but reports low confidence.
    """
    consistency = max(0.0, 100 - population_variance(breakdown.values()))
    return clamp_score((overall + consistency) / 2)
