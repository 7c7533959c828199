"""Explainer - turns dimension scores into human-readable insights.

Each rule is independent of the others, so rule order only affects the order
of bullets within a list, never which bullets appear.
"""

from typing import Optional

from .config import InsightThresholdsConfig, get_config
from .schema import (
    ChatbotConfiguration,
    ConfigurationTier,
    DimensionBreakdown,
    InfrastructureProfile,
    RankingResult,
    ScaleRequirement,
    ScoreReasons,
)


class InsightGenerator:
    """Generates strengths, concerns and recommendations for a configuration.

    Configuration:
    - Thresholds can be customized via ranker-config.yaml (``insights``)
    """

    def __init__(self, thresholds: Optional[InsightThresholdsConfig] = None):
        """Initialize generator with configuration."""
        self.thresholds = thresholds or get_config().insights

    def generate(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
        breakdown: DimensionBreakdown,
    ) -> ScoreReasons:
        """Generate justification bullets for one scored configuration.

        Args:
            profile: The profile that was scored
            configuration: The scored catalog entry
            breakdown: Its five dimension scores

        Returns:
            Strengths, concerns and recommendations
        """
        t = self.thresholds
        strengths = []
        concerns = []
        recommendations = []

        if breakdown.technical > t.technical_strength:
            strengths.append("Excellent technical compatibility with your infrastructure")
        if breakdown.cost > t.cost_strength:
            strengths.append("Fits your budget range well")
        if breakdown.complexity > t.complexity_strength:
            strengths.append("Easy to implement with your technical expertise")

        if breakdown.technical < t.technical_concern:
            concerns.append("Limited compatibility with your current database/cloud setup")
        if breakdown.cost < t.cost_concern:
            concerns.append("May exceed your budget requirements")
        if breakdown.complexity < t.complexity_concern:
            concerns.append("Implementation complexity may require additional technical resources")

        compliance = profile.constraints.compliance_required
        if compliance and configuration.tier != ConfigurationTier.ENTERPRISE:
            concerns.append(
                f"Compliance requirements ({', '.join(sorted(compliance))}) may need additional review"
            )

        if breakdown.performance < t.performance_recommendation:
            recommendations.append("Consider upgrading your infrastructure for better performance")
        if not configuration.features.voice_enabled and profile.scale_requirement != ScaleRequirement.SMALL:
            recommendations.append("Voice features could significantly improve user engagement")

        return ScoreReasons(
            strengths=strengths,
            concerns=concerns,
            recommendations=recommendations,
        )


def summarize(results: list[RankingResult]) -> list[str]:
    """Key drivers for the top-ranked configuration.

    Returns an empty list when there is nothing to recommend.
    """
    if not results:
        return []

    primary = results[0]
    drivers = [
        f"{primary.configuration.name} scores {primary.score.overall}/100 "
        f"(confidence {primary.confidence}%)"
    ]
    drivers.extend(primary.score.reasons.strengths[:2])

    if len(results) > 1:
        runner_up = results[1]
        gap = primary.score.overall - runner_up.score.overall
        if gap < 5:
            drivers.append(
                f"Close alternative: {runner_up.configuration.name} ({runner_up.score.overall}/100)"
            )

    return drivers[:4]
