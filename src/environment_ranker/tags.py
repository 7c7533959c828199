"""Short labels attached to ranked configurations."""

from typing import Optional

from .config import TagThresholdsConfig, get_config
from .schema import (
    ChatbotConfiguration,
    CompatibilityScore,
    ConfigurationTier,
    InfrastructureProfile,
    ScaleRequirement,
)

HIGHLY_RECOMMENDED = "Highly Recommended"
GREAT_MATCH = "Great Match"
BEST_VALUE = "Best Value"
EASY_SETUP = "Easy Setup"
VOICE_ENABLED = "Voice Enabled"
ENTERPRISE_READY = "Enterprise Ready"
INDUSTRY_SPECIALIZED = "Industry Specialized"


def generate_tags(
    profile: InfrastructureProfile,
    configuration: ChatbotConfiguration,
    score: CompatibilityScore,
    thresholds: Optional[TagThresholdsConfig] = None,
) -> list[str]:
    """Return every tag whose rule matches, in fixed order.

    Rules fire independently, so a 95-point result is both
    "Highly Recommended" and "Great Match".
    """
    t = thresholds or get_config().tags
    tags = []

    if score.overall >= t.highly_recommended:
        tags.append(HIGHLY_RECOMMENDED)
    if score.overall >= t.great_match:
        tags.append(GREAT_MATCH)
    if score.breakdown.cost >= t.best_value_cost:
        tags.append(BEST_VALUE)
    if configuration.pricing.setup_complexity <= t.easy_setup_max_complexity:
        tags.append(EASY_SETUP)
    if configuration.features.voice_enabled:
        tags.append(VOICE_ENABLED)
    if (profile.scale_requirement == ScaleRequirement.ENTERPRISE
            and configuration.tier == ConfigurationTier.ENTERPRISE):
        tags.append(ENTERPRISE_READY)
    if configuration.industry:
        tags.append(INDUSTRY_SPECIALIZED)

    return tags
