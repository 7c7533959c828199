"""Dimension scorers for the Environment Ranking Engine.

Scores one catalog configuration against an infrastructure profile on five
independent dimensions. Every dimension is a pure function of
(profile, configuration) and returns an integer 0-100.
"""

import logging
import math
from typing import Mapping, Optional

from .compatibility import (
    DATABASE_ADJACENCY,
    is_adjacent,
    is_ha_capable,
    technical_gap,
)
from .config import RankerConfig, get_config
from .schema import (
    BudgetRange,
    ChatbotConfiguration,
    DatabaseType,
    DimensionBreakdown,
    InfrastructureProfile,
    ScaleRequirement,
    TechnicalLevel,
)

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp a score into 0-100."""
    return max(0, min(100, round_half_up(value)))


class DimensionScorer:
    """Scores a configuration on the five ranking dimensions.

    Scoring principles:
    - Cloud mismatch is a hard zero for its share (no partial credit)
    - Database mismatch earns partial credit when a close family is supported
    - Empty requirement sets count as fully satisfied
    - All constants come from RankerConfig so they can be recalibrated
    """

    def __init__(
        self,
        config: Optional[RankerConfig] = None,
        adjacency: Mapping[DatabaseType, frozenset[DatabaseType]] = DATABASE_ADJACENCY,
    ):
        """Initialize scorer with optional custom configuration."""
        self.config = config or get_config()
        self.adjacency = adjacency

    def score_all(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> DimensionBreakdown:
        """Score every dimension and return the breakdown."""
        return DimensionBreakdown(
            technical=self.score_technical(profile, configuration),
            performance=self.score_performance(profile, configuration),
            cost=self.score_cost(profile, configuration),
            complexity=self.score_complexity(profile, configuration),
            features=self.score_features(profile, configuration),
        )

    # ------------------------------------------------------------------
    # Technical compatibility
    # ------------------------------------------------------------------

    def score_technical(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> int:
        """Score database, cloud and integration compatibility."""
        cfg = self.config.technical
        compat = configuration.compatibility

        score = self.database_points(profile.database, compat.supported_databases)
        score += self.cloud_points(profile, configuration)

        # Integrations
        if profile.integrations:
            matching = profile.integrations & compat.supported_integrations
            score += len(matching) / max(len(profile.integrations), 1) * cfg.integration_points
        else:
            score += cfg.integration_points

        return clamp_score(score)

    def database_points(
        self,
        database: DatabaseType,
        supported: frozenset[DatabaseType],
    ) -> float:
        """Points for the database share of the technical budget."""
        cfg = self.config.technical
        if database in supported:
            return cfg.database_points
        if is_adjacent(database, supported, self.adjacency):
            return cfg.database_points * cfg.adjacent_database_credit
        return 0.0

    def cloud_points(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> float:
        """Points for the cloud share of the technical budget (all or nothing)."""
        if profile.cloud_provider in configuration.compatibility.supported_clouds:
            return self.config.technical.cloud_points
        return 0.0

    # ------------------------------------------------------------------
    # Performance fit
    # ------------------------------------------------------------------

    def score_performance(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> int:
        """Score scale, latency and availability fit."""
        cfg = self.config.performance

        score = self.scale_factor(profile.scale_requirement, configuration) * cfg.scale_points
        score += self.latency_factor(profile.constraints.max_latency_ms, configuration) * cfg.latency_points

        if profile.constraints.high_availability:
            if is_ha_capable(profile.cloud_provider, configuration.compatibility.supported_clouds):
                ha_factor = 1.0
            else:
                ha_factor = cfg.availability_fallback_factor
        else:
            # No HA requirement, full points
            ha_factor = 1.0
        score += ha_factor * cfg.availability_points

        return clamp_score(score)

    def scale_factor(self, scale: ScaleRequirement, configuration: ChatbotConfiguration) -> float:
        """Fit of the configuration's expected QPS to the scale band."""
        cfg = self.config.performance
        band = cfg.scale_bands[scale]
        qps = configuration.requirements.estimated_qps

        if band.min <= qps <= band.max:
            return 1.0
        if qps < band.min:
            return cfg.under_provisioned_factor
        return cfg.over_provisioned_factor

    def latency_factor(self, max_latency_ms: int, configuration: ChatbotConfiguration) -> float:
        """Fit of the stated latency budget; voice needs a tighter baseline."""
        cfg = self.config.performance
        if configuration.features.voice_enabled:
            baseline = cfg.voice_latency_baseline_ms
        else:
            baseline = cfg.text_latency_baseline_ms

        if max_latency_ms >= baseline:
            return 1.0
        return max(cfg.latency_floor_factor, max_latency_ms / baseline)

    # ------------------------------------------------------------------
    # Cost alignment
    # ------------------------------------------------------------------

    def score_cost(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> int:
        """Score overlap between the budget range and the monthly cost band."""
        budget = self.config.cost.budget_ranges[profile.budget_range]
        cost = configuration.pricing.monthly_cost

        if cost.min > budget.max:
            return 0

        if cost.max <= budget.max and cost.min >= budget.min:
            return 100

        overlap = max(0.0, min(budget.max, cost.max) - max(budget.min, cost.min))
        width = max(budget.max - budget.min, 1)
        return clamp_score(overlap / width * 100)

    # ------------------------------------------------------------------
    # Implementation complexity (higher = easier)
    # ------------------------------------------------------------------

    def score_complexity(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> int:
        """Score how easy the configuration is to roll out for this team."""
        cfg = self.config.complexity
        pricing = configuration.pricing

        score = 100.0
        gap = technical_gap(profile.technical_level, configuration.compatibility.min_technical_level)
        score -= gap * cfg.technical_gap_penalty
        score -= (pricing.setup_complexity - 1) * cfg.setup_complexity_penalty
        if pricing.implementation_time_days > cfg.long_rollout_threshold_days:
            score -= cfg.long_rollout_penalty

        return clamp_score(score)

    # ------------------------------------------------------------------
    # Feature match
    # ------------------------------------------------------------------

    def required_features(self, profile: InfrastructureProfile) -> list[str]:
        """Feature flags this profile needs, in evaluation order."""
        required = []
        if profile.scale_requirement != ScaleRequirement.SMALL:
            required.append("voice_enabled")
        if profile.constraints.real_time_required:
            required.append("real_time_chat")
        if profile.budget_range != BudgetRange.FREE:
            required.append("analytics")
        required.append("lead_capture")
        if profile.technical_level in (TechnicalLevel.ADVANCED, TechnicalLevel.EXPERT):
            required.append("api_integration")
        return required

    def score_features(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> int:
        """Score the share of profile-driven feature requirements met."""
        required = self.required_features(profile)
        if not required:
            return 100

        satisfied = sum(1 for flag in required if getattr(configuration.features, flag))
        logger.debug(
            "%s satisfies %d of %d required features",
            configuration.id, satisfied, len(required),
        )
        return clamp_score(satisfied / len(required) * 100)
