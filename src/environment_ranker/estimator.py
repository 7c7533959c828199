"""Cost and rollout plan estimates for a configuration."""

import math
from typing import Optional

from .config import EstimateConfig, get_config
from .schema import (
    ChatbotConfiguration,
    EstimatedCosts,
    ImplementationPhase,
    ImplementationPlan,
    InfrastructureProfile,
    RiskLevel,
    TechnicalLevel,
)

# Phase names and fixed task lists, in rollout order.
PHASE_TEMPLATES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Setup & Configuration", ("Environment setup", "Database configuration", "Initial deployment")),
    ("Customization & Integration", ("Brand customization", "API integrations", "Feature configuration")),
    ("Testing & Launch", ("Testing", "User training", "Go-live support")),
)


class CostEstimator:
    """Derives cost estimates and a phased implementation plan."""

    def __init__(self, config: Optional[EstimateConfig] = None):
        self.config = config or get_config().estimates

    def estimate_costs(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> EstimatedCosts:
        """Setup, monthly and annual cost in USD.

        Beginner teams pay a setup surcharge; annual billing is discounted.
        """
        cfg = self.config
        multiplier = cfg.beginner_setup_multiplier if profile.technical_level == TechnicalLevel.BEGINNER else 1.0
        monthly = configuration.pricing.monthly_cost.min

        return EstimatedCosts(
            setup=configuration.pricing.setup_complexity * cfg.setup_cost_per_complexity * multiplier,
            monthly=monthly,
            annual=monthly * 12 * cfg.annual_discount_factor,
        )

    def build_plan(self, configuration: ChatbotConfiguration) -> ImplementationPlan:
        """Three-phase plan proportioned over the implementation time."""
        days = configuration.pricing.implementation_time_days
        phases = [
            ImplementationPhase(
                name=name,
                # round() first so 10 * 0.3 stays 3 rather than 4
                duration_days=math.ceil(round(days * ratio, 9)),
                tasks=list(tasks),
            )
            for (name, tasks), ratio in zip(PHASE_TEMPLATES, self.config.phase_ratios)
        ]

        return ImplementationPlan(
            phases=phases,
            total_duration=days,
            risk_level=self.risk_level(configuration.pricing.setup_complexity),
        )

    def risk_level(self, setup_complexity: int) -> RiskLevel:
        if setup_complexity > self.config.high_risk_above_complexity:
            return RiskLevel.HIGH
        if setup_complexity > self.config.medium_risk_above_complexity:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW
