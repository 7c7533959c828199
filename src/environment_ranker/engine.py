"""Ranking Engine - orchestrates scoring of the whole catalog.

For each catalog entry: score the five dimensions, aggregate, explain,
estimate, tag. Then sort and assign ranks. The engine holds no mutable state
apart from the catalog reference, which is only ever replaced wholesale.
"""

import logging
from typing import Any, Mapping, Optional, Union

from .aggregator import aggregate, calculate_confidence
from .catalog import ConfigurationCatalog, default_catalog
from .config import RankerConfig, get_config
from .estimator import CostEstimator
from .explainer import InsightGenerator
from .normalizer import normalize_profile
from .schema import (
    ChatbotConfiguration,
    CompatibilityScore,
    InfrastructureProfile,
    RankingReport,
    RankingResult,
)
from .scorer import DimensionScorer
from .tags import generate_tags

logger = logging.getLogger(__name__)

ProfileInput = Union[InfrastructureProfile, Mapping[str, Any]]


def _sort_key(indexed: tuple[int, RankingResult]) -> tuple[int, int, int]:
    # Highest overall first, then simpler setup, then catalog order
    index, result = indexed
    return (-result.score.overall, result.configuration.pricing.setup_complexity, index)


class RankingEngine:
    """Ranks catalog configurations against an infrastructure profile.

    Example:
        engine = RankingEngine()
        results = engine.rank(profile)
        best = results[0].configuration
    """

    def __init__(
        self,
        catalog: Optional[ConfigurationCatalog] = None,
        config: Optional[RankerConfig] = None,
    ):
        """Initialize the engine.

        Args:
            catalog: Configurations to rank (defaults to the built-in catalog)
            config: Scoring configuration (defaults to the global config)
        """
        self._catalog = catalog if catalog is not None else default_catalog()
        self.config = config or get_config()
        self.scorer = DimensionScorer(self.config)
        self.insights = InsightGenerator(self.config.insights)
        self.estimator = CostEstimator(self.config.estimates)

    @property
    def catalog(self) -> ConfigurationCatalog:
        return self._catalog

    def swap_catalog(self, catalog: ConfigurationCatalog) -> ConfigurationCatalog:
        """Replace the catalog; returns the previous one.

        Ranking calls already in progress keep the snapshot they started with.
        """
        previous = self._catalog
        self._catalog = catalog
        logger.info(
            "Catalog swapped: %s (%d) -> %s (%d)",
            previous.version, len(previous), catalog.version, len(catalog),
        )
        return previous

    def score_configuration(
        self,
        profile: InfrastructureProfile,
        configuration: ChatbotConfiguration,
    ) -> RankingResult:
        """Score a single configuration. The result is unranked (rank 0)."""
        breakdown = self.scorer.score_all(profile, configuration)
        overall = aggregate(breakdown, self.config.scoring_weights)

        score = CompatibilityScore(
            overall=overall,
            breakdown=breakdown,
            reasons=self.insights.generate(profile, configuration, breakdown),
            estimated_costs=self.estimator.estimate_costs(profile, configuration),
            implementation_plan=self.estimator.build_plan(configuration),
        )

        logger.debug(
            "Scored %s: overall=%d technical=%d performance=%d cost=%d complexity=%d features=%d",
            configuration.id, overall, breakdown.technical, breakdown.performance,
            breakdown.cost, breakdown.complexity, breakdown.features,
        )

        return RankingResult(
            configuration=configuration,
            score=score,
            rank=0,
            confidence=calculate_confidence(overall, breakdown),
            tags=generate_tags(profile, configuration, score, self.config.tags),
        )

    def rank(self, profile: ProfileInput) -> list[RankingResult]:
        """Score every catalog entry and return them ranked.

        Args:
            profile: A validated profile or a raw mapping to normalize

        Returns:
            One result per catalog entry, ranks 1..N, best first. Empty for
            an empty catalog.

        Raises:
            ProfileValidationError: If the profile is invalid. Nothing is
                scored in that case.
        """
        profile = normalize_profile(profile)
        return self._rank_catalog(profile, self._catalog)

    def report(self, profile: ProfileInput) -> RankingReport:
        """Rank and wrap the results with the profile and catalog version."""
        profile = normalize_profile(profile)
        catalog = self._catalog
        return RankingReport(
            profile=profile,
            catalog_version=catalog.version,
            results=self._rank_catalog(profile, catalog),
        )

    def _rank_catalog(
        self,
        profile: InfrastructureProfile,
        catalog: ConfigurationCatalog,
    ) -> list[RankingResult]:
        """Rank one catalog snapshot."""
        scored = [
            (index, self.score_configuration(profile, configuration))
            for index, configuration in enumerate(catalog)
        ]
        scored.sort(key=_sort_key)

        results = [
            result.model_copy(update={"rank": position})
            for position, (_, result) in enumerate(scored, start=1)
        ]

        if results:
            logger.info(
                "Ranked %d configurations from catalog %s; top: %s (%d)",
                len(results), catalog.version,
                results[0].configuration.id, results[0].score.overall,
            )
        else:
            logger.info("Catalog %s is empty; no configurations ranked", catalog.version)

        return results
