"""Tests for insight generation and result tags."""

from environment_ranker.catalog import default_catalog
from environment_ranker.config import InsightThresholdsConfig, RankerConfig
from environment_ranker.engine import RankingEngine
from environment_ranker.explainer import InsightGenerator, summarize
from environment_ranker.schema import (
    BudgetRange,
    CloudProvider,
    DatabaseType,
    DimensionBreakdown,
    InfrastructureProfile,
    ScaleRequirement,
    TechnicalLevel,
)
from environment_ranker.tags import (
    BEST_VALUE,
    EASY_SETUP,
    ENTERPRISE_READY,
    GREAT_MATCH,
    HIGHLY_RECOMMENDED,
    INDUSTRY_SPECIALIZED,
    VOICE_ENABLED,
    generate_tags,
)


CATALOG = default_catalog()


def make_profile(**overrides) -> InfrastructureProfile:
    data = {
        "database": "firebase",
        "cloudProvider": "vercel",
        "integrations": ["webhook"],
        "scaleRequirement": "medium",
        "budgetRange": "professional",
        "technicalLevel": "intermediate",
        "constraints": {"maxLatencyMs": 300, "realTimeRequired": True},
    }
    data.update(overrides)
    return InfrastructureProfile.model_validate(data)


def breakdown(technical, performance, cost, complexity, features) -> DimensionBreakdown:
    return DimensionBreakdown(
        technical=technical,
        performance=performance,
        cost=cost,
        complexity=complexity,
        features=features,
    )


class TestInsightGenerator:
    """Tests for strengths, concerns and recommendations."""

    def setup_method(self):
        self.generator = InsightGenerator(InsightThresholdsConfig())

    def test_strong_configuration(self):
        reasons = self.generator.generate(
            make_profile(), CATALOG.get("professional_voice"), breakdown(100, 100, 100, 80, 100)
        )
        assert reasons.strengths == [
            "Excellent technical compatibility with your infrastructure",
            "Fits your budget range well",
        ]
        assert reasons.concerns == []
        assert reasons.recommendations == []

    def test_thresholds_are_strict(self):
        reasons = self.generator.generate(
            make_profile(), CATALOG.get("professional_voice"), breakdown(80, 70, 80, 80, 100)
        )
        assert reasons.strengths == []
        assert reasons.recommendations == []

    def test_weak_configuration(self):
        reasons = self.generator.generate(
            make_profile(), CATALOG.get("enterprise_suite"), breakdown(24, 72, 0, 15, 100)
        )
        assert "Limited compatibility with your current database/cloud setup" in reasons.concerns
        assert "May exceed your budget requirements" in reasons.concerns
        assert (
            "Implementation complexity may require additional technical resources"
            in reasons.concerns
        )

    def test_recommendations(self):
        reasons = self.generator.generate(
            make_profile(), CATALOG.get("lite_starter"), breakdown(100, 60, 0, 100, 75)
        )
        assert reasons.recommendations == [
            "Consider upgrading your infrastructure for better performance",
            "Voice features could significantly improve user engagement",
        ]

    def test_no_voice_recommendation_for_small_scale(self):
        reasons = self.generator.generate(
            make_profile(scaleRequirement="small"), CATALOG.get("lite_starter"),
            breakdown(100, 100, 100, 100, 100),
        )
        assert reasons.recommendations == []

    def test_compliance_concern_outside_enterprise_tier(self):
        profile = make_profile(
            constraints={"maxLatencyMs": 300, "complianceRequired": ["HIPAA", "GDPR"]}
        )
        scores = breakdown(100, 100, 100, 100, 100)

        reasons = self.generator.generate(profile, CATALOG.get("professional_voice"), scores)
        assert reasons.concerns == [
            "Compliance requirements (GDPR, HIPAA) may need additional review"
        ]

        reasons = self.generator.generate(profile, CATALOG.get("enterprise_suite"), scores)
        assert reasons.concerns == []

    def test_custom_thresholds(self):
        generator = InsightGenerator(InsightThresholdsConfig(technical_strength=10))
        reasons = generator.generate(
            make_profile(), CATALOG.get("lite_starter"), breakdown(50, 100, 0, 0, 0)
        )
        assert "Excellent technical compatibility with your infrastructure" in reasons.strengths


class TestSummarize:
    """Tests for the key drivers summary."""

    def test_empty(self):
        assert summarize([]) == []

    def test_close_alternative(self):
        engine = RankingEngine(CATALOG, RankerConfig())
        results = engine.rank(make_profile())
        drivers = summarize(results)

        assert drivers[0].startswith("Restaurant Pro scores")
        assert len(drivers) <= 4
        assert any(d.startswith("Close alternative: ChatChatGo Professional + Voice") for d in drivers)


class TestTags:
    """Tests for result tags."""

    def setup_method(self):
        self.engine = RankingEngine(CATALOG, RankerConfig())

    def test_demo_profile_tags(self):
        results = {r.configuration.id: r for r in self.engine.rank(make_profile())}

        assert results["professional_voice"].tags == [
            HIGHLY_RECOMMENDED, GREAT_MATCH, BEST_VALUE, VOICE_ENABLED,
        ]
        assert results["restaurant_special"].tags == [
            HIGHLY_RECOMMENDED, GREAT_MATCH, BEST_VALUE, EASY_SETUP,
            VOICE_ENABLED, INDUSTRY_SPECIALIZED,
        ]
        assert results["lite_starter"].tags == [EASY_SETUP]

    def test_enterprise_ready(self):
        profile = InfrastructureProfile(
            database=DatabaseType.POSTGRESQL,
            cloud_provider=CloudProvider.AWS,
            integrations={"rest_api"},
            scale_requirement=ScaleRequirement.ENTERPRISE,
            budget_range=BudgetRange.ENTERPRISE,
            technical_level=TechnicalLevel.EXPERT,
            constraints={"max_latency_ms": 1000, "high_availability": True, "real_time_required": True},
        )
        result = self.engine.score_configuration(profile, CATALOG.get("enterprise_suite"))
        assert ENTERPRISE_READY in result.tags
        assert EASY_SETUP not in result.tags

    def test_enterprise_ready_needs_enterprise_scale(self):
        result = self.engine.score_configuration(make_profile(), CATALOG.get("enterprise_suite"))
        assert ENTERPRISE_READY not in result.tags

    def test_tags_follow_thresholds(self):
        result = self.engine.score_configuration(make_profile(), CATALOG.get("lite_starter"))
        assert generate_tags(make_profile(), result.configuration, result.score) == [EASY_SETUP]
