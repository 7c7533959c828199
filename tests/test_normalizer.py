"""Tests for profile normalization and profile files."""

import json

import pytest
import yaml

from environment_ranker.exceptions import ProfileValidationError
from environment_ranker.normalizer import (
    ProfileNormalizer,
    load_profile,
    normalize_profile,
    validate_profile,
)
from environment_ranker.schema import (
    BudgetRange,
    CloudProvider,
    DatabaseType,
    InfrastructureProfile,
    IntegrationType,
    ScaleRequirement,
    TechnicalLevel,
)


def raw_profile(**overrides) -> dict:
    data = {
        "database": "firebase",
        "cloudProvider": "vercel",
        "integrations": ["webhook"],
        "scaleRequirement": "medium",
        "budgetRange": "professional",
        "technicalLevel": "intermediate",
        "constraints": {
            "maxLatencyMs": 300,
            "highAvailability": False,
            "realTimeRequired": True,
        },
    }
    data.update(overrides)
    return data


class TestProfileNormalizer:
    """Tests for ProfileNormalizer."""

    def setup_method(self):
        self.normalizer = ProfileNormalizer()

    def test_canonical_profile(self):
        profile = self.normalizer.normalize(raw_profile())
        assert profile.database == DatabaseType.FIREBASE
        assert profile.cloud_provider == CloudProvider.VERCEL
        assert profile.integrations == frozenset({IntegrationType.WEBHOOK})
        assert profile.scale_requirement == ScaleRequirement.MEDIUM
        assert profile.budget_range == BudgetRange.PROFESSIONAL
        assert profile.technical_level == TechnicalLevel.INTERMEDIATE
        assert profile.constraints.max_latency_ms == 300

    def test_snake_case_keys(self):
        profile = self.normalizer.normalize({
            "database": "mysql",
            "cloud_provider": "gcp",
            "scale_requirement": "small",
            "budget_range": "starter",
            "technical_level": "beginner",
            "constraints": {"max_latency_ms": 800},
        })
        assert profile.cloud_provider == CloudProvider.GCP
        assert profile.integrations == frozenset()

    def test_case_and_aliases(self):
        profile = self.normalizer.normalize(raw_profile(
            database="Postgres",
            cloudProvider="Self-Hosted",
            integrations=["REST", "webhooks", "n8n"],
            technicalLevel="EXPERT",
        ))
        assert profile.database == DatabaseType.POSTGRESQL
        assert profile.cloud_provider == CloudProvider.SELF_HOSTED
        assert profile.integrations == frozenset({
            IntegrationType.REST_API, IntegrationType.WEBHOOK, IntegrationType.N8N,
        })
        assert profile.technical_level == TechnicalLevel.EXPERT

    def test_cloudflare_is_known(self):
        profile = self.normalizer.normalize(raw_profile(cloudProvider="cloudflare"))
        assert profile.cloud_provider == CloudProvider.CLOUDFLARE

    def test_single_integration_string(self):
        profile = self.normalizer.normalize(raw_profile(integrations="zapier"))
        assert profile.integrations == frozenset({IntegrationType.ZAPIER})

    def test_duplicate_integrations_collapse(self):
        profile = self.normalizer.normalize(raw_profile(integrations=["webhook", "Webhook", "webhooks"]))
        assert profile.integrations == frozenset({IntegrationType.WEBHOOK})

    def test_null_integrations(self):
        profile = self.normalizer.normalize(raw_profile(integrations=None))
        assert profile.integrations == frozenset()

    def test_legacy_keys(self):
        data = raw_profile(constraints={"maxLatency": 250})
        data["cloud"] = data.pop("cloudProvider")
        data["budget"] = data.pop("budgetRange")
        profile = self.normalizer.normalize(data)
        assert profile.constraints.max_latency_ms == 250
        assert profile.cloud_provider == CloudProvider.VERCEL
        assert profile.budget_range == BudgetRange.PROFESSIONAL

    def test_informational_fields_kept(self):
        profile = self.normalizer.normalize(raw_profile(
            id="acme",
            name="Acme Corp",
            constraints={"maxLatencyMs": 300, "dataResidency": "EU", "complianceRequired": ["GDPR"]},
            existingServices={"auth": "auth0"},
        ))
        assert profile.id == "acme"
        assert profile.constraints.data_residency == "EU"
        assert profile.constraints.compliance_required == frozenset({"GDPR"})
        assert profile.existing_services.auth == "auth0"

    def test_unknown_database_rejected(self):
        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(raw_profile(database="oracle"))
        assert len(exc_info.value.issues) == 1
        assert exc_info.value.issues[0].startswith("database: unknown value 'oracle'")

    def test_all_enum_issues_reported_together(self):
        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(raw_profile(
                database="oracle", cloudProvider="heroku", integrations=["kafka"],
            ))
        issues = exc_info.value.issues
        assert len(issues) == 3
        assert any(i.startswith("cloudProvider") for i in issues)
        assert any(i.startswith("integrations") for i in issues)

    def test_non_positive_latency_rejected(self):
        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(raw_profile(constraints={"maxLatencyMs": 0}))
        assert any("constraints" in i for i in exc_info.value.issues)

    @pytest.mark.parametrize("constraints", [
        {"maxLatencyMs": True},
        {"maxLatencyMs": "300"},
        {"maxLatencyMs": 300, "highAvailability": "yes"},
        {"maxLatencyMs": 300, "realTimeRequired": 1},
    ])
    def test_constraints_are_not_coerced(self, constraints):
        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(raw_profile(constraints=constraints))
        assert all(i.startswith("constraints.") for i in exc_info.value.issues)

    def test_unknown_value_and_missing_field_reported_together(self):
        data = raw_profile(database="oracle")
        del data["budgetRange"]

        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(data)

        issues = exc_info.value.issues
        assert len(issues) == 2
        assert issues[0].startswith("database: unknown value 'oracle'")
        assert issues[1].startswith("budgetRange:")

    def test_unknown_integration_and_bad_latency_reported_together(self):
        with pytest.raises(ProfileValidationError) as exc_info:
            self.normalizer.normalize(raw_profile(
                integrations=["webhook", "kafka"], constraints={"maxLatencyMs": -1},
            ))
        issues = exc_info.value.issues
        assert len(issues) == 2
        assert issues[0].startswith("integrations: unknown value 'kafka'")
        assert issues[1].startswith("constraints.maxLatencyMs")

    def test_missing_field_rejected(self):
        data = raw_profile()
        del data["technicalLevel"]
        with pytest.raises(ProfileValidationError):
            self.normalizer.normalize(data)

    def test_unknown_field_rejected(self):
        with pytest.raises(ProfileValidationError):
            self.normalizer.normalize(raw_profile(favouriteColour="blue"))

    def test_non_mapping_rejected(self):
        with pytest.raises(ProfileValidationError, match="must be an object"):
            self.normalizer.normalize(["firebase"])

    def test_input_not_mutated(self):
        data = raw_profile(database="Postgres")
        self.normalizer.normalize(data)
        assert data["database"] == "Postgres"


class TestNormalizeProfile:
    """Tests for the module-level helpers."""

    def test_validated_profile_passes_through(self):
        profile = normalize_profile(raw_profile())
        assert normalize_profile(profile) is profile
        assert isinstance(profile, InfrastructureProfile)

    def test_load_json(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps(raw_profile()))
        assert load_profile(path).database == DatabaseType.FIREBASE

    def test_load_single_element_list(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text(json.dumps([raw_profile()]))
        assert load_profile(path).cloud_provider == CloudProvider.VERCEL

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "profile.yaml"
        path.write_text(yaml.safe_dump(raw_profile(database="mongo")))
        assert load_profile(path).database == DatabaseType.MONGODB

    def test_validate_profile(self, tmp_path):
        good = tmp_path / "good.json"
        good.write_text(json.dumps(raw_profile()))
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps(raw_profile(budgetRange="unlimited")))

        assert validate_profile(good) == (True, [])
        is_valid, issues = validate_profile(bad)
        assert not is_valid
        assert issues[0].startswith("budgetRange")

    def test_unreadable_profile(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text("not json")
        is_valid, issues = validate_profile(path)
        assert not is_valid
        assert "Could not read profile" in issues[0]
