"""Pydantic models for the Environment Ranking Engine.

Input schemas for the infrastructure profile and catalog entries, and output
schemas for scored and ranked configurations. Field names are snake_case;
the camelCase keys sent by the profile form are accepted as aliases.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    field_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# Closed value sets
# =============================================================================


class DatabaseType(str, Enum):
    """Primary data store of the prospect."""
    FIREBASE = "firebase"
    SUPABASE = "supabase"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MONGODB = "mongodb"
    SQLITE = "sqlite"
    REDIS = "redis"
    CUSTOM_API = "custom_api"


class CloudProvider(str, Enum):
    """Hosting environment of the prospect."""
    VERCEL = "vercel"
    AWS = "aws"
    GCP = "gcp"
    AZURE = "azure"
    CLOUDFLARE = "cloudflare"
    SELF_HOSTED = "self_hosted"
    SHARED_HOSTING = "shared_hosting"


class IntegrationType(str, Enum):
    """Integration mechanisms already in use."""
    WEBHOOK = "webhook"
    REST_API = "rest_api"
    GRAPHQL = "graphql"
    N8N = "n8n"
    ZAPIER = "zapier"
    CUSTOM = "custom"
    NONE = "none"


class ScaleRequirement(str, Enum):
    """Expected traffic scale."""
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class BudgetRange(str, Enum):
    """Monthly budget tier."""
    FREE = "free"
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"


class TechnicalLevel(str, Enum):
    """Technical capability of the team, in ascending order."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"

    @property
    def ordinal(self) -> int:
        """Position in the beginner..expert ordering (0-3)."""
        return list(type(self)).index(self)


class ResourceLevel(str, Enum):
    """Coarse resource usage rating."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskLevel(str, Enum):
    """Qualitative rollout risk."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ConfigurationTier(str, Enum):
    """Product tier of a catalog entry."""
    LITE = "lite"
    PROFESSIONAL = "professional"
    ENTERPRISE = "enterprise"
    SPECIALIZED = "specialized"


def _sorted_values(items: Iterable) -> list:
    """Serialize a set deterministically."""
    return sorted(i.value if isinstance(i, Enum) else i for i in items)


class _FrozenModel(BaseModel):
    """Immutable model accepting snake_case or camelCase keys."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# =============================================================================
# Infrastructure profile (input)
# =============================================================================


class ProfileConstraints(_FrozenModel):
    """Operational constraints stated by the prospect."""
    # Strict: booleans and strings such as "yes" are not coerced
    max_latency_ms: StrictInt = Field(..., gt=0, description="Maximum acceptable response latency")
    high_availability: StrictBool = False
    real_time_required: StrictBool = False
    compliance_required: frozenset[str] = Field(default_factory=frozenset)
    data_residency: Optional[str] = None  # informational only

    @field_serializer("compliance_required")
    def _serialize_compliance(self, value: frozenset[str]) -> list[str]:
        return _sorted_values(value)


class ExistingServices(_FrozenModel):
    """Services the prospect already runs (informational, not scored)."""
    auth: Optional[str] = None
    storage: Optional[str] = None
    monitoring: Optional[str] = None
    analytics: Optional[str] = None


class InfrastructureProfile(_FrozenModel):
    """Description of a prospect's infrastructure and constraints.

    This is the only input to a ranking call. It is treated as trusted once
    it has passed validation.
    """
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None

    database: DatabaseType
    cloud_provider: CloudProvider
    integrations: frozenset[IntegrationType] = Field(default_factory=frozenset)

    scale_requirement: ScaleRequirement
    budget_range: BudgetRange
    technical_level: TechnicalLevel

    constraints: ProfileConstraints
    existing_services: ExistingServices = Field(default_factory=ExistingServices)

    @field_serializer("integrations")
    def _serialize_integrations(self, value: frozenset[IntegrationType]) -> list[str]:
        return _sorted_values(value)


# =============================================================================
# Catalog entries
# =============================================================================


class ConfigurationFeatures(_FrozenModel):
    """Feature flags of a configuration."""
    voice_enabled: bool = False
    multi_language: bool = False
    analytics: bool = False
    lead_capture: bool = False
    custom_branding: bool = False
    api_integration: bool = False
    real_time_chat: bool = False


class ResourceRequirements(_FrozenModel):
    """Resources a configuration needs to run."""
    min_database_connections: int = Field(..., ge=0)
    estimated_qps: int = Field(..., ge=0, alias="estimatedQPS")
    storage_needs: ResourceLevel = ResourceLevel.LOW
    compute_intensity: ResourceLevel = ResourceLevel.LOW
    bandwidth_usage: ResourceLevel = ResourceLevel.LOW


class CompatibilityRequirements(_FrozenModel):
    """Environments a configuration is known to work with."""
    supported_databases: frozenset[DatabaseType] = Field(default_factory=frozenset)
    supported_clouds: frozenset[CloudProvider] = Field(default_factory=frozenset)
    supported_integrations: frozenset[IntegrationType] = Field(default_factory=frozenset)
    min_technical_level: TechnicalLevel = TechnicalLevel.BEGINNER

    @field_serializer("supported_databases", "supported_clouds", "supported_integrations")
    def _serialize_sets(self, value: frozenset) -> list[str]:
        return _sorted_values(value)


class CostRange(_FrozenModel):
    """Inclusive monthly cost band in USD."""
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "CostRange":
        if self.min > self.max:
            raise ValueError(f"min ({self.min}) must not exceed max ({self.max})")
        return self


class PricingInfo(_FrozenModel):
    """Pricing and rollout metadata."""
    setup_complexity: int = Field(..., ge=1, le=5, description="1 = simple, 5 = complex")
    monthly_cost: CostRange
    implementation_time_days: int = Field(..., gt=0)


class ChatbotConfiguration(_FrozenModel):
    """A pre-defined product configuration in the catalog."""
    id: str = Field(..., min_length=1)
    name: str
    description: str = ""
    tier: ConfigurationTier = ConfigurationTier.PROFESSIONAL
    industry: Optional[str] = Field(
        None,
        description="Set when the configuration is specialized for one industry",
    )
    features: ConfigurationFeatures = Field(default_factory=ConfigurationFeatures)
    requirements: ResourceRequirements
    compatibility: CompatibilityRequirements
    pricing: PricingInfo


# =============================================================================
# Scoring and output models
# =============================================================================


class DimensionBreakdown(_FrozenModel):
    """The five dimension scores of a configuration."""
    technical: int = Field(..., ge=0, le=100)
    performance: int = Field(..., ge=0, le=100)
    cost: int = Field(..., ge=0, le=100)
    complexity: int = Field(..., ge=0, le=100)
    features: int = Field(..., ge=0, le=100)

    def values(self) -> list[int]:
        """Dimension scores in fixed order."""
        return [self.technical, self.performance, self.cost, self.complexity, self.features]


class ScoreReasons(_FrozenModel):
    """Human-readable justification bullets."""
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class EstimatedCosts(_FrozenModel):
    """Cost estimate in USD."""
    setup: float = Field(..., ge=0)
    monthly: float = Field(..., ge=0)
    annual: float = Field(..., ge=0)


class ImplementationPhase(_FrozenModel):
    """One phase of the rollout plan."""
    name: str
    duration_days: int = Field(..., ge=0)
    tasks: list[str] = Field(default_factory=list)


class ImplementationPlan(_FrozenModel):
    """Phased rollout plan."""
    phases: list[ImplementationPhase]
    total_duration: int = Field(..., ge=0)
    risk_level: RiskLevel


class CompatibilityScore(_FrozenModel):
    """Full scoring of one configuration against a profile."""
    overall: int = Field(..., ge=0, le=100)
    breakdown: DimensionBreakdown
    reasons: ScoreReasons
    estimated_costs: EstimatedCosts
    implementation_plan: ImplementationPlan


class RankingResult(_FrozenModel):
    """A scored configuration and its position in the ranking.

    ``rank`` is 0 until the orchestrator has sorted the full catalog.
    """
    configuration: ChatbotConfiguration
    score: CompatibilityScore
    rank: int = Field(0, ge=0)
    confidence: int = Field(..., ge=0, le=100)
    tags: list[str] = Field(default_factory=list)


class RankingReport(_FrozenModel):
    """Complete output of a ranking call, for rendering and export."""
    ranked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    profile: InfrastructureProfile
    catalog_version: str
    results: list[RankingResult] = Field(default_factory=list)

    @property
    def top_recommendation(self) -> Optional[RankingResult]:
        """The rank-1 result, or None for an empty catalog."""
        return self.results[0] if self.results else None
