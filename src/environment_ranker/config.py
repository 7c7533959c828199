"""Centralized configuration management for the environment ranker."""

import math
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import ConfigurationError
from .schema import BudgetRange, ScaleRequirement


class ScoringWeightsConfig(BaseModel):
    """Weights for the five scoring dimensions.

    These weights control how much each dimension contributes to the overall
    score. They must sum to 1.0.
    """
    technical: float = Field(0.25, ge=0, description="Weight for technical compatibility")
    performance: float = Field(0.20, ge=0, description="Weight for performance fit")
    cost: float = Field(0.20, ge=0, description="Weight for cost alignment")
    complexity: float = Field(0.15, ge=0, description="Weight for implementation ease")
    features: float = Field(0.20, ge=0, description="Weight for feature match")

    @model_validator(mode="after")
    def _check_sum(self) -> "ScoringWeightsConfig":
        total = self.technical + self.performance + self.cost + self.complexity + self.features
        if not math.isclose(total, 1.0, abs_tol=1e-6):
            raise ValueError(f"scoring weights must sum to 1.0, got {total:.4f}")
        return self


class ValueRange(BaseModel):
    """Inclusive numeric range."""
    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_order(self) -> "ValueRange":
        if self.min > self.max:
            raise ValueError(f"range min ({self.min}) exceeds max ({self.max})")
        return self


def _default_budget_ranges() -> dict[BudgetRange, ValueRange]:
    return {
        BudgetRange.FREE: ValueRange(min=0, max=0),
        BudgetRange.STARTER: ValueRange(min=0, max=50),
        BudgetRange.PROFESSIONAL: ValueRange(min=50, max=500),
        BudgetRange.ENTERPRISE: ValueRange(min=500, max=10000),
    }


def _default_scale_bands() -> dict[ScaleRequirement, ValueRange]:
    return {
        ScaleRequirement.SMALL: ValueRange(min=0, max=50),
        ScaleRequirement.MEDIUM: ValueRange(min=25, max=200),
        ScaleRequirement.LARGE: ValueRange(min=100, max=1000),
        ScaleRequirement.ENTERPRISE: ValueRange(min=500, max=10000),
    }


class TechnicalScoringConfig(BaseModel):
    """Point budget for technical compatibility (must total 100)."""
    database_points: float = Field(40, ge=0)
    cloud_points: float = Field(35, ge=0)
    integration_points: float = Field(25, ge=0)
    adjacent_database_credit: float = Field(
        0.6, ge=0, le=1,
        description="Share of database points awarded for a close database family"
    )

    @model_validator(mode="after")
    def _check_budget(self) -> "TechnicalScoringConfig":
        total = self.database_points + self.cloud_points + self.integration_points
        if not math.isclose(total, 100.0, abs_tol=1e-6):
            raise ValueError(f"technical point budget must total 100, got {total}")
        return self


class PerformanceScoringConfig(BaseModel):
    """Constants for the performance fit dimension."""
    scale_points: float = Field(40, ge=0)
    latency_points: float = Field(30, ge=0)
    availability_points: float = Field(30, ge=0)
    scale_bands: dict[ScaleRequirement, ValueRange] = Field(
        default_factory=_default_scale_bands,
        description="Expected QPS band per scale requirement"
    )
    under_provisioned_factor: float = Field(0.6, ge=0, le=1)
    over_provisioned_factor: float = Field(0.3, ge=0, le=1)
    voice_latency_baseline_ms: int = Field(200, gt=0)
    text_latency_baseline_ms: int = Field(500, gt=0)
    latency_floor_factor: float = Field(0.3, ge=0, le=1)
    availability_fallback_factor: float = Field(0.4, ge=0, le=1)

    @model_validator(mode="after")
    def _check_budget(self) -> "PerformanceScoringConfig":
        total = self.scale_points + self.latency_points + self.availability_points
        if not math.isclose(total, 100.0, abs_tol=1e-6):
            raise ValueError(f"performance point budget must total 100, got {total}")
        missing = set(ScaleRequirement) - set(self.scale_bands)
        if missing:
            raise ValueError(f"scale_bands missing: {sorted(m.value for m in missing)}")
        return self


class CostScoringConfig(BaseModel):
    """Monthly budget range per budget tier."""
    budget_ranges: dict[BudgetRange, ValueRange] = Field(default_factory=_default_budget_ranges)

    @model_validator(mode="after")
    def _check_complete(self) -> "CostScoringConfig":
        missing = set(BudgetRange) - set(self.budget_ranges)
        if missing:
            raise ValueError(f"budget_ranges missing: {sorted(m.value for m in missing)}")
        return self


class ComplexityScoringConfig(BaseModel):
    """Penalties for the implementation complexity dimension."""
    technical_gap_penalty: float = Field(25, ge=0, description="Per level below the required level")
    setup_complexity_penalty: float = Field(10, ge=0, description="Per setup complexity step above 1")
    long_rollout_threshold_days: int = Field(7, ge=0)
    long_rollout_penalty: float = Field(20, ge=0)


class InsightThresholdsConfig(BaseModel):
    """Thresholds for strengths, concerns and recommendations."""
    technical_strength: int = Field(80, description="Technical score above this is a strength")
    cost_strength: int = 80
    complexity_strength: int = 80
    technical_concern: int = Field(60, description="Technical score below this is a concern")
    cost_concern: int = 40
    complexity_concern: int = 50
    performance_recommendation: int = Field(
        70, description="Performance score below this triggers an upgrade recommendation"
    )


class TagThresholdsConfig(BaseModel):
    """Thresholds for result tags."""
    highly_recommended: int = 90
    great_match: int = 80
    best_value_cost: int = 90
    easy_setup_max_complexity: int = 2


class EstimateConfig(BaseModel):
    """Constants for cost and plan estimates."""
    setup_cost_per_complexity: float = Field(500, ge=0)
    beginner_setup_multiplier: float = Field(1.5, ge=1)
    annual_discount_factor: float = Field(0.9, gt=0, le=1)
    phase_ratios: tuple[float, float, float] = Field(
        (0.3, 0.5, 0.2),
        description="Share of implementation days for setup, integration, launch"
    )
    high_risk_above_complexity: int = 3
    medium_risk_above_complexity: int = 2


class RankerConfig(BaseModel):
    """Complete configuration for the environment ranker."""
    scoring_weights: ScoringWeightsConfig = Field(default_factory=ScoringWeightsConfig)
    technical: TechnicalScoringConfig = Field(default_factory=TechnicalScoringConfig)
    performance: PerformanceScoringConfig = Field(default_factory=PerformanceScoringConfig)
    cost: CostScoringConfig = Field(default_factory=CostScoringConfig)
    complexity: ComplexityScoringConfig = Field(default_factory=ComplexityScoringConfig)
    insights: InsightThresholdsConfig = Field(default_factory=InsightThresholdsConfig)
    tags: TagThresholdsConfig = Field(default_factory=TagThresholdsConfig)
    estimates: EstimateConfig = Field(default_factory=EstimateConfig)


# Global config instance
_config: Optional[RankerConfig] = None


def get_config() -> RankerConfig:
    """Get the current configuration.

    Returns the global config, initializing with defaults if not yet loaded.
    """
    global _config
    if _config is None:
        _config = RankerConfig()
    return _config


def load_config(path: Path) -> RankerConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        The loaded RankerConfig.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    global _config

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        config = RankerConfig.model_validate(data or {})
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigurationError(f"Invalid ranker configuration in {path}: {e}") from e

    _config = config
    return _config


def reset_config() -> None:
    """Reset configuration to defaults."""
    global _config
    _config = RankerConfig()


CONFIG_ENV_VAR = "ENVIRONMENT_RANKER_CONFIG"
LOCAL_CONFIG_NAMES = ("ranker-config.yaml", "ranker-config.yml")


def config_search_paths() -> list[Path]:
    """Candidate config locations, highest priority first.

    The environment variable wins, then the working directory, then the
    per-user file.
    """
    candidates = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(Path(name) for name in LOCAL_CONFIG_NAMES)
    candidates.append(Path.home() / ".config" / "environment-ranker" / "config.yaml")
    return candidates


def find_config_file() -> Optional[Path]:
    """First existing file from config_search_paths(), or None."""
    return next((path for path in config_search_paths() if path.is_file()), None)


def _describe_sections() -> str:
    lines = []
    for name, field in RankerConfig.model_fields.items():
        summary = (field.annotation.__doc__ or "").strip().splitlines()[0]
        lines.append(f"#   {name}: {summary}")
    return "\n".join(lines)


def save_default_config(path: Path) -> None:
    """Write the default configuration as commented YAML.

    The result loads back through load_config() unchanged.
    """
    header = "\n".join([
        "# environment-ranker scoring configuration",
        "#",
        "# Sections:",
        _describe_sections(),
        "#",
        f"# Picked up from ${CONFIG_ENV_VAR}, ./{LOCAL_CONFIG_NAMES[0]}",
        "# or ~/.config/environment-ranker/config.yaml, in that order.",
        "",
        "",
    ])
    body = yaml.safe_dump(RankerConfig().model_dump(mode="json"), sort_keys=False)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(header + body, encoding="utf-8")
