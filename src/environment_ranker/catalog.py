"""Configuration catalog for the Environment Ranking Engine.

The catalog is an immutable, ordered snapshot of candidate configurations.
It is built once and shared read-only by every ranking call.
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

import yaml
from pydantic import ValidationError

from .exceptions import CatalogError
from .schema import (
    ChatbotConfiguration,
    CloudProvider,
    CompatibilityRequirements,
    ConfigurationFeatures,
    ConfigurationTier,
    CostRange,
    DatabaseType,
    IntegrationType,
    PricingInfo,
    ResourceLevel,
    ResourceRequirements,
    TechnicalLevel,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_VERSION = "1.0.0"


class ConfigurationCatalog:
    """Immutable, ordered set of candidate configurations.

    Insertion order is preserved and is the final tie-break when ranking.
    """

    __slots__ = ("_entries", "_by_id", "_version")

    def __init__(
        self,
        configurations: Iterable[ChatbotConfiguration] = (),
        version: str = DEFAULT_CATALOG_VERSION,
    ):
        entries = tuple(configurations)
        by_id: dict[str, ChatbotConfiguration] = {}
        duplicates = []
        for entry in entries:
            if entry.id in by_id:
                duplicates.append(entry.id)
            by_id[entry.id] = entry
        if duplicates:
            raise CatalogError(f"Duplicate configuration IDs: {sorted(set(duplicates))}")

        object.__setattr__(self, "_entries", entries)
        object.__setattr__(self, "_by_id", by_id)
        object.__setattr__(self, "_version", version)

    def __setattr__(self, name, value):
        raise AttributeError("ConfigurationCatalog is immutable")

    def __iter__(self) -> Iterator[ChatbotConfiguration]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, config_id: object) -> bool:
        return config_id in self._by_id

    def __repr__(self) -> str:
        return f"ConfigurationCatalog(version={self._version!r}, entries={len(self._entries)})"

    @property
    def version(self) -> str:
        return self._version

    @property
    def configurations(self) -> tuple[ChatbotConfiguration, ...]:
        return self._entries

    @property
    def ids(self) -> list[str]:
        return [entry.id for entry in self._entries]

    def get(self, config_id: str) -> Optional[ChatbotConfiguration]:
        """Look up a configuration by ID."""
        return self._by_id.get(config_id)

    def to_dict(self) -> dict:
        """Serialize for export (camelCase keys)."""
        return {
            "version": self._version,
            "configurations": [
                entry.model_dump(mode="json", by_alias=True) for entry in self._entries
            ],
        }


class CatalogValidator:
    """Validates catalog entries and reports issues."""

    def validate(self, catalog: ConfigurationCatalog) -> list[str]:
        """Validate the catalog and return a list of issues."""
        issues = []

        if len(catalog) == 0:
            issues.append("Catalog contains no configurations")

        for entry in catalog:
            issues.extend(self._validate_entry(entry))

        return issues

    def _validate_entry(self, entry: ChatbotConfiguration) -> list[str]:
        """Validate a single entry."""
        issues = []
        prefix = f"[{entry.id}]"

        if not entry.description:
            issues.append(f"{prefix} Missing description")

        compat = entry.compatibility
        if not compat.supported_databases:
            issues.append(f"{prefix} No supported databases")
        if not compat.supported_clouds:
            issues.append(f"{prefix} No supported clouds")
        if not compat.supported_integrations:
            issues.append(f"{prefix} No supported integrations")

        cost = entry.pricing.monthly_cost
        if cost.min == cost.max:
            issues.append(f"{prefix} Zero-width monthly cost band ({cost.min:.0f})")

        if entry.tier == ConfigurationTier.SPECIALIZED and not entry.industry:
            issues.append(f"{prefix} Specialized tier without an industry")

        return issues


def _parse_catalog_data(data: Union[dict, list], source: str) -> ConfigurationCatalog:
    """Build a catalog from decoded JSON/YAML data."""
    if isinstance(data, list):
        version = DEFAULT_CATALOG_VERSION
        raw_entries = data
    elif isinstance(data, dict):
        version = str(data.get("version", DEFAULT_CATALOG_VERSION))
        raw_entries = data.get("configurations")
        if not isinstance(raw_entries, list):
            raise CatalogError(f"{source}: 'configurations' must be a list")
    else:
        raise CatalogError(f"{source}: expected a list or an object with 'configurations'")

    try:
        entries = [ChatbotConfiguration.model_validate(raw) for raw in raw_entries]
    except ValidationError as e:
        raise CatalogError(f"{source}: invalid configuration entry: {e}") from e

    return ConfigurationCatalog(entries, version=version)


def load_catalog(path: Union[str, Path]) -> ConfigurationCatalog:
    """Load a catalog from a JSON or YAML file.

    Raises:
        CatalogError: If the file cannot be read or fails validation.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e

    catalog = _parse_catalog_data(data, str(path))
    logger.info("Loaded catalog %s (%d configurations) from %s", catalog.version, len(catalog), path)
    return catalog


def validate_catalog(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate a catalog file.

    Returns:
        Tuple of (is_valid, issues). Soft issues are reported but do not
        make the catalog invalid.
    """
    try:
        catalog = load_catalog(path)
    except CatalogError as e:
        return False, [str(e)]
    return True, CatalogValidator().validate(catalog)


def default_catalog() -> ConfigurationCatalog:
    """The built-in catalog of product configurations."""
    return ConfigurationCatalog(
        [
            ChatbotConfiguration(
                id="lite_starter",
                name="ChatChatGo Lite",
                description="Perfect for small businesses just getting started with AI chat",
                tier=ConfigurationTier.LITE,
                features=ConfigurationFeatures(
                    voice_enabled=False,
                    multi_language=False,
                    analytics=True,
                    lead_capture=True,
                    custom_branding=False,
                    api_integration=False,
                    real_time_chat=True,
                ),
                requirements=ResourceRequirements(
                    min_database_connections=5,
                    estimated_qps=10,
                    storage_needs=ResourceLevel.LOW,
                    compute_intensity=ResourceLevel.LOW,
                    bandwidth_usage=ResourceLevel.LOW,
                ),
                compatibility=CompatibilityRequirements(
                    supported_databases=frozenset({
                        DatabaseType.FIREBASE, DatabaseType.SUPABASE,
                        DatabaseType.SQLITE, DatabaseType.MYSQL,
                    }),
                    supported_clouds=frozenset({
                        CloudProvider.VERCEL, CloudProvider.SHARED_HOSTING, CloudProvider.SELF_HOSTED,
                    }),
                    supported_integrations=frozenset({IntegrationType.WEBHOOK, IntegrationType.NONE}),
                    min_technical_level=TechnicalLevel.BEGINNER,
                ),
                pricing=PricingInfo(
                    setup_complexity=1,
                    monthly_cost=CostRange(min=0, max=29),
                    implementation_time_days=1,
                ),
            ),
            ChatbotConfiguration(
                id="professional_voice",
                name="ChatChatGo Professional + Voice",
                description="Advanced voice-enabled chatbot with full analytics suite",
                tier=ConfigurationTier.PROFESSIONAL,
                features=ConfigurationFeatures(
                    voice_enabled=True,
                    multi_language=True,
                    analytics=True,
                    lead_capture=True,
                    custom_branding=True,
                    api_integration=True,
                    real_time_chat=True,
                ),
                requirements=ResourceRequirements(
                    min_database_connections=25,
                    estimated_qps=100,
                    storage_needs=ResourceLevel.MEDIUM,
                    compute_intensity=ResourceLevel.MEDIUM,
                    bandwidth_usage=ResourceLevel.HIGH,
                ),
                compatibility=CompatibilityRequirements(
                    supported_databases=frozenset({
                        DatabaseType.FIREBASE, DatabaseType.SUPABASE, DatabaseType.POSTGRESQL,
                        DatabaseType.MYSQL, DatabaseType.MONGODB,
                    }),
                    supported_clouds=frozenset({
                        CloudProvider.VERCEL, CloudProvider.AWS, CloudProvider.GCP, CloudProvider.AZURE,
                    }),
                    supported_integrations=frozenset({
                        IntegrationType.WEBHOOK, IntegrationType.REST_API,
                        IntegrationType.N8N, IntegrationType.ZAPIER,
                    }),
                    min_technical_level=TechnicalLevel.INTERMEDIATE,
                ),
                pricing=PricingInfo(
                    setup_complexity=3,
                    monthly_cost=CostRange(min=99, max=299),
                    implementation_time_days=5,
                ),
            ),
            ChatbotConfiguration(
                id="enterprise_suite",
                name="ChatChatGo Enterprise Suite",
                description="Full-scale enterprise solution with custom integrations and compliance",
                tier=ConfigurationTier.ENTERPRISE,
                features=ConfigurationFeatures(
                    voice_enabled=True,
                    multi_language=True,
                    analytics=True,
                    lead_capture=True,
                    custom_branding=True,
                    api_integration=True,
                    real_time_chat=True,
                ),
                requirements=ResourceRequirements(
                    min_database_connections=100,
                    estimated_qps=1000,
                    storage_needs=ResourceLevel.HIGH,
                    compute_intensity=ResourceLevel.HIGH,
                    bandwidth_usage=ResourceLevel.HIGH,
                ),
                compatibility=CompatibilityRequirements(
                    supported_databases=frozenset({
                        DatabaseType.POSTGRESQL, DatabaseType.MYSQL, DatabaseType.MONGODB,
                        DatabaseType.REDIS, DatabaseType.CUSTOM_API,
                    }),
                    supported_clouds=frozenset({
                        CloudProvider.AWS, CloudProvider.GCP, CloudProvider.AZURE, CloudProvider.SELF_HOSTED,
                    }),
                    supported_integrations=frozenset({
                        IntegrationType.REST_API, IntegrationType.GRAPHQL,
                        IntegrationType.N8N, IntegrationType.CUSTOM,
                    }),
                    min_technical_level=TechnicalLevel.ADVANCED,
                ),
                pricing=PricingInfo(
                    setup_complexity=5,
                    monthly_cost=CostRange(min=500, max=2000),
                    implementation_time_days=21,
                ),
            ),
            ChatbotConfiguration(
                id="restaurant_special",
                name="Restaurant Pro",
                description="Specialized for restaurants with voice ordering and POS integration",
                tier=ConfigurationTier.SPECIALIZED,
                industry="restaurant",
                features=ConfigurationFeatures(
                    voice_enabled=True,
                    multi_language=False,
                    analytics=True,
                    lead_capture=True,
                    custom_branding=True,
                    api_integration=True,
                    real_time_chat=True,
                ),
                requirements=ResourceRequirements(
                    min_database_connections=15,
                    estimated_qps=50,
                    storage_needs=ResourceLevel.MEDIUM,
                    compute_intensity=ResourceLevel.MEDIUM,
                    bandwidth_usage=ResourceLevel.MEDIUM,
                ),
                compatibility=CompatibilityRequirements(
                    supported_databases=frozenset({
                        DatabaseType.FIREBASE, DatabaseType.SUPABASE,
                        DatabaseType.MYSQL, DatabaseType.POSTGRESQL,
                    }),
                    supported_clouds=frozenset({CloudProvider.VERCEL, CloudProvider.AWS, CloudProvider.GCP}),
                    supported_integrations=frozenset({
                        IntegrationType.WEBHOOK, IntegrationType.REST_API, IntegrationType.N8N,
                    }),
                    min_technical_level=TechnicalLevel.INTERMEDIATE,
                ),
                pricing=PricingInfo(
                    setup_complexity=2,
                    monthly_cost=CostRange(min=79, max=199),
                    implementation_time_days=3,
                ),
            ),
        ],
        version=DEFAULT_CATALOG_VERSION,
    )
