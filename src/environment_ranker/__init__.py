"""Environment ranking engine."""

from environment_ranker.catalog import ConfigurationCatalog, default_catalog, load_catalog
from environment_ranker.config import RankerConfig, get_config, load_config
from environment_ranker.engine import RankingEngine
from environment_ranker.exceptions import (
    CatalogError,
    ConfigurationError,
    ProfileValidationError,
    RankingError,
)
from environment_ranker.schema import (
    ChatbotConfiguration,
    InfrastructureProfile,
    RankingResult,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigurationCatalog",
    "default_catalog",
    "load_catalog",
    "RankerConfig",
    "get_config",
    "load_config",
    "RankingEngine",
    "CatalogError",
    "ConfigurationError",
    "ProfileValidationError",
    "RankingError",
    "ChatbotConfiguration",
    "InfrastructureProfile",
    "RankingResult",
]
