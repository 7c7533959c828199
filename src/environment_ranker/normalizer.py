"""Profile Normalizer - turns raw profile input into a validated profile.

Handles the messy reality of form and file input: mixed case, hyphens,
common aliases and legacy keys. Values that cannot be mapped onto a known
member are rejected, never guessed.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from .exceptions import ProfileValidationError
from .schema import (
    BudgetRange,
    CloudProvider,
    DatabaseType,
    InfrastructureProfile,
    IntegrationType,
    ScaleRequirement,
    TechnicalLevel,
)


def _key(value: str) -> str:
    return value.strip().lower().replace("-", "_").replace(" ", "_")


class ProfileNormalizer:
    """Normalizes raw profile mappings into InfrastructureProfile."""

    DATABASE_ALIASES = {
        "postgres": DatabaseType.POSTGRESQL,
        "pg": DatabaseType.POSTGRESQL,
        "mariadb": DatabaseType.MYSQL,
        "mongo": DatabaseType.MONGODB,
        "firestore": DatabaseType.FIREBASE,
        "customapi": DatabaseType.CUSTOM_API,
        "api": DatabaseType.CUSTOM_API,
    }

    CLOUD_ALIASES = {
        "amazon": CloudProvider.AWS,
        "amazon_web_services": CloudProvider.AWS,
        "google": CloudProvider.GCP,
        "google_cloud": CloudProvider.GCP,
        "gcloud": CloudProvider.GCP,
        "microsoft_azure": CloudProvider.AZURE,
        "selfhosted": CloudProvider.SELF_HOSTED,
        "on_premises": CloudProvider.SELF_HOSTED,
        "on_prem": CloudProvider.SELF_HOSTED,
        "shared": CloudProvider.SHARED_HOSTING,
    }

    INTEGRATION_ALIASES = {
        "rest": IntegrationType.REST_API,
        "restapi": IntegrationType.REST_API,
        "webhooks": IntegrationType.WEBHOOK,
        "gql": IntegrationType.GRAPHQL,
    }

    # Legacy/alternate keys -> canonical camelCase keys
    KEY_ALIASES = {
        "maxLatency": "maxLatencyMs",
        "cloud": "cloudProvider",
        "scale": "scaleRequirement",
        "budget": "budgetRange",
    }

    def normalize(self, raw: Mapping[str, Any]) -> InfrastructureProfile:
        """Normalize and validate a raw profile.

        Raises:
            ProfileValidationError: Listing every invalid field.
        """
        if not isinstance(raw, Mapping):
            raise ProfileValidationError([f"Profile must be an object, got {type(raw).__name__}"])

        issues: list[str] = []
        data = self._rename_keys(dict(raw))

        data = self._normalize_enum_field(data, ("database",), DatabaseType, self.DATABASE_ALIASES, issues)
        data = self._normalize_enum_field(
            data, ("cloudProvider", "cloud_provider"), CloudProvider, self.CLOUD_ALIASES, issues
        )
        data = self._normalize_enum_field(
            data, ("scaleRequirement", "scale_requirement"), ScaleRequirement, {}, issues
        )
        data = self._normalize_enum_field(data, ("budgetRange", "budget_range"), BudgetRange, {}, issues)
        data = self._normalize_enum_field(
            data, ("technicalLevel", "technical_level"), TechnicalLevel, {}, issues
        )
        data = self._normalize_integrations(data, issues)

        constraints = data.get("constraints")
        if isinstance(constraints, Mapping):
            data["constraints"] = self._rename_keys(dict(constraints))

        try:
            profile = InfrastructureProfile.model_validate(data)
        except ValidationError as e:
            # Fields already reported as unknown values are not repeated
            reported = {issue.split(":", 1)[0] for issue in issues}
            issues.extend(
                issue for issue in self._format_errors(e)
                if issue.split(".", 1)[0].split(":", 1)[0] not in reported
            )
            raise ProfileValidationError(issues) from e

        if issues:
            raise ProfileValidationError(issues)
        return profile

    def _rename_keys(self, data: dict) -> dict:
        for old, new in self.KEY_ALIASES.items():
            if old in data and new not in data:
                data[new] = data.pop(old)
        return data

    def _coerce(
        self,
        value: Any,
        enum_cls: type[Enum],
        aliases: Mapping[str, Enum],
    ) -> Optional[Enum]:
        """Map a raw value onto an enum member, or None if it is unknown."""
        if isinstance(value, enum_cls):
            return value
        if not isinstance(value, str):
            return None
        key = _key(value)
        for member in enum_cls:
            if member.value == key:
                return member
        return aliases.get(key)

    def _normalize_enum_field(
        self,
        data: dict,
        keys: tuple[str, ...],
        enum_cls: type[Enum],
        aliases: Mapping[str, Enum],
        issues: list[str],
    ) -> dict:
        for key in keys:
            if key not in data:
                continue
            member = self._coerce(data[key], enum_cls, aliases)
            if member is None:
                allowed = ", ".join(m.value for m in enum_cls)
                issues.append(f"{key}: unknown value {data[key]!r} (expected one of: {allowed})")
            else:
                data[key] = member
        return data

    def _normalize_integrations(self, data: dict, issues: list[str]) -> dict:
        raw = data.get("integrations")
        if raw is None:
            data.pop("integrations", None)
            return data
        if isinstance(raw, (str, IntegrationType)):
            raw = [raw]
        if not isinstance(raw, (list, tuple, set, frozenset)):
            issues.append(f"integrations: expected a list, got {type(raw).__name__}")
            return data

        members = []
        for item in raw:
            member = self._coerce(item, IntegrationType, self.INTEGRATION_ALIASES)
            if member is None:
                allowed = ", ".join(m.value for m in IntegrationType)
                issues.append(f"integrations: unknown value {item!r} (expected one of: {allowed})")
            else:
                members.append(member)
        data["integrations"] = frozenset(members)
        return data

    @staticmethod
    def _format_errors(error: ValidationError) -> list[str]:
        issues = []
        for err in error.errors():
            location = ".".join(str(part) for part in err["loc"]) or "profile"
            issues.append(f"{location}: {err['msg']}")
        return issues


def normalize_profile(raw: Union[Mapping[str, Any], InfrastructureProfile]) -> InfrastructureProfile:
    """Return ``raw`` as a validated profile, normalizing mappings."""
    if isinstance(raw, InfrastructureProfile):
        return raw
    return ProfileNormalizer().normalize(raw)


def load_profile(path: Union[str, Path]) -> InfrastructureProfile:
    """Load and normalize a profile from a JSON or YAML file.

    A JSON array containing exactly one object is accepted as well.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ProfileValidationError([f"Could not read profile {path}: {e}"]) from e

    if isinstance(data, list) and len(data) == 1:
        data = data[0]
    return normalize_profile(data)


def validate_profile(path: Union[str, Path]) -> tuple[bool, list[str]]:
    """Validate a profile file.

    Returns:
        Tuple of (is_valid, issues)
    """
    try:
        load_profile(path)
    except ProfileValidationError as e:
        return False, e.issues
    return True, []
