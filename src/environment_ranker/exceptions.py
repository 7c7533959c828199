"""Exceptions raised by the environment ranker."""

from typing import Optional


class RankingError(Exception):
    """Base class for all ranking engine errors."""


class ProfileValidationError(RankingError):
    """Raised when an infrastructure profile fails validation.

    Carries every issue found so callers can report them together.
    """

    def __init__(self, issues: list[str], message: Optional[str] = None):
        self.issues = list(issues)
        if message is None:
            message = "Invalid infrastructure profile: " + "; ".join(self.issues)
        super().__init__(message)


class CatalogError(RankingError):
    """Raised when a configuration catalog cannot be built or loaded."""


class ConfigurationError(RankingError):
    """Raised when ranker configuration is inconsistent."""
