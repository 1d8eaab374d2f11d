"""
Errors
======
Failure types surfaced to main.py, which picks the exit code and message.

A run or job that cannot be found is not an error: it resolves to the empty
string.
"""
from typing import Optional


class ResolverError(Exception):
    """Base class for every fatal resolution failure."""


class ConfigurationError(ResolverError):
    """A required input is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class ProviderError(ResolverError):
    """The run history provider could not answer (network, auth, rate limit, payload)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
