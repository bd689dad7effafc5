# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for repwatch."""


class RepwatchError(Exception):
    """Base exception for all repwatch errors."""


class ConfigurationError(RepwatchError):
    """Invalid or missing configuration."""


class NormalizationError(RepwatchError):
    """Input could not be reduced to a domain key."""


class ValidationError(RepwatchError):
    """Bad or unparseable caller input."""


class AuthConfigError(RepwatchError):
    """Missing or invalid credential for a reputation source."""

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source


class UpstreamError(RepwatchError):
    """A reputation provider failed, timed out, or returned a bad response."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        status: int | None = None,
        detail: object | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status = status
        self.detail = detail


class PersistenceError(RepwatchError):
    """Database or storage operation failed."""
