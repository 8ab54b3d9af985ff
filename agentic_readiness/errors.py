"""Error taxonomy for the readiness pipeline.

Every fatal condition the pipeline can hit maps to one of these types.
A 409 from the registry on creation is deliberately absent: it is a
normal outcome (see ``EnsureOutcome.ALREADY_EXISTS``), not an error.
"""

from __future__ import annotations


class ReadinessError(Exception):
    """Base class for all agentic_readiness errors."""


class ConfigError(ReadinessError):
    """Required configuration is missing or empty."""


class InvalidInput(ReadinessError, ValueError):
    """A finding or persisted value carries an unrecognised tag."""


class ToolingFailure(ReadinessError):
    """The linter could not run or produced unreadable output."""


class RegistryUnavailable(ReadinessError):
    """The registry could not be reached (network, timeout, credentials)."""


class RegistryError(ReadinessError):
    """The registry answered with a status outside the expected range."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(f"{message} (HTTP {status_code}): {body[:2000]}")
        self.status_code = status_code
        self.body = body
