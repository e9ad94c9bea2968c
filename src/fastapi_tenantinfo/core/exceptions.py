"""Custom exceptions for fastapi-tenantinfo.

All exceptions derive from ``TenantInfoError`` so callers can catch the whole
family with a single ``except TenantInfoError`` clause while still handling
individual sub-types where the recovery differs.

Exception hierarchy::

    TenantInfoError
    ├── ConfigurationError
    ├── ConfigurationAccessError
    ├── ClusterStateError
    ├── IdentityResolutionError
    └── AccessDeniedError

Design decisions:
    - Every exception carries a structured ``details`` dict that is safe to
      log.  It must never contain raw credentials or token contents.
    - ``AccessDeniedError`` deliberately carries no information about which
      authorization tier rejected the caller.  The HTTP layer renders it as
      an empty ``403`` so role membership cannot be probed.
    - Malformed encoded index names are *not* represented here: the codec
      treats them as "not a tenant index" and never raises.
"""

from __future__ import annotations

from typing import Any


class TenantInfoError(Exception):
    """Base exception for all fastapi-tenantinfo errors.

    Attributes:
        message: Human-readable description of the error.
        details: Supplementary key-value context.  Safe to log.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | details={self.details}"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class ConfigurationError(TenantInfoError):
    """Raised when static configuration is invalid or inconsistent.

    Raised at wiring time (factories, ``create_app``) so a misconfigured
    deployment fails on startup rather than on the first request.

    Attributes:
        parameter: Name of the offending configuration field.
        reason: Why the current value is invalid.
    """

    def __init__(
        self,
        parameter: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Invalid configuration for {parameter!r}: {reason}", details)
        self.parameter = parameter
        self.reason = reason


class ConfigurationAccessError(TenantInfoError):
    """Raised when the security configuration cannot be loaded or parsed.

    This is never recovered from locally: the authorization engine propagates
    it and the HTTP layer turns it into a ``500`` response.  Treating it as an
    allow *or* a deny would hide an outage of the configuration store.

    Attributes:
        source: The configuration document that failed (e.g. ``"rolesmapping"``).
        reason: Concise description of the failure.
    """

    def __init__(
        self,
        source: str,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Cannot load security configuration {source!r}: {reason}", details)
        self.source = source
        self.reason = reason


class ClusterStateError(TenantInfoError):
    """Raised when the live index and alias names cannot be retrieved.

    Attributes:
        reason: Concise description of the failure.
    """

    def __init__(
        self,
        reason: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"Cannot read cluster state: {reason}", details)
        self.reason = reason


class IdentityResolutionError(TenantInfoError):
    """Raised when a request carries credentials that cannot be accepted.

    A request with *no* credentials is not an error: resolvers return
    ``None`` for it and the engine denies.  This exception covers malformed
    or unverifiable credentials.

    Attributes:
        reason: Operator-readable explanation.  Never includes token contents.
        strategy: The identity strategy that was active (e.g. ``"jwt"``).
    """

    def __init__(
        self,
        reason: str,
        strategy: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Identity resolution failed: {reason}"
        if strategy:
            message += f" (strategy: {strategy})"
        super().__init__(message, details)
        self.reason = reason
        self.strategy = strategy


class AccessDeniedError(TenantInfoError):
    """Raised when the caller may not list the index→tenant mapping."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        super().__init__("Access denied", details)


__all__ = [
    "AccessDeniedError",
    "ClusterStateError",
    "ConfigurationAccessError",
    "ConfigurationError",
    "IdentityResolutionError",
    "TenantInfoError",
]
