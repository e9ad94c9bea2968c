"""Factory for creating identity resolvers from configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi_tenantinfo.core.exceptions import ConfigurationError
from fastapi_tenantinfo.core.types import IdentityStrategy

if TYPE_CHECKING:
    from fastapi_tenantinfo.core.config import TenantInfoConfig
    from fastapi_tenantinfo.resolution.base import BaseIdentityResolver


class ResolverFactory:
    """Static factory that builds a :class:`BaseIdentityResolver` from config.

    Resolver classes are imported lazily so the ``jwt`` extra is only needed
    when the JWT strategy is configured.
    """

    @staticmethod
    def create(config: TenantInfoConfig) -> BaseIdentityResolver:
        """Build the resolver selected by ``config.identity_strategy``.

        Raises:
            ConfigurationError: When the strategy is unrecognised or its
                parameters are missing.
        """
        strategy = config.identity_strategy

        if strategy == IdentityStrategy.HEADER:
            from fastapi_tenantinfo.resolution.header import HeaderIdentityResolver

            return HeaderIdentityResolver(header_name=config.identity_header_name)

        if strategy == IdentityStrategy.JWT:
            from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

            if not config.jwt_secret:
                raise ConfigurationError(
                    parameter="jwt_secret",
                    reason="jwt_secret is required for JWT identity resolution.",
                )
            return JWTIdentityResolver(
                secret=config.jwt_secret,
                algorithm=config.jwt_algorithm,
                username_claim=config.jwt_username_claim,
            )

        raise ConfigurationError(
            parameter="identity_strategy",
            reason=f"Unrecognised identity strategy: {strategy!r}.",
        )


__all__ = ["ResolverFactory"]
