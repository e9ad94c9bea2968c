"""``TenantInfoService`` — wires the codec, the authorization engine, and
their collaborators into the tenant-info operation.

The service:

1. Decides, once per request, whether the caller may see the mapping.  The
   role-mapping snapshot is loaded fresh for every decision.
2. Reads every index and alias name from the cluster and decodes each one
   against the configured tenant names.
3. Provides a FastAPI lifespan for clean startup/shutdown of its
   collaborators.

Typical setup::

    from fastapi import FastAPI
    from fastapi_tenantinfo import TenantInfoConfig, TenantInfoService
    from fastapi_tenantinfo.cluster import HTTPIndexSource
    from fastapi_tenantinfo.rolemapping.database import SQLAlchemyRoleMappingStore
    from fastapi_tenantinfo.router import make_tenantinfo_router
    from fastapi_tenantinfo.resolution import ResolverFactory

    config = TenantInfoConfig(designated_role_name="kibana_tenant_reader")
    service = TenantInfoService(
        config,
        SQLAlchemyRoleMappingStore("sqlite+aiosqlite:///./security.db"),
        HTTPIndexSource("https://search.internal:9200"),
    )

    app = FastAPI(lifespan=service.create_lifespan())
    app.include_router(make_tenantinfo_router(service, ResolverFactory.create(config)))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi_tenantinfo.authz.engine import (
    AuthorizationCapabilities,
    AuthorizationDecisionEngine,
)
from fastapi_tenantinfo.core.exceptions import (
    AccessDeniedError,
    ClusterStateError,
    ConfigurationAccessError,
    TenantInfoError,
)
from fastapi_tenantinfo.indexname.codec import TenantIndexCodec

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi_tenantinfo.cluster.source import IndexSource
    from fastapi_tenantinfo.core.config import TenantInfoConfig
    from fastapi_tenantinfo.core.types import RequestIdentity
    from fastapi_tenantinfo.rolemapping.store import SecurityConfigStore

logger = logging.getLogger(__name__)

_TENANTS = "tenants"


class TenantInfoService:
    """Answer "which tenant owns each index?" for authorized callers.

    Args:
        config: Service configuration.
        config_store: Source of the role mapping and tenant names.
        index_source: Source of the live index and alias names.
        engine: Authorization engine.  A default instance is created when
            omitted.

    Attributes:
        config: The ``TenantInfoConfig`` this service was built with.
        config_store: The security configuration store.
        index_source: The cluster index source.
        codec: Codec bound to ``config.tenant_index_prefix``.
    """

    def __init__(
        self,
        config: TenantInfoConfig,
        config_store: SecurityConfigStore,
        index_source: IndexSource,
        engine: AuthorizationDecisionEngine | None = None,
    ) -> None:
        self.config = config
        self.config_store = config_store
        self.index_source = index_source
        self.codec = TenantIndexCodec(config.tenant_index_prefix)
        self._engine = engine if engine is not None else AuthorizationDecisionEngine()
        logger.info(
            "TenantInfoService created store=%s source=%s prefix=%r",
            type(config_store).__name__,
            type(index_source).__name__,
            config.tenant_index_prefix,
        )

    #############
    # Lifecycle #
    #############

    async def initialize(self) -> None:
        """Initialise the configuration store.  Idempotent."""
        await self.config_store.initialize()
        logger.info("TenantInfoService initialised")

    async def close(self) -> None:
        """Release the store and the index source."""
        await self.index_source.close()
        await self.config_store.close()
        logger.info("TenantInfoService shut down cleanly")

    def create_lifespan(self) -> Any:
        """Return an async context manager for FastAPI's ``lifespan`` parameter."""
        from contextlib import asynccontextmanager  # noqa: PLC0415

        @asynccontextmanager
        async def _lifespan(app: Any) -> AsyncIterator[None]:
            await self.initialize()
            try:
                yield
            finally:
                await self.close()

        return _lifespan

    #################
    # Authorization #
    #################

    def capabilities(self) -> AuthorizationCapabilities:
        """Return the collaborators the engine consults, bound to this service."""
        return AuthorizationCapabilities(
            service_account_name=self.config.service_account_name,
            is_super_admin=self.config.is_super_admin,
            designated_role_name=self.config.designated_role_name,
            load_role_mapping=self.config_store.load_role_mapping,
        )

    async def is_authorized(self, identity: RequestIdentity | None) -> bool:
        """Return whether *identity* may list the mapping.

        Raises:
            ConfigurationAccessError: When the role mapping cannot be loaded.
        """
        return await self._engine.is_authorized_async(identity, self.capabilities())

    ###########
    # Mapping #
    ###########

    async def build_tenant_mapping(self) -> dict[str, str]:
        """Return ``{index_or_alias: tenant}`` for every tenant-scoped name.

        Names that are not tenant indices are omitted.  Private-space indices
        map to ``"__private__"``.  Entries follow the order of the index
        source.  Tenant names are tried in sorted order, so a configured pair
        that collides on both hash and sanitised name always resolves to the
        same tenant.

        Raises:
            ConfigurationAccessError: When tenant names cannot be loaded.
            ClusterStateError: When index names cannot be retrieved.
        """
        try:
            tenants = sorted(await self.config_store.load_tenant_names())
        except TenantInfoError:
            raise
        except Exception as exc:
            raise ConfigurationAccessError(_TENANTS, str(exc) or type(exc).__name__) from exc

        try:
            names = await self.index_source.index_and_alias_names()
        except TenantInfoError:
            raise
        except Exception as exc:
            raise ClusterStateError(str(exc) or type(exc).__name__) from exc

        mapping: dict[str, str] = {}
        for name in names:
            decoded = self.codec.decode(name, tenants)
            if decoded is not None:
                mapping[name] = str(decoded)

        logger.debug("Tenant mapping built entries=%d of names=%d", len(mapping), len(names))
        return mapping

    async def tenant_info(self, identity: RequestIdentity | None) -> dict[str, str]:
        """Authorize *identity*, then return the index→tenant mapping.

        Raises:
            AccessDeniedError: When the caller may not list the mapping.
            ConfigurationAccessError: When the security configuration cannot
                be loaded.
            ClusterStateError: When index names cannot be retrieved.
        """
        if not await self.is_authorized(identity):
            raise AccessDeniedError()
        return await self.build_tenant_mapping()


__all__ = ["TenantInfoService"]
