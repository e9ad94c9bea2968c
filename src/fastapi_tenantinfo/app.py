"""Application factory: a ready-to-run FastAPI app built from configuration.

Run with any ASGI server::

    TENANTINFO_CLUSTER_URL=https://search.internal:9200 \
    TENANTINFO_DATABASE_URL=sqlite+aiosqlite:///./security.db \
    uvicorn --factory fastapi_tenantinfo.app:create_app
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI

from fastapi_tenantinfo.core.config import TenantInfoConfig
from fastapi_tenantinfo.core.exceptions import ConfigurationError
from fastapi_tenantinfo.resolution.factory import ResolverFactory
from fastapi_tenantinfo.router import make_tenantinfo_router
from fastapi_tenantinfo.service import TenantInfoService

if TYPE_CHECKING:
    from fastapi_tenantinfo.cluster.source import IndexSource
    from fastapi_tenantinfo.resolution.base import BaseIdentityResolver
    from fastapi_tenantinfo.rolemapping.store import SecurityConfigStore

logger = logging.getLogger(__name__)


def _build_store(config: TenantInfoConfig) -> SecurityConfigStore:
    if config.database_url:
        from fastapi_tenantinfo.rolemapping.database import SQLAlchemyRoleMappingStore  # noqa: PLC0415

        return SQLAlchemyRoleMappingStore(config.database_url)

    from fastapi_tenantinfo.rolemapping.memory import InMemoryRoleMappingStore  # noqa: PLC0415

    logger.warning("No database_url configured; using an empty in-memory security store")
    return InMemoryRoleMappingStore()


def _build_index_source(config: TenantInfoConfig) -> IndexSource:
    if not config.cluster_url:
        raise ConfigurationError(
            parameter="cluster_url",
            reason="cluster_url is required unless an index_source is supplied.",
        )
    from fastapi_tenantinfo.cluster.http_source import HTTPIndexSource  # noqa: PLC0415

    return HTTPIndexSource(config.cluster_url, timeout=config.cluster_timeout)


def create_app(
    config: TenantInfoConfig | None = None,
    config_store: SecurityConfigStore | None = None,
    index_source: IndexSource | None = None,
    resolver: BaseIdentityResolver | None = None,
) -> FastAPI:
    """Build a FastAPI application serving the tenant-info listing.

    Every collaborator not supplied is built from *config* (which itself is
    read from the environment when omitted).

    Raises:
        ConfigurationError: When a collaborator cannot be built from config.
    """
    config = config or TenantInfoConfig()
    service = TenantInfoService(
        config,
        config_store if config_store is not None else _build_store(config),
        index_source if index_source is not None else _build_index_source(config),
    )
    resolver = resolver if resolver is not None else ResolverFactory.create(config)

    app = FastAPI(title="tenantinfo", lifespan=service.create_lifespan())
    app.state.tenantinfo_service = service
    app.include_router(make_tenantinfo_router(service, resolver))
    logger.info("tenantinfo app created: %s", config)
    return app


__all__ = ["create_app"]
