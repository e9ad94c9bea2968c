"""Shared pytest fixtures for the fastapi-tenantinfo test suite.

Hierarchy
---------
config              TenantInfoConfig with a designated role and one super admin
role_mapping_raw    raw role-mapping tree mapping alice onto the designated role
mem_store           InMemoryRoleMappingStore seeded with the raw tree and tenants
codec               TenantIndexCodec bound to ".kibana"
index_names         cluster index/alias names covering every decode outcome
index_source        StaticIndexSource over index_names
service             TenantInfoService wired from the fixtures above
asgi_app            FastAPI app built by create_app with header identities
http_client         httpx.AsyncClient → asgi_app
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from httpx import ASGITransport, AsyncClient
import pytest
import pytest_asyncio

from fastapi_tenantinfo.app import create_app
from fastapi_tenantinfo.cluster.source import StaticIndexSource
from fastapi_tenantinfo.core.config import TenantInfoConfig
from fastapi_tenantinfo.indexname.codec import TenantIndexCodec
from fastapi_tenantinfo.rolemapping.memory import InMemoryRoleMappingStore
from fastapi_tenantinfo.service import TenantInfoService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

PREFIX = ".kibana"
READER_ROLE = "kibana_tenant_reader"
TENANTS = ("Human Resources", "Finance", "R&D")


##########
# Config #
##########


@pytest.fixture
def config() -> TenantInfoConfig:
    return TenantInfoConfig(
        tenant_index_prefix=PREFIX,
        service_account_name="kibanaserver",
        designated_role_name=READER_ROLE,
        super_admin_users=["admin"],
    )


#########
# Store #
#########


@pytest.fixture
def role_mapping_raw() -> dict[str, Any]:
    return {
        "_meta": {"type": "rolesmapping", "config_version": 2},
        READER_ROLE: {"users": ["alice"], "backend_roles": [], "hosts": []},
        "all_access": {"users": ["carol"], "backend_roles": ["admins"]},
    }


@pytest.fixture
def mem_store(role_mapping_raw: dict[str, Any]) -> InMemoryRoleMappingStore:
    return InMemoryRoleMappingStore(role_mapping=role_mapping_raw, tenant_names=TENANTS)


###########
# Cluster #
###########


@pytest.fixture
def codec() -> TenantIndexCodec:
    return TenantIndexCodec(PREFIX)


@pytest.fixture
def index_names(codec: TenantIndexCodec) -> list[str]:
    return [
        ".kibana",
        codec.encode("Human Resources"),
        codec.encode("Finance"),
        f"{PREFIX}_999999_zzz",
        f"{PREFIX}_notanumber_abc",
        "logs-2024.01.01",
        "wrongprefix_123_abc",
    ]


@pytest.fixture
def index_source(index_names: list[str]) -> StaticIndexSource:
    return StaticIndexSource(index_names)


###########
# Service #
###########


@pytest.fixture
def service(
    config: TenantInfoConfig,
    mem_store: InMemoryRoleMappingStore,
    index_source: StaticIndexSource,
) -> TenantInfoService:
    return TenantInfoService(config, mem_store, index_source)


##########################
# ASGI app + HTTP client #
##########################


@pytest.fixture
def asgi_app(
    config: TenantInfoConfig,
    mem_store: InMemoryRoleMappingStore,
    index_source: StaticIndexSource,
):
    return create_app(config, config_store=mem_store, index_source=index_source)


@pytest_asyncio.fixture
async def http_client(asgi_app) -> AsyncIterator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=asgi_app),
        base_url="http://testserver",
    ) as client:
        yield client
