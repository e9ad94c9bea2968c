"""Integration tests — fastapi_tenantinfo.rolemapping.database

Run against an in-memory SQLite database (aiosqlite); the StaticPool keeps
the database alive across sessions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
import pytest_asyncio
from sqlalchemy import update

from fastapi_tenantinfo.core.exceptions import ConfigurationAccessError
from fastapi_tenantinfo.core.types import RoleMapping, RoleMappingConfig
from fastapi_tenantinfo.rolemapping.database import RoleMappingModel, SQLAlchemyRoleMappingStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

pytestmark = pytest.mark.integration

pytest.importorskip("aiosqlite")

READER = "kibana_tenant_reader"


@pytest_asyncio.fixture
async def store() -> AsyncIterator[SQLAlchemyRoleMappingStore]:
    s = SQLAlchemyRoleMappingStore("sqlite+aiosqlite:///:memory:")
    await s.initialize()
    yield s
    await s.close()


async def test_empty_database(store):
    snapshot = await store.load_role_mapping()
    assert isinstance(snapshot, RoleMappingConfig)
    assert len(snapshot) == 0
    assert await store.load_tenant_names() == frozenset()


async def test_initialize_is_idempotent(store):
    await store.initialize()
    assert len(await store.load_role_mapping()) == 0


async def test_put_and_load_role(store):
    mapping = RoleMapping(
        users=frozenset({"alice", "bob"}),
        backend_roles=frozenset({"dashboards"}),
        description="Tenant readers",
        reserved=True,
    )
    await store.put_role_mapping(READER, mapping)

    loaded = (await store.load_role_mapping()).get(READER)
    assert loaded == mapping


async def test_put_replaces_existing_role(store):
    await store.put_role_mapping(READER, RoleMapping(users=frozenset({"alice"})))
    await store.put_role_mapping(READER, RoleMapping(users=frozenset({"bob"})))
    loaded = (await store.load_role_mapping()).get(READER)
    assert loaded.users == frozenset({"bob"})


async def test_every_load_is_a_fresh_snapshot(store):
    await store.put_role_mapping(READER, RoleMapping(users=frozenset({"alice"})))
    first = await store.load_role_mapping()
    await store.put_role_mapping(READER, RoleMapping())
    second = await store.load_role_mapping()

    assert first.get(READER).has_member("alice")
    assert not second.get(READER).has_member("alice")


async def test_delete_role(store):
    await store.put_role_mapping(READER, RoleMapping())
    assert await store.delete_role_mapping(READER) is True
    assert await store.delete_role_mapping(READER) is False
    assert READER not in await store.load_role_mapping()


async def test_null_json_column_reads_as_empty(store):
    await store.put_role_mapping(READER, RoleMapping(users=frozenset({"alice"})))
    async with store._session_factory() as session:
        await session.execute(
            update(RoleMappingModel)
            .where(RoleMappingModel.role_name == READER)
            .values({RoleMappingModel.users_json: "null"})
        )
        await session.commit()
    assert (await store.load_role_mapping()).get(READER).users == frozenset()


async def test_corrupt_row_raises(store):
    await store.put_role_mapping(READER, RoleMapping())
    async with store._session_factory() as session:
        await session.execute(
            update(RoleMappingModel)
            .where(RoleMappingModel.role_name == READER)
            .values({RoleMappingModel.users_json: "{broken"})
        )
        await session.commit()
    with pytest.raises(ConfigurationAccessError, match="not valid JSON"):
        await store.load_role_mapping()


async def test_tenants(store):
    await store.add_tenant("Human Resources", description="HR dashboards")
    await store.add_tenant("Finance")
    assert await store.load_tenant_names() == frozenset({"Human Resources", "Finance"})

    assert await store.remove_tenant("Finance") is True
    assert await store.remove_tenant("Finance") is False
    assert await store.load_tenant_names() == frozenset({"Human Resources"})


async def test_duplicate_tenant_rejected(store):
    await store.add_tenant("Finance")
    with pytest.raises(ValueError, match="already exists"):
        await store.add_tenant("Finance")


async def test_missing_tables_raise_access_error():
    s = SQLAlchemyRoleMappingStore("sqlite+aiosqlite:///:memory:")
    try:
        with pytest.raises(ConfigurationAccessError):
            await s.load_role_mapping()
        with pytest.raises(ConfigurationAccessError):
            await s.load_tenant_names()
    finally:
        await s.close()
