"""Integration tests — fastapi_tenantinfo.rolemapping.memory"""

from __future__ import annotations

import pytest

from fastapi_tenantinfo.core.exceptions import ConfigurationAccessError
from fastapi_tenantinfo.core.types import RoleMapping, RoleMappingConfig
from fastapi_tenantinfo.rolemapping.memory import InMemoryRoleMappingStore

pytestmark = pytest.mark.integration


async def test_empty_store():
    store = InMemoryRoleMappingStore()
    assert len(await store.load_role_mapping()) == 0
    assert await store.load_tenant_names() == frozenset()


async def test_seeded_from_raw_tree(mem_store):
    snapshot = await mem_store.load_role_mapping()
    assert snapshot.get("kibana_tenant_reader").has_member("alice")
    assert await mem_store.load_tenant_names() == frozenset({"Human Resources", "Finance", "R&D"})


async def test_seeded_from_snapshot():
    snapshot = RoleMappingConfig(roles={"r": RoleMapping(users=frozenset({"x"}))})
    store = InMemoryRoleMappingStore(role_mapping=snapshot)
    assert await store.load_role_mapping() is snapshot


def test_invalid_seed_rejected():
    with pytest.raises(ConfigurationAccessError):
        InMemoryRoleMappingStore(role_mapping={"r": {"users": "alice"}})


async def test_put_role_does_not_mutate_earlier_snapshot(mem_store):
    before = await mem_store.load_role_mapping()
    await mem_store.put_role("kibana_tenant_reader", RoleMapping(users=frozenset({"bob"})))
    after = await mem_store.load_role_mapping()

    assert before.get("kibana_tenant_reader").has_member("alice")
    assert not after.get("kibana_tenant_reader").has_member("alice")
    assert after.get("kibana_tenant_reader").has_member("bob")


async def test_remove_role(mem_store):
    assert await mem_store.remove_role("all_access") is True
    assert await mem_store.remove_role("all_access") is False
    assert "all_access" not in await mem_store.load_role_mapping()


async def test_replace_role_mapping(mem_store):
    await mem_store.replace_role_mapping({"other": {"users": ["dave"]}})
    snapshot = await mem_store.load_role_mapping()
    assert snapshot.role_names() == frozenset({"other"})


async def test_failed_replace_keeps_previous_snapshot(mem_store):
    before = await mem_store.load_role_mapping()
    with pytest.raises(ConfigurationAccessError):
        await mem_store.replace_role_mapping({"other": []})
    assert await mem_store.load_role_mapping() is before


async def test_tenant_names(mem_store):
    await mem_store.add_tenant("Legal")
    assert "Legal" in await mem_store.load_tenant_names()
    assert await mem_store.remove_tenant("Legal") is True
    assert await mem_store.remove_tenant("Legal") is False


async def test_clear(mem_store):
    mem_store.clear()
    assert len(await mem_store.load_role_mapping()) == 0
    assert await mem_store.load_tenant_names() == frozenset()
