"""In-memory security configuration store for tests and development.

Warning:
    All state is lost when the process exits.  Production deployments read
    the configuration from ``SQLAlchemyRoleMappingStore`` or a custom
    :class:`~fastapi_tenantinfo.rolemapping.store.SecurityConfigStore`.

Design notes
------------
- Copy-on-write: every mutation builds a new frozen ``RoleMappingConfig`` and
  swaps the reference.  A snapshot already handed to the authorization engine
  keeps describing the configuration as it was when loaded.
- Writers hold ``_lock`` for their whole read-modify-swap sequence.  Readers
  take no lock; reading a single attribute is atomic.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
import logging
from typing import Any

from fastapi_tenantinfo.core.types import RoleMapping, RoleMappingConfig
from fastapi_tenantinfo.rolemapping.parser import parse_role_mapping
from fastapi_tenantinfo.rolemapping.store import SecurityConfigStore

logger = logging.getLogger(__name__)


class InMemoryRoleMappingStore(SecurityConfigStore):
    """Security configuration held in process memory.

    Args:
        role_mapping: Initial snapshot, or a raw configuration tree that is
            run through :func:`parse_role_mapping`.
        tenant_names: Initial configured tenant names.

    Example::

        store = InMemoryRoleMappingStore(
            role_mapping={"kibana_tenant_reader": {"users": ["alice"]}},
            tenant_names=["Human Resources", "Finance"],
        )
        snapshot = await store.load_role_mapping()
    """

    def __init__(
        self,
        role_mapping: RoleMappingConfig | Mapping[str, Any] | None = None,
        tenant_names: Iterable[str] = (),
    ) -> None:
        self._role_mapping = self._coerce(role_mapping)
        self._tenant_names: frozenset[str] = frozenset(tenant_names)
        self._lock = asyncio.Lock()
        logger.debug(
            "InMemoryRoleMappingStore initialised roles=%d tenants=%d",
            len(self._role_mapping),
            len(self._tenant_names),
        )

    @staticmethod
    def _coerce(role_mapping: RoleMappingConfig | Mapping[str, Any] | None) -> RoleMappingConfig:
        if role_mapping is None:
            return RoleMappingConfig()
        if isinstance(role_mapping, RoleMappingConfig):
            return role_mapping
        return parse_role_mapping(role_mapping)

    ###################
    # Read operations #
    ###################

    async def load_role_mapping(self) -> RoleMappingConfig:
        return self._role_mapping

    async def load_tenant_names(self) -> frozenset[str]:
        return self._tenant_names

    ####################
    # Write operations #
    ####################

    async def replace_role_mapping(
        self,
        role_mapping: RoleMappingConfig | Mapping[str, Any],
    ) -> RoleMappingConfig:
        """Replace the whole role mapping, as a configuration reload would.

        Raises:
            ConfigurationAccessError: When a raw tree fails validation.  The
                previous snapshot stays in place.
        """
        snapshot = self._coerce(role_mapping)
        async with self._lock:
            self._role_mapping = snapshot
        logger.info("Role mapping replaced roles=%d", len(snapshot))
        return snapshot

    async def put_role(self, role_name: str, mapping: RoleMapping) -> RoleMappingConfig:
        """Add or replace a single role entry."""
        async with self._lock:
            roles = dict(self._role_mapping.roles)
            roles[role_name] = mapping
            self._role_mapping = RoleMappingConfig(roles=roles)
            snapshot = self._role_mapping
        logger.info("Role mapping entry %r stored", role_name)
        return snapshot

    async def remove_role(self, role_name: str) -> bool:
        """Remove a role entry.  Returns ``False`` when it did not exist."""
        async with self._lock:
            if role_name not in self._role_mapping:
                return False
            roles = {k: v for k, v in self._role_mapping.roles.items() if k != role_name}
            self._role_mapping = RoleMappingConfig(roles=roles)
        logger.info("Role mapping entry %r removed", role_name)
        return True

    async def add_tenant(self, name: str) -> None:
        async with self._lock:
            self._tenant_names = self._tenant_names | {name}

    async def remove_tenant(self, name: str) -> bool:
        async with self._lock:
            if name not in self._tenant_names:
                return False
            self._tenant_names = self._tenant_names - {name}
        return True

    def clear(self) -> None:
        """Drop all roles and tenants.  Intended for test teardown."""
        self._role_mapping = RoleMappingConfig()
        self._tenant_names = frozenset()


__all__ = ["InMemoryRoleMappingStore"]
