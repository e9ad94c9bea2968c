"""Abstract security-configuration store.

``SecurityConfigStore`` is the read contract the tenant-info service needs
from wherever the security configuration lives: the role mapping and the set
of configured tenant names.

Implementations must be:

- **Fully async** — every method is a coroutine.
- **Snapshot-safe** — a ``RoleMappingConfig`` returned to one caller is never
  mutated by a later write or reload (copy-on-write or immutable versions).
- **Loud on failure** — an unreachable or corrupt store raises
  ``ConfigurationAccessError``; it never returns an empty mapping instead.

Extending::

    class VaultConfigStore(SecurityConfigStore):
        async def load_role_mapping(self) -> RoleMappingConfig:
            return parse_role_mapping(await self._client.read("rolesmapping"))

        async def load_tenant_names(self) -> frozenset[str]:
            return frozenset(await self._client.read("tenants"))
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi_tenantinfo.core.types import RoleMappingConfig


class SecurityConfigStore(ABC):
    """Abstract base class for security configuration backends."""

    @abstractmethod
    async def load_role_mapping(self) -> RoleMappingConfig:
        """Return a fresh role-mapping snapshot.

        Raises:
            ConfigurationAccessError: When the configuration cannot be read
                or parsed.
        """

    @abstractmethod
    async def load_tenant_names(self) -> frozenset[str]:
        """Return every configured tenant name.

        Raises:
            ConfigurationAccessError: When the configuration cannot be read.
        """

    async def initialize(self) -> None:
        """Prepare the backend (create tables, open pools).  No-op by default."""

    async def close(self) -> None:
        """Release resources held by the backend.  No-op by default."""


__all__ = ["SecurityConfigStore"]
