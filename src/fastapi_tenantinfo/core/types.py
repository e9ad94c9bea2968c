"""Domain types, enumerations, and data models for fastapi-tenantinfo.

This module is the single source of truth for the package's domain
vocabulary.  All other modules import *from* this module, never the reverse.

Design notes
------------
* Enumerations use :class:`~enum.StrEnum` so values serialise to plain
  strings in JSON responses and logs.
* :class:`TenantMarker.PRIVATE` is itself a ``str`` (``"__private__"``), so
  the index→tenant mapping serialises without conversion while callers can
  still tell it apart from a configured tenant with an identity check.
* :class:`RoleMapping`, :class:`RoleMappingConfig` and
  :class:`RequestIdentity` are Pydantic ``frozen=True`` models.  A snapshot
  handed to the authorization engine is never mutated afterwards; stores
  publish a fresh instance on every write.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TenantMarker(StrEnum):
    """Sentinel values produced by the index-name codec.

    PRIVATE
        The index has the tenant-index shape and prefix but belongs to no
        configured shared tenant: it is a user's private space.
    """

    PRIVATE = "__private__"


class IdentityStrategy(StrEnum):
    """Method used to extract the authenticated username from a request.

    Strategies
    ----------
    HEADER
        Read a header set by a trusted authenticating proxy
        (default: ``X-Forwarded-User``).
    JWT
        Verify a Bearer JWT and read a configured claim (default: ``sub``).
    """

    HEADER = "header"
    JWT = "jwt"


# ---------------------------------------------------------------------------
# Domain models
# ---------------------------------------------------------------------------


class RequestIdentity(BaseModel):
    """The authenticated caller of a request.

    An unauthenticated request has *no* identity at all: code paths pass
    ``None`` rather than an instance with an empty username.

    Attributes:
        username: Authenticated principal name, compared case-sensitively.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1, description="Authenticated username.")


class RoleMapping(BaseModel):
    """Typed record for one entry of the role-mapping configuration.

    Only :attr:`users` takes part in the tenant-info authorization decision;
    the remaining fields are carried so a parsed snapshot round-trips the
    security configuration without loss.

    Attributes:
        users: Usernames mapped onto the role.  A missing or ``null`` list is
            an empty set.
        backend_roles: Backend (e.g. LDAP group) roles mapped onto the role.
        and_backend_roles: Backend roles that must *all* be present.
        hosts: Host patterns mapped onto the role.
        description: Free-text description.
        reserved: Whether the entry may only be changed by a super admin.
        hidden: Whether the entry is hidden from the REST API.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    users: frozenset[str] = Field(default_factory=frozenset)
    backend_roles: frozenset[str] = Field(default_factory=frozenset)
    and_backend_roles: frozenset[str] = Field(default_factory=frozenset)
    hosts: frozenset[str] = Field(default_factory=frozenset)
    description: str | None = None
    reserved: bool = False
    hidden: bool = False

    def has_member(self, username: str) -> bool:
        """Return ``True`` if *username* is listed in :attr:`users`."""
        return username in self.users


class RoleMappingConfig(BaseModel):
    """Immutable snapshot of the role-mapping configuration.

    Build instances through
    :func:`~fastapi_tenantinfo.rolemapping.parser.parse_role_mapping` when
    starting from the raw configuration tree.

    Attributes:
        roles: Role name → :class:`RoleMapping`.
    """

    model_config = ConfigDict(frozen=True)

    roles: dict[str, RoleMapping] = Field(default_factory=dict)

    def get(self, role_name: str) -> RoleMapping | None:
        """Return the mapping for *role_name*, or ``None`` when it is absent."""
        return self.roles.get(role_name)

    def role_names(self) -> frozenset[str]:
        return frozenset(self.roles)

    def __contains__(self, role_name: object) -> bool:
        return role_name in self.roles

    def __len__(self) -> int:
        return len(self.roles)

    def to_raw(self) -> dict[str, Any]:
        """Return the snapshot as a plain JSON-compatible configuration tree."""
        return {
            name: {
                "users": sorted(mapping.users),
                "backend_roles": sorted(mapping.backend_roles),
                "and_backend_roles": sorted(mapping.and_backend_roles),
                "hosts": sorted(mapping.hosts),
                "description": mapping.description,
                "reserved": mapping.reserved,
                "hidden": mapping.hidden,
            }
            for name, mapping in self.roles.items()
        }


#: Outcome of decoding one index name: the owning tenant's name,
#: ``TenantMarker.PRIVATE``, or ``None`` for "not a tenant index".
DecodedTenant: TypeAlias = "str | TenantMarker | None"


__all__ = [
    "DecodedTenant",
    "IdentityStrategy",
    "RequestIdentity",
    "RoleMapping",
    "RoleMappingConfig",
    "TenantMarker",
]
