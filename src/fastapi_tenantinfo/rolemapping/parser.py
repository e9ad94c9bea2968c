"""Parse and validate the role-mapping configuration tree.

The security configuration stores role mappings as a loosely structured
document::

    {
        "_meta": {"type": "rolesmapping", "config_version": 2},
        "kibana_tenant_reader": {
            "users": ["alice", "bob"],
            "backend_roles": ["dashboards"],
            "hosts": [],
            "description": "May list tenant indices"
        }
    }

This module is the only place that inspects that untyped tree.  Everything
downstream works with :class:`~fastapi_tenantinfo.core.types.RoleMappingConfig`.
Structural problems raise
:class:`~fastapi_tenantinfo.core.exceptions.ConfigurationAccessError`: a
corrupt document must never be read as "nobody is mapped".
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from typing import Any

from pydantic import ValidationError

from fastapi_tenantinfo.core.exceptions import ConfigurationAccessError
from fastapi_tenantinfo.core.types import RoleMapping, RoleMappingConfig

logger = logging.getLogger(__name__)

SOURCE = "rolesmapping"
META_KEY = "_meta"

_LIST_FIELDS = ("users", "backend_roles", "and_backend_roles", "hosts")


def _parse_entry(role_name: str, entry: Any) -> RoleMapping:
    if not isinstance(entry, Mapping):
        raise ConfigurationAccessError(
            SOURCE,
            f"entry for role {role_name!r} is {type(entry).__name__}, expected an object",
        )

    data = dict(entry)
    for field in _LIST_FIELDS:
        # null lists are legal in stored documents and mean "no members"
        if field in data and data[field] is None:
            data[field] = []
        value = data.get(field)
        if isinstance(value, str):
            raise ConfigurationAccessError(
                SOURCE,
                f"{field!r} of role {role_name!r} must be a list of strings",
            )

    try:
        return RoleMapping.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationAccessError(
            SOURCE,
            f"entry for role {role_name!r} is invalid",
            details={"errors": exc.errors(include_url=False, include_input=False)},
        ) from exc


def parse_role_mapping(raw: Mapping[str, Any] | None) -> RoleMappingConfig:
    """Build a typed snapshot from the raw role-mapping tree.

    Args:
        raw: Role name → entry object.  The ``_meta`` entry is skipped.

    Returns:
        An immutable :class:`RoleMappingConfig`.

    Raises:
        ConfigurationAccessError: When *raw* is not an object, a role name is
            not a non-empty string, or an entry has the wrong shape.
    """
    if raw is None:
        raise ConfigurationAccessError(SOURCE, "configuration document is missing")
    if not isinstance(raw, Mapping):
        raise ConfigurationAccessError(
            SOURCE,
            f"configuration document is {type(raw).__name__}, expected an object",
        )

    roles: dict[str, RoleMapping] = {}
    for role_name, entry in raw.items():
        if role_name == META_KEY:
            continue
        if not isinstance(role_name, str) or not role_name:
            raise ConfigurationAccessError(SOURCE, f"invalid role name {role_name!r}")
        roles[role_name] = _parse_entry(role_name, entry)

    logger.debug("Parsed role mapping with %d roles", len(roles))
    return RoleMappingConfig(roles=roles)


def parse_role_mapping_json(text: str | bytes) -> RoleMappingConfig:
    """Parse a JSON-encoded role-mapping document.

    Raises:
        ConfigurationAccessError: When *text* is not valid JSON or does not
            describe a valid role mapping.
    """
    try:
        raw = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigurationAccessError(SOURCE, f"document is not valid JSON: {exc}") from exc
    return parse_role_mapping(raw)


__all__ = ["META_KEY", "SOURCE", "parse_role_mapping", "parse_role_mapping_json"]
