"""Encoding and decoding of tenant-scoped index names.

A tenant index name has exactly three ``_``-delimited segments::

    <prefix>_<tenant hash>_<sanitised tenant name>
    .kibana_3105_ab          (tenant "ab")

Decoding reconstructs the owning tenant from such a name and the set of
configured tenant names.  It is total: every input yields a tenant name,
:attr:`~fastapi_tenantinfo.core.types.TenantMarker.PRIVATE`, or ``None``.

Why both hash *and* sanitised name
----------------------------------
Sanitisation is lossy (``"HR"`` and ``"h.r."`` both become ``"hr"``), so the
hash of the original name disambiguates.  A configured pair that collides on
both is a configuration hazard; the first tenant in iteration order wins and
no error is raised.

Segment splitting
-----------------
Trailing empty segments are discarded before counting, so
``".kibana_123_abc_"`` still has three segments while ``".kibana_123_"`` has
two.  This matches how the index producer's own tooling splits names.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from fastapi_tenantinfo.core.types import TenantMarker
from fastapi_tenantinfo.indexname.naming import (
    INT32_MAX,
    INT32_MIN,
    sanitize_tenant_name,
    tenant_hash,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from fastapi_tenantinfo.core.types import DecodedTenant

logger = logging.getLogger(__name__)

_SEPARATOR = "_"
_SIGNED_DECIMAL = re.compile(r"[+-]?\d+")


def _split_segments(index_name: str) -> list[str]:
    parts = index_name.split(_SEPARATOR)
    while parts and not parts[-1]:
        parts.pop()
    return parts


def _parse_int32(segment: str) -> int | None:
    """Parse *segment* as a signed 32-bit decimal, or return ``None``."""
    if not _SIGNED_DECIMAL.fullmatch(segment):
        return None
    value = int(segment)
    if value < INT32_MIN or value > INT32_MAX:
        return None
    return value


class TenantIndexCodec:
    """Map tenant names to index names and back for one index prefix.

    Instances hold only the immutable prefix and are safe to share across
    concurrent requests.

    Args:
        prefix: First segment of every tenant index name (e.g. ``".kibana"``).
            Must be non-empty and must not contain ``_``.

    Raises:
        ValueError: When *prefix* is empty or contains ``_``.

    Example::

        codec = TenantIndexCodec(".kibana")
        name = codec.encode("Human Resources")
        codec.decode(name, {"Human Resources", "Finance"})  # "Human Resources"
    """

    def __init__(self, prefix: str) -> None:
        if not prefix or _SEPARATOR in prefix:
            raise ValueError(f"Invalid tenant index prefix {prefix!r}")
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def encode(self, tenant: str) -> str:
        """Return the index name that holds *tenant*'s shared data."""
        return f"{self._prefix}{_SEPARATOR}{tenant_hash(tenant)}{_SEPARATOR}{sanitize_tenant_name(tenant)}"

    def decode(self, index_name: str | None, configured_tenants: Iterable[str]) -> DecodedTenant:
        """Return the tenant that owns *index_name*.

        Args:
            index_name: An index or alias name from cluster state.
            configured_tenants: Every configured tenant name.

        Returns:
            * the matching configured tenant name;
            * :attr:`TenantMarker.PRIVATE` when the name has the tenant-index
              shape and prefix but matches no configured tenant;
            * ``None`` when the name is not a tenant index at all.

        A hash segment that is not a signed 32-bit integer is logged at
        ``WARNING`` and decodes to ``None``; this method never raises for
        any string input.
        """
        if index_name is None:
            return None

        segments = _split_segments(index_name)
        if len(segments) != 3:
            return None

        prefix, hash_segment, sanitized = segments
        if prefix != self._prefix:
            return None

        expected_hash = _parse_int32(hash_segment)
        if expected_hash is None:
            logger.warning(
                "Index %r looks like a tenant index but its hash segment %r is not "
                "a 32-bit integer; ignoring it",
                index_name,
                hash_segment,
            )
            return None

        for tenant in configured_tenants:
            if tenant_hash(tenant) == expected_hash and sanitize_tenant_name(tenant) == sanitized:
                return tenant

        return TenantMarker.PRIVATE


__all__ = ["TenantIndexCodec"]
