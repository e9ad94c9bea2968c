"""Sources of the live index and alias names in the cluster.

``IndexSource`` is the read contract the tenant-info service needs from the
cluster: an ordered sequence containing every index name and every alias
name.  The service preserves that order in its response.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


class IndexSource(ABC):
    """Abstract base class for cluster index/alias name providers."""

    @abstractmethod
    async def index_and_alias_names(self) -> Sequence[str]:
        """Return every index and alias name currently in the cluster.

        Raises:
            ClusterStateError: When the names cannot be retrieved.
        """

    async def close(self) -> None:
        """Release resources held by the source.  No-op by default."""


class StaticIndexSource(IndexSource):
    """Fixed list of names, for tests and offline tooling.

    Args:
        names: Index and alias names, returned in the given order.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: tuple[str, ...] = tuple(names)

    async def index_and_alias_names(self) -> Sequence[str]:
        return self._names


__all__ = ["IndexSource", "StaticIndexSource"]
