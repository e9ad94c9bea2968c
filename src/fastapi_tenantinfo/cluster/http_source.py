"""HTTP index source backed by the cluster's ``_alias`` API.

``GET /_alias`` returns every index together with its aliases::

    {
        ".kibana_3105_ab": {"aliases": {}},
        "logs-2024.01.01": {"aliases": {"logs": {}}}
    }

Both the index names and the alias names are collected, de-duplicated, and
returned sorted, matching the sorted lookup the cluster itself exposes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from fastapi_tenantinfo.cluster.source import IndexSource
from fastapi_tenantinfo.core.exceptions import ClusterStateError

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


class HTTPIndexSource(IndexSource):
    """Read index and alias names over HTTP.

    Args:
        base_url: Cluster base URL (e.g. ``"https://search.internal:9200"``).
        timeout: Request timeout in seconds.
        auth: Optional ``(username, password)`` for basic authentication.
        client: Pre-built ``httpx.AsyncClient``.  When given, *timeout* and
            *auth* are ignored and the caller owns the client's lifecycle.

    Example::

        source = HTTPIndexSource("https://search.internal:9200", auth=("kibanaserver", pw))
        names = await source.index_and_alias_names()
        await source.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        auth: tuple[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, auth=auth)
        logger.debug("HTTPIndexSource base_url=%s", self._base_url)

    async def index_and_alias_names(self) -> Sequence[str]:
        url = f"{self._base_url}/_alias"
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ClusterStateError(
                f"alias lookup returned HTTP {exc.response.status_code}",
                details={"url": url},
            ) from exc
        except httpx.HTTPError as exc:
            raise ClusterStateError(f"alias lookup failed: {exc}", details={"url": url}) from exc
        except ValueError as exc:
            raise ClusterStateError("alias lookup returned invalid JSON", details={"url": url}) from exc

        return sorted(self._collect_names(data))

    @staticmethod
    def _collect_names(data: Any) -> set[str]:
        if not isinstance(data, dict):
            raise ClusterStateError("alias lookup returned an unexpected document")

        names: set[str] = set()
        for index_name, entry in data.items():
            names.add(index_name)
            aliases = entry.get("aliases") if isinstance(entry, dict) else None
            if isinstance(aliases, dict):
                names.update(aliases)
        return names

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["HTTPIndexSource"]
