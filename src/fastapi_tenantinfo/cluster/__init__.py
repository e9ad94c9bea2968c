"""Cluster state sources."""

from fastapi_tenantinfo.cluster.http_source import HTTPIndexSource
from fastapi_tenantinfo.cluster.source import IndexSource, StaticIndexSource

__all__ = ["HTTPIndexSource", "IndexSource", "StaticIndexSource"]
