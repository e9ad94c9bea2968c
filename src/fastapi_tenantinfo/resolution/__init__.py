"""Identity resolution strategies."""

from fastapi_tenantinfo.resolution.base import BaseIdentityResolver
from fastapi_tenantinfo.resolution.factory import ResolverFactory
from fastapi_tenantinfo.resolution.header import HeaderIdentityResolver

__all__ = ["BaseIdentityResolver", "HeaderIdentityResolver", "ResolverFactory"]
