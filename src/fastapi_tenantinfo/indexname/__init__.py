"""Tenant index name codec."""

from fastapi_tenantinfo.indexname.codec import TenantIndexCodec
from fastapi_tenantinfo.indexname.naming import sanitize_tenant_name, tenant_hash

__all__ = ["TenantIndexCodec", "sanitize_tenant_name", "tenant_hash"]
