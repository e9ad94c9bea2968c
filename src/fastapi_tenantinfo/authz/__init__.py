"""Authorization decisions for the tenant-info listing."""

from fastapi_tenantinfo.authz.engine import (
    AuthorizationCapabilities,
    AuthorizationDecisionEngine,
    RoleMappingLoader,
    is_authorized,
)

__all__ = [
    "AuthorizationCapabilities",
    "AuthorizationDecisionEngine",
    "RoleMappingLoader",
    "is_authorized",
]
