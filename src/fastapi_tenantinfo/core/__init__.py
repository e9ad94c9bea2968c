"""Core abstractions — types, config, and exceptions."""

from fastapi_tenantinfo.core.config import TenantInfoConfig
from fastapi_tenantinfo.core.exceptions import (
    AccessDeniedError,
    ClusterStateError,
    ConfigurationAccessError,
    ConfigurationError,
    IdentityResolutionError,
    TenantInfoError,
)
from fastapi_tenantinfo.core.types import (
    DecodedTenant,
    IdentityStrategy,
    RequestIdentity,
    RoleMapping,
    RoleMappingConfig,
    TenantMarker,
)

__all__ = [
    # Config
    "TenantInfoConfig",
    # Exceptions
    "TenantInfoError",
    "AccessDeniedError",
    "ClusterStateError",
    "ConfigurationAccessError",
    "ConfigurationError",
    "IdentityResolutionError",
    # Types
    "DecodedTenant",
    "IdentityStrategy",
    "RequestIdentity",
    "RoleMapping",
    "RoleMappingConfig",
    "TenantMarker",
]
