"""fastapi-tenantinfo — which tenant owns which index, for authorized callers.

In a multi-tenant search cluster every shared tenant's data lives in an index
named ``<prefix>_<hash>_<sanitised name>``.  This package decodes such names
back to tenant names and serves the full index→tenant mapping to the
dashboard service account, super admins, and members of one designated role.

Quick start
-----------
.. code-block:: python

    from fastapi_tenantinfo import TenantInfoConfig, create_app
    from fastapi_tenantinfo.cluster import StaticIndexSource
    from fastapi_tenantinfo.rolemapping import InMemoryRoleMappingStore

    config = TenantInfoConfig(designated_role_name="kibana_tenant_reader")
    app = create_app(
        config,
        config_store=InMemoryRoleMappingStore(
            role_mapping={"kibana_tenant_reader": {"users": ["alice"]}},
            tenant_names=["ab", "Human Resources"],
        ),
        index_source=StaticIndexSource([".kibana_3105_ab"]),
    )

Optional extras
---------------
- ``JWTIdentityResolver`` — requires ``pip install fastapi-tenantinfo[jwt]``
- ``SQLAlchemyRoleMappingStore`` — requires an async database driver, e.g.
  ``pip install fastapi-tenantinfo[sqlite]``
"""

from fastapi_tenantinfo.app import create_app
from fastapi_tenantinfo.authz.engine import (
    AuthorizationCapabilities,
    AuthorizationDecisionEngine,
    is_authorized,
)
from fastapi_tenantinfo.cluster.http_source import HTTPIndexSource
from fastapi_tenantinfo.cluster.source import IndexSource, StaticIndexSource
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
    IdentityStrategy,
    RequestIdentity,
    RoleMapping,
    RoleMappingConfig,
    TenantMarker,
)
from fastapi_tenantinfo.indexname.codec import TenantIndexCodec
from fastapi_tenantinfo.indexname.naming import sanitize_tenant_name, tenant_hash
from fastapi_tenantinfo.resolution.base import BaseIdentityResolver
from fastapi_tenantinfo.resolution.header import HeaderIdentityResolver
from fastapi_tenantinfo.rolemapping.database import SQLAlchemyRoleMappingStore
from fastapi_tenantinfo.rolemapping.memory import InMemoryRoleMappingStore
from fastapi_tenantinfo.rolemapping.parser import parse_role_mapping, parse_role_mapping_json
from fastapi_tenantinfo.rolemapping.store import SecurityConfigStore
from fastapi_tenantinfo.router import make_tenantinfo_router
from fastapi_tenantinfo.service import TenantInfoService

############################################################################
# Optional extras: imported lazily so the package works without them.    #
############################################################################

try:
    from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver
    _has_jwt = True
except ImportError:  # pragma: no cover; python-jose not installed
    _has_jwt = False  # type: ignore[assignment]

try:
    from importlib.metadata import version as _pkg_version
    __version__: str = _pkg_version("fastapi-tenantinfo")
except Exception:  # pragma: no cover; package not installed
    __version__ = "0.0.0.dev0"

__all__ = [  # NOQA
    # Version
    "__version__",
    # Configuration
    "TenantInfoConfig",
    # Application
    "create_app",
    "make_tenantinfo_router",
    "TenantInfoService",
    # Domain types
    "IdentityStrategy",
    "RequestIdentity",
    "RoleMapping",
    "RoleMappingConfig",
    "TenantMarker",
    # Codec
    "TenantIndexCodec",
    "sanitize_tenant_name",
    "tenant_hash",
    # Authorization
    "AuthorizationCapabilities",
    "AuthorizationDecisionEngine",
    "is_authorized",
    # Exceptions
    "AccessDeniedError",
    "ClusterStateError",
    "ConfigurationAccessError",
    "ConfigurationError",
    "IdentityResolutionError",
    "TenantInfoError",
    # Configuration stores
    "InMemoryRoleMappingStore",
    "SQLAlchemyRoleMappingStore",
    "SecurityConfigStore",
    "parse_role_mapping",
    "parse_role_mapping_json",
    # Cluster state
    "HTTPIndexSource",
    "IndexSource",
    "StaticIndexSource",
    # Resolvers
    "BaseIdentityResolver",
    "HeaderIdentityResolver",
]

if _has_jwt:
    __all__ += ["JWTIdentityResolver"]  # type: ignore[operator]
