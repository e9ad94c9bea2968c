"""Role-mapping parsing and security configuration stores."""

from fastapi_tenantinfo.rolemapping.memory import InMemoryRoleMappingStore
from fastapi_tenantinfo.rolemapping.parser import parse_role_mapping, parse_role_mapping_json
from fastapi_tenantinfo.rolemapping.store import SecurityConfigStore

__all__ = [
    "InMemoryRoleMappingStore",
    "SecurityConfigStore",
    "parse_role_mapping",
    "parse_role_mapping_json",
]
