"""
Basic Example 1 — Static Cluster
=================================
The smallest tenant-info service: an in-memory security configuration and a
fixed list of index names, so no database or search cluster is needed.

What you'll learn
-----------------
- Seed InMemoryRoleMappingStore with a role mapping and tenant names
- Serve the listing with create_app() and header-based identities
- See which callers get the mapping and which get an empty 403

Run
---
    pip install "fastapi-tenantinfo" "fastapi[standard]"
    uvicorn main:app --reload

Test
----
    # Service account → full mapping
    curl http://localhost:8000/_opendistro/_security/tenantinfo -H "X-Forwarded-User: kibanaserver"

    # Member of the designated role → full mapping
    curl http://localhost:8000/_opendistro/_security/tenantinfo -H "X-Forwarded-User: alice"

    # Anyone else, or no header → 403 with an empty body
    curl -i http://localhost:8000/_opendistro/_security/tenantinfo -H "X-Forwarded-User: bob"
"""
import logging

from fastapi_tenantinfo import (
    InMemoryRoleMappingStore,
    StaticIndexSource,
    TenantIndexCodec,
    TenantInfoConfig,
    create_app,
)

logging.basicConfig(level=logging.INFO)

# ── 1. Configuration ──────────────────────────────────────────────────────────
#
# Users mapped onto designated_role_name may list the mapping, as may the
# service account and every super admin.
#
config = TenantInfoConfig(
    tenant_index_prefix=".kibana",
    designated_role_name="kibana_tenant_reader",
    super_admin_users=["admin"],
)

# ── 2. Security configuration ─────────────────────────────────────────────────
#
store = InMemoryRoleMappingStore(
    role_mapping={
        "_meta": {"type": "rolesmapping", "config_version": 2},
        "kibana_tenant_reader": {"users": ["alice"]},
    },
    tenant_names=["Human Resources", "Finance"],
)

# ── 3. Cluster state ──────────────────────────────────────────────────────────
#
# Real tenant indices are named by the dashboard; the codec builds the same
# names here.  The last one belongs to no configured tenant, so it is listed
# as a private space.
#
codec = TenantIndexCodec(config.tenant_index_prefix)
source = StaticIndexSource([
    ".kibana",
    codec.encode("Human Resources"),
    codec.encode("Finance"),
    codec.encode("alice"),
    "logs-2024.01.01",
])

# ── 4. App ────────────────────────────────────────────────────────────────────
#
app = create_app(config, config_store=store, index_source=source)
