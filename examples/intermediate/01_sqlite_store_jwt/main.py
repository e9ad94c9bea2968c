"""
Intermediate Example 1 — SQLite Store, Live Cluster, JWT Identities
===================================================================
Read the security configuration from a database, the index names from a
running search cluster, and the caller from a Bearer JWT.

What you'll learn
-----------------
- Wire TenantInfoService by hand instead of using create_app()
- Persist role mappings and tenants with SQLAlchemyRoleMappingStore
- Authenticate callers with JWTIdentityResolver
- Change role membership at runtime; the next request sees it

Run
---
    pip install "fastapi-tenantinfo[jwt,sqlite]" "fastapi[standard]"
    export CLUSTER_URL=http://localhost:9200
    export JWT_SECRET=change-me-to-a-long-random-string-0123456789
    uvicorn main:app --reload

Test
----
    TOKEN=$(python -c "from jose import jwt; import os; \\
        print(jwt.encode({'sub': 'alice'}, os.environ['JWT_SECRET'], algorithm='HS256'))")
    curl http://localhost:8000/_opendistro/_security/tenantinfo -H "Authorization: Bearer $TOKEN"

    # Revoke alice, then repeat the request → 403
    curl -X DELETE http://localhost:8000/admin/readers/alice
"""
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI

from fastapi_tenantinfo import (
    HTTPIndexSource,
    RoleMapping,
    TenantInfoConfig,
    TenantInfoService,
    make_tenantinfo_router,
)
from fastapi_tenantinfo.rolemapping.database import SQLAlchemyRoleMappingStore
from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

logging.basicConfig(level=logging.INFO)

READER_ROLE = "kibana_tenant_reader"
JWT_SECRET = os.environ.get("JWT_SECRET", "change-me-to-a-long-random-string-0123456789")

config = TenantInfoConfig(
    designated_role_name=READER_ROLE,
    identity_strategy="jwt",
    jwt_secret=JWT_SECRET,
)

store = SQLAlchemyRoleMappingStore("sqlite+aiosqlite:///./security.db")
source = HTTPIndexSource(os.environ.get("CLUSTER_URL", "http://localhost:9200"), timeout=5.0)
service = TenantInfoService(config, store, source)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await service.initialize()
    snapshot = await store.load_role_mapping()
    if READER_ROLE not in snapshot:
        await store.put_role_mapping(READER_ROLE, RoleMapping(users=frozenset({"alice"})))
    if not await store.load_tenant_names():
        await store.add_tenant("Human Resources")
        await store.add_tenant("Finance")
    yield
    await service.close()


app = FastAPI(title="tenantinfo (sqlite + jwt)", lifespan=lifespan)
app.include_router(make_tenantinfo_router(service, JWTIdentityResolver(secret=JWT_SECRET)))


@app.delete("/admin/readers/{username}", status_code=204)
async def revoke_reader(username: str) -> None:
    current = (await store.load_role_mapping()).get(READER_ROLE) or RoleMapping()
    updated = current.model_copy(update={"users": current.users - {username}})
    await store.put_role_mapping(READER_ROLE, updated)
