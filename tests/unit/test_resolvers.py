"""Unit tests — fastapi_tenantinfo.resolution"""

from __future__ import annotations

import time

import pytest
from starlette.requests import Request

from fastapi_tenantinfo.core.config import TenantInfoConfig
from fastapi_tenantinfo.core.exceptions import IdentityResolutionError
from fastapi_tenantinfo.core.types import RequestIdentity
from fastapi_tenantinfo.resolution import (
    BaseIdentityResolver,
    HeaderIdentityResolver,
    ResolverFactory,
)

pytestmark = pytest.mark.unit

SECRET = "tenantinfo-test-secret-0123456789abcdef"


def _request(headers: dict[str, str] | None = None) -> Request:
    raw = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": raw})


class TestIdentityFor:
    def test_wraps_username(self):
        assert BaseIdentityResolver.identity_for("alice") == RequestIdentity(username="alice")

    def test_strips_whitespace(self):
        assert BaseIdentityResolver.identity_for("  alice ").username == "alice"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_is_none(self, value):
        assert BaseIdentityResolver.identity_for(value) is None


class TestHeaderResolver:
    async def test_reads_default_header(self):
        identity = await HeaderIdentityResolver().resolve(_request({"X-Forwarded-User": "alice"}))
        assert identity.username == "alice"

    async def test_missing_header_is_unauthenticated(self):
        assert await HeaderIdentityResolver().resolve(_request()) is None

    async def test_blank_header_is_unauthenticated(self):
        assert await HeaderIdentityResolver().resolve(_request({"X-Forwarded-User": "  "})) is None

    async def test_custom_header(self):
        resolver = HeaderIdentityResolver(header_name="X-Auth-Principal")
        identity = await resolver.resolve(_request({"X-Auth-Principal": "bob"}))
        assert identity.username == "bob"

    async def test_username_case_preserved(self):
        identity = await HeaderIdentityResolver().resolve(_request({"X-Forwarded-User": "KibanaServer"}))
        assert identity.username == "KibanaServer"


class TestJWTResolver:
    @pytest.fixture
    def jose_jwt(self):
        return pytest.importorskip("jose.jwt")

    @pytest.fixture
    def resolver(self, jose_jwt):
        from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

        return JWTIdentityResolver(secret=SECRET)

    def _bearer(self, jose_jwt, claims: dict, secret: str = SECRET) -> dict[str, str]:
        return {"Authorization": f"Bearer {jose_jwt.encode(claims, secret, algorithm='HS256')}"}

    async def test_valid_token(self, resolver, jose_jwt):
        identity = await resolver.resolve(_request(self._bearer(jose_jwt, {"sub": "alice"})))
        assert identity.username == "alice"

    async def test_custom_claim(self, jose_jwt):
        from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

        resolver = JWTIdentityResolver(secret=SECRET, username_claim="preferred_username")
        request = _request(self._bearer(jose_jwt, {"sub": "u-1", "preferred_username": "alice"}))
        assert (await resolver.resolve(request)).username == "alice"

    async def test_no_header_is_unauthenticated(self, resolver):
        assert await resolver.resolve(_request()) is None

    async def test_wrong_scheme(self, resolver):
        with pytest.raises(IdentityResolutionError) as exc:
            await resolver.resolve(_request({"Authorization": "Basic YWxpY2U6cHc="}))
        assert exc.value.strategy == "jwt"

    async def test_empty_token(self, resolver):
        with pytest.raises(IdentityResolutionError):
            await resolver.resolve(_request({"Authorization": "Bearer"}))

    async def test_bad_signature(self, resolver, jose_jwt):
        headers = self._bearer(jose_jwt, {"sub": "alice"}, secret="x" * 40)
        with pytest.raises(IdentityResolutionError, match="validation failed"):
            await resolver.resolve(_request(headers))

    async def test_expired_token(self, resolver, jose_jwt):
        headers = self._bearer(jose_jwt, {"sub": "alice", "exp": int(time.time()) - 60})
        with pytest.raises(IdentityResolutionError):
            await resolver.resolve(_request(headers))

    async def test_missing_claim(self, resolver, jose_jwt):
        with pytest.raises(IdentityResolutionError, match="'sub' claim"):
            await resolver.resolve(_request(self._bearer(jose_jwt, {"role": "reader"})))

    async def test_non_string_claim(self, resolver, jose_jwt):
        with pytest.raises(IdentityResolutionError):
            await resolver.resolve(_request(self._bearer(jose_jwt, {"sub": 42})))

    def test_short_secret_rejected(self, jose_jwt):
        from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

        with pytest.raises(ValueError, match="32"):
            JWTIdentityResolver(secret="short")


class TestResolverFactory:
    def test_header_strategy(self):
        resolver = ResolverFactory.create(TenantInfoConfig(identity_header_name="X-User"))
        assert isinstance(resolver, HeaderIdentityResolver)

    def test_jwt_strategy(self):
        pytest.importorskip("jose")
        from fastapi_tenantinfo.resolution.jwt import JWTIdentityResolver

        cfg = TenantInfoConfig(identity_strategy="jwt", jwt_secret=SECRET)
        assert isinstance(ResolverFactory.create(cfg), JWTIdentityResolver)
