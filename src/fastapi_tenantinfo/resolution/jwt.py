"""JWT-based identity resolution strategy.

Reads the username from a claim of a Bearer JWT in the ``Authorization``
header.

Example JWT payload::

    {
        "sub": "alice",
        "exp": 1893456000
    }

Outcomes
--------
* No ``Authorization`` header → ``None`` (unauthenticated; the engine denies).
* Wrong scheme, empty token, bad signature, expired token, or missing claim →
  :class:`~fastapi_tenantinfo.core.exceptions.IdentityResolutionError`.  The
  reason is logged at ``WARNING``; callers only ever see an empty ``403``.

Requires the ``jwt`` extra::

    pip install fastapi-tenantinfo[jwt]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt as _jose_jwt

from fastapi_tenantinfo.core.exceptions import IdentityResolutionError
from fastapi_tenantinfo.resolution.base import BaseIdentityResolver

if TYPE_CHECKING:
    from fastapi import Request

    from fastapi_tenantinfo.core.types import RequestIdentity

logger = logging.getLogger(__name__)

_STRATEGY = "jwt"
_MIN_SECRET_LENGTH = 32


class JWTIdentityResolver(BaseIdentityResolver):
    """Resolve the caller from a verified Bearer JWT.

    Args:
        secret: HMAC secret, or the public key for RS256 / ES256.
        algorithm: Accepted signing algorithm.  Defaults to ``"HS256"``.
        username_claim: Payload claim holding the username.  Defaults to
            ``"sub"``.

    Raises:
        ValueError: When *secret* is shorter than 32 characters.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        username_claim: str = "sub",
    ) -> None:
        if len(secret or "") < _MIN_SECRET_LENGTH:
            raise ValueError(f"JWT secret must be at least {_MIN_SECRET_LENGTH} characters long.")
        self._key = secret
        self._algorithms = [algorithm]
        self.username_claim = username_claim
        logger.debug("JWTIdentityResolver algorithm=%r claim=%r", algorithm, username_claim)

    async def resolve(self, request: Request) -> RequestIdentity | None:
        header = request.headers.get("Authorization")
        if not header:
            return None

        claims = self._verify(self._bearer_token(header))
        value = claims.get(self.username_claim)
        identity = self.identity_for(value) if isinstance(value, str) else None
        if identity is None:
            logger.warning("JWT has no usable %r claim", self.username_claim)
            raise IdentityResolutionError(
                f"token does not carry the {self.username_claim!r} claim",
                strategy=_STRATEGY,
            )
        return identity

    @staticmethod
    def _bearer_token(header: str) -> str:
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() != "bearer":
            raise IdentityResolutionError("Authorization header is not a Bearer token", strategy=_STRATEGY)
        token = token.strip()
        if not token:
            raise IdentityResolutionError("Bearer token is empty", strategy=_STRATEGY)
        return token

    def _verify(self, token: str) -> dict[str, Any]:
        try:
            return _jose_jwt.decode(token, self._key, algorithms=self._algorithms)
        except JWTError as exc:
            logger.warning("JWT rejected: %s", exc)
            raise IdentityResolutionError("token validation failed", strategy=_STRATEGY) from exc


__all__ = ["JWTIdentityResolver"]
