"""Abstract base class for identity resolution strategies.

Every strategy derives from :class:`BaseIdentityResolver` and implements a
single method, :meth:`~BaseIdentityResolver.resolve`, which returns the
authenticated :class:`~fastapi_tenantinfo.core.types.RequestIdentity` or
``None`` for an unauthenticated request.  The identity is then passed
explicitly to the authorization engine; nothing is stored in ambient
request context.

Extension pattern::

    from fastapi_tenantinfo.resolution.base import BaseIdentityResolver

    class CookieIdentityResolver(BaseIdentityResolver):
        def __init__(self, sessions: SessionStore) -> None:
            self._sessions = sessions

        async def resolve(self, request: Request) -> RequestIdentity | None:
            session_id = request.cookies.get("sid")
            if not session_id:
                return None
            username = await self._sessions.username_for(session_id)
            return self.identity_for(username)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from fastapi_tenantinfo.core.types import RequestIdentity


class BaseIdentityResolver(ABC):
    """Abstract base class for identity resolution strategies."""

    @abstractmethod
    async def resolve(self, request: Any) -> RequestIdentity | None:
        """Return the authenticated caller of *request*.

        Args:
            request: A FastAPI / Starlette :class:`~starlette.requests.Request`.

        Returns:
            The caller's identity, or ``None`` when the request carries no
            credentials.

        Raises:
            IdentityResolutionError: When credentials are present but cannot
                be accepted.
        """

    @staticmethod
    def identity_for(username: str | None) -> RequestIdentity | None:
        """Wrap *username* in a :class:`RequestIdentity`.

        Surrounding whitespace is stripped; ``None`` and blank values yield
        ``None``.
        """
        if username is None:
            return None
        username = username.strip()
        if not username:
            return None
        return RequestIdentity(username=username)


__all__ = ["BaseIdentityResolver"]
