"""Header-based identity resolution strategy.

Reads the username from a header set by an authenticating reverse proxy::

    GET /_opendistro/_security/tenantinfo HTTP/1.1
    X-Forwarded-User: alice

Only deploy this strategy behind a proxy that strips the header from client
requests and sets it after authenticating the caller.  Anyone who can reach
the service directly can otherwise claim any username.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi_tenantinfo.resolution.base import BaseIdentityResolver

if TYPE_CHECKING:
    from fastapi import Request

    from fastapi_tenantinfo.core.types import RequestIdentity

logger = logging.getLogger(__name__)


class HeaderIdentityResolver(BaseIdentityResolver):
    """Resolve the caller from a trusted proxy header.

    The header name is matched case-insensitively; the username value is
    kept as sent.

    Args:
        header_name: Header to read.  Defaults to ``"X-Forwarded-User"``.
    """

    def __init__(self, header_name: str = "X-Forwarded-User") -> None:
        self.header_name = header_name
        logger.debug("HeaderIdentityResolver header=%r", header_name)

    async def resolve(self, request: Request) -> RequestIdentity | None:
        """Return the identity named by the header, or ``None`` if absent or blank."""
        return self.identity_for(request.headers.get(self.header_name))


__all__ = ["HeaderIdentityResolver"]
