"""FastAPI router exposing the tenant-info listing.

``GET`` and ``POST`` on the configured path (default
``/_opendistro/_security/tenantinfo``) return the index→tenant mapping::

    {
        ".kibana_3105_ab": "ab",
        ".kibana_999999_zzz": "__private__"
    }

Error handling
--------------
- Denied caller or rejected credentials → ``403`` with an empty body.  The
  response never says which authorization tier failed.
- Any other failure (configuration access, cluster state, a misbehaving
  collaborator) → ``500`` with ``{"error": "..."}``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from fastapi_tenantinfo.core.exceptions import (
    AccessDeniedError,
    IdentityResolutionError,
    TenantInfoError,
)

if TYPE_CHECKING:
    from fastapi_tenantinfo.resolution.base import BaseIdentityResolver
    from fastapi_tenantinfo.service import TenantInfoService

logger = logging.getLogger(__name__)


def make_tenantinfo_router(
    service: TenantInfoService,
    resolver: BaseIdentityResolver,
    path: str | None = None,
) -> APIRouter:
    """Build an ``APIRouter`` serving the tenant-info listing.

    Args:
        service: The wired :class:`~fastapi_tenantinfo.service.TenantInfoService`.
        resolver: Extracts the caller's identity from each request.
        path: Route path; defaults to ``service.config.route_path``.

    Returns:
        A router with ``GET`` and ``POST`` registered on *path*.
    """
    route_path = path or service.config.route_path
    router = APIRouter()

    async def tenant_info(request: Request) -> Response:
        try:
            identity = await resolver.resolve(request)
            mapping = await service.tenant_info(identity)
        except (AccessDeniedError, IdentityResolutionError) as exc:
            logger.debug("tenantinfo forbidden: %s", exc)
            return Response(status_code=403)
        except TenantInfoError as exc:
            logger.exception("tenantinfo failed")
            return JSONResponse(status_code=500, content={"error": str(exc)})
        except Exception as exc:
            logger.exception("tenantinfo failed with an unexpected error")
            return JSONResponse(status_code=500, content={"error": str(exc) or type(exc).__name__})
        return JSONResponse(status_code=200, content=mapping)

    router.add_api_route(
        route_path,
        tenant_info,
        methods=["GET", "POST"],
        name="tenant_info",
        include_in_schema=True,
    )
    logger.debug("tenantinfo route registered path=%s", route_path)
    return router


__all__ = ["make_tenantinfo_router"]
