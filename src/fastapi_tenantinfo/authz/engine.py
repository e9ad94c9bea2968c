"""Tiered authorization for listing the index→tenant mapping.

Decision order (first match wins, fail closed)::

    no identity                          → deny
    username == service account          → allow
    is_super_admin(username)             → allow
    designated role unset / empty        → deny
    designated role absent from snapshot → deny
    username in the role's users         → allow, otherwise deny

The role-mapping snapshot is loaded *after* the identity tiers, and on every
call: membership changes take effect on the next request.  Nothing is
cached.

Failure semantics
-----------------
Any exception raised while loading the snapshot, and any loader result that
is not a :class:`~fastapi_tenantinfo.core.types.RoleMappingConfig`, surfaces
as :class:`~fastapi_tenantinfo.core.exceptions.ConfigurationAccessError`.
The engine never converts a failed load into an allow or a deny.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import inspect
import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from fastapi_tenantinfo.core.exceptions import ConfigurationAccessError, TenantInfoError
from fastapi_tenantinfo.core.types import RoleMappingConfig

if TYPE_CHECKING:
    from fastapi_tenantinfo.core.types import RequestIdentity

logger = logging.getLogger(__name__)

_ROLES_MAPPING = "rolesmapping"

RoleMappingLoader = Callable[[], RoleMappingConfig | Awaitable[RoleMappingConfig]]


class AuthorizationCapabilities(BaseModel):
    """Collaborators the engine consults for one decision.

    Attributes:
        service_account_name: The dashboard service identity.
        is_super_admin: Returns ``True`` for super-admin usernames.
        designated_role_name: Role whose users may list the mapping.
            ``None`` or ``""`` disables the role tier.
        load_role_mapping: Returns a fresh snapshot.  May be a coroutine
            function when used with
            :meth:`AuthorizationDecisionEngine.is_authorized_async`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    service_account_name: str = Field(..., min_length=1)
    is_super_admin: Callable[[str], bool]
    designated_role_name: str | None = None
    load_role_mapping: RoleMappingLoader


class AuthorizationDecisionEngine:
    """Decide whether a caller may list the index→tenant mapping.

    The engine is stateless; a single instance may serve every request.

    Example::

        engine = AuthorizationDecisionEngine()
        caps = AuthorizationCapabilities(
            service_account_name="kibanaserver",
            is_super_admin=config.is_super_admin,
            designated_role_name="kibana_tenant_reader",
            load_role_mapping=lambda: snapshot,
        )
        engine.is_authorized(RequestIdentity(username="alice"), caps)
    """

    def is_authorized(
        self,
        identity: RequestIdentity | None,
        capabilities: AuthorizationCapabilities,
    ) -> bool:
        """Return the decision using a synchronous role-mapping loader.

        Raises:
            ConfigurationAccessError: When the snapshot cannot be loaded, or
                the loader is asynchronous.
        """
        decided = self._decide_by_identity(identity, capabilities)
        if decided is not None:
            return decided

        result = self._call_loader(capabilities)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise ConfigurationAccessError(
                _ROLES_MAPPING,
                "loader is asynchronous; use is_authorized_async()",
            )
        return self._decide_by_role(identity, capabilities, result)  # type: ignore[arg-type]

    async def is_authorized_async(
        self,
        identity: RequestIdentity | None,
        capabilities: AuthorizationCapabilities,
    ) -> bool:
        """Return the decision, awaiting the loader when it is asynchronous.

        Raises:
            ConfigurationAccessError: When the snapshot cannot be loaded.
        """
        decided = self._decide_by_identity(identity, capabilities)
        if decided is not None:
            return decided

        result = self._call_loader(capabilities)
        if inspect.isawaitable(result):
            try:
                result = await result
            except TenantInfoError:
                raise
            except Exception as exc:
                raise ConfigurationAccessError(_ROLES_MAPPING, str(exc) or type(exc).__name__) from exc
        return self._decide_by_role(identity, capabilities, result)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Tiers
    # ------------------------------------------------------------------

    @staticmethod
    def _decide_by_identity(
        identity: RequestIdentity | None,
        capabilities: AuthorizationCapabilities,
    ) -> bool | None:
        """Apply the tiers that need no configuration read.

        Returns ``True``/``False`` for a final decision, ``None`` to continue.
        """
        if identity is None:
            return False

        username = identity.username
        if username == capabilities.service_account_name:
            logger.debug("tenantinfo allowed for service account %r", username)
            return True

        if capabilities.is_super_admin(username):
            logger.debug("tenantinfo allowed for super admin %r", username)
            return True

        return None

    @staticmethod
    def _call_loader(capabilities: AuthorizationCapabilities) -> Any:
        try:
            return capabilities.load_role_mapping()
        except TenantInfoError:
            raise
        except Exception as exc:
            raise ConfigurationAccessError(_ROLES_MAPPING, str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _decide_by_role(
        identity: RequestIdentity,
        capabilities: AuthorizationCapabilities,
        snapshot: Any,
    ) -> bool:
        if not isinstance(snapshot, RoleMappingConfig):
            raise ConfigurationAccessError(
                _ROLES_MAPPING,
                f"loader returned {type(snapshot).__name__}, expected RoleMappingConfig",
            )

        role_name = capabilities.designated_role_name
        if not role_name:
            logger.debug("tenantinfo denied for %r: no designated role", identity.username)
            return False

        mapping = snapshot.get(role_name)
        if mapping is None:
            logger.debug(
                "tenantinfo denied for %r: role %r is not mapped",
                identity.username,
                role_name,
            )
            return False

        allowed = mapping.has_member(identity.username)
        logger.debug(
            "tenantinfo %s for %r via role %r",
            "allowed" if allowed else "denied",
            identity.username,
            role_name,
        )
        return allowed


_default_engine = AuthorizationDecisionEngine()


def is_authorized(
    identity: RequestIdentity | None,
    capabilities: AuthorizationCapabilities,
) -> bool:
    """Module-level shortcut for :meth:`AuthorizationDecisionEngine.is_authorized`."""
    return _default_engine.is_authorized(identity, capabilities)


__all__ = [
    "AuthorizationCapabilities",
    "AuthorizationDecisionEngine",
    "RoleMappingLoader",
    "is_authorized",
]
