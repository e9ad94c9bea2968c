"""Configuration management for fastapi-tenantinfo.

``TenantInfoConfig`` is a ``pydantic_settings.BaseSettings`` model that reads
its values from environment variables (prefix ``TENANTINFO_``), an optional
``.env`` file, or explicit keyword arguments.

Cross-field consistency checks run inside a ``model_validator`` so a
misconfigured ``TenantInfoConfig`` raises immediately at construction time.

Environment variables
---------------------
Every field can be overridden with ``TENANTINFO_<FIELD_NAME_UPPER>``::

    TENANTINFO_TENANT_INDEX_PREFIX=.kibana
    TENANTINFO_SERVICE_ACCOUNT_NAME=kibanaserver
    TENANTINFO_DESIGNATED_ROLE_NAME=kibana_tenant_reader
    TENANTINFO_SUPER_ADMIN_USERS='["admin"]'
    TENANTINFO_IDENTITY_STRATEGY=jwt
    TENANTINFO_CLUSTER_URL=https://search.internal:9200
"""

from __future__ import annotations

import re

from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fastapi_tenantinfo.core.types import IdentityStrategy


class TenantInfoConfig(BaseSettings):
    """Central configuration for the tenant-info service.

    Example — programmatic::

        config = TenantInfoConfig(
            tenant_index_prefix=".kibana",
            service_account_name="kibanaserver",
            designated_role_name="kibana_tenant_reader",
            super_admin_users=["admin"],
        )

    Example — environment variables::

        # .env
        TENANTINFO_DESIGNATED_ROLE_NAME=kibana_tenant_reader
        TENANTINFO_DATABASE_URL=sqlite+aiosqlite:///./security.db

        config = TenantInfoConfig()  # reads from environment / .env
    """

    model_config = SettingsConfigDict(
        env_prefix="TENANTINFO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def __str__(self) -> str:
        """Return a masked string representation safe for logging."""
        text = super().__repr__()
        text = re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", text)
        text = re.sub(
            r"(jwt_secret|secret|password)=(?:'[^']*'|[^\s,)]+)",
            r"\1='***'",
            text,
            flags=re.IGNORECASE,
        )
        return text

    #####################
    # Tenant index name #
    #####################

    tenant_index_prefix: str = Field(
        default=".kibana",
        description="First segment of every encoded tenant index name.",
    )

    #################
    # Authorization #
    #################

    service_account_name: str = Field(
        default="kibanaserver",
        min_length=1,
        description="The dashboard service account, always allowed to list the mapping.",
    )

    designated_role_name: str | None = Field(
        default=None,
        description=(
            "Role whose mapped users may list the mapping.  Empty or unset "
            "means only the service account and super admins are allowed."
        ),
    )

    super_admin_users: list[str] = Field(
        default_factory=list,
        description="Usernames treated as super admins.",
    )

    #######################
    # Identity resolution #
    #######################

    identity_strategy: IdentityStrategy = Field(
        default=IdentityStrategy.HEADER,
        description="Strategy used to extract the authenticated username from requests.",
    )

    identity_header_name: str = Field(
        default="X-Forwarded-User",
        min_length=1,
        description="Header set by the authenticating proxy (HEADER strategy).",
    )

    jwt_secret: str | None = Field(
        default=None,
        description="Secret key for JWT verification.  Required for the JWT strategy.",
    )

    jwt_algorithm: str = Field(
        default="HS256",
        description="JWT signing algorithm (e.g. ``'HS256'``, ``'RS256'``).",
    )

    jwt_username_claim: str = Field(
        default="sub",
        min_length=1,
        description="JWT payload claim that carries the username.",
    )

    ########
    # HTTP #
    ########

    route_path: str = Field(
        default="/_opendistro/_security/tenantinfo",
        description="Path on which GET and POST tenant-info requests are served.",
    )

    ##################
    # Collaborators #
    ##################

    database_url: str | None = Field(
        default=None,
        description=(
            "Async SQLAlchemy URL of the security configuration store.  When "
            "unset an in-memory store is used."
        ),
    )

    cluster_url: str | None = Field(
        default=None,
        description="Base URL of the search cluster whose indices are listed.",
    )

    cluster_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for cluster state requests.",
    )

    ####################
    # Field validators #
    ####################

    @field_validator("tenant_index_prefix")
    @classmethod
    def _validate_tenant_index_prefix(cls, v: str) -> str:
        """Reject prefixes that could never match a three-segment index name.

        Raises:
            ValueError: When the prefix is empty or contains ``_``.
        """
        if not v:
            msg = "tenant_index_prefix must not be empty."
            raise ValueError(msg)
        if "_" in v:
            msg = "tenant_index_prefix must not contain '_' (it delimits index name segments)."
            raise ValueError(msg)
        return v

    @field_validator("designated_role_name")
    @classmethod
    def _normalise_designated_role_name(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v

    @field_validator("jwt_secret")
    @classmethod
    def _validate_jwt_secret(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Require a strong JWT secret when the JWT strategy is active.

        Raises:
            ValueError: When the JWT strategy is active without a secret, or
                when the secret is shorter than 32 characters.
        """
        values = info.data
        if values.get("identity_strategy") == IdentityStrategy.JWT and not v:
            msg = "jwt_secret is required when identity_strategy is 'jwt'."
            raise ValueError(msg)
        if v is not None and len(v) < 32:
            msg = "jwt_secret must be at least 32 characters long."
            raise ValueError(msg)
        return v

    @field_validator("route_path")
    @classmethod
    def _validate_route_path(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = "route_path must start with '/'."
            raise ValueError(msg)
        return v.rstrip("/") or "/"

    @field_validator("cluster_url")
    @classmethod
    def _validate_cluster_url(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^https?://", v):
            msg = "cluster_url must be an http:// or https:// URL."
            raise ValueError(msg)
        return v.rstrip("/")

    ##########################
    # Cross-field validation #
    ##########################

    @model_validator(mode="after")
    def _validate_cross_field_consistency(self) -> TenantInfoConfig:
        """Raise ``ValueError`` if the configuration is internally inconsistent.

        Checks:
            - The JWT strategy requires ``jwt_secret``.  The field validator
              does not run when the secret is left at its default, so the
              check is repeated here.

        Also builds ``_super_admin_set`` for O(1) lookup on every request.
        """
        if self.identity_strategy == IdentityStrategy.JWT and not self.jwt_secret:
            msg = "jwt_secret is required when identity_strategy is 'jwt'."
            raise ValueError(msg)

        self._super_admin_set: frozenset[str] = frozenset(self.super_admin_users)
        return self

    ##################
    # Helper methods #
    ##################

    def is_super_admin(self, username: str) -> bool:
        """Return ``True`` if *username* is configured as a super admin."""
        admins: frozenset[str] = getattr(
            self, "_super_admin_set", frozenset(self.super_admin_users)
        )
        return username in admins


__all__ = ["TenantInfoConfig"]
