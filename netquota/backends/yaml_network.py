# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
YAML network backend

A tenant network described by one YAML document. Implements the tenant
directory, storage accounting, tenant context and network config
interfaces, so the quota service can run without a hosting platform.

Example network file:

    multisite: true
    current_site: 1
    default_quota_mb: 100
    sites:
      - blog_id: 1
        siteurl: http://example.com
        used_mb: 12.5
      - blog_id: 2
        siteurl: http://example.com/shop
        used_mb: 940
        quota_mb: 1024        # tenant override
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import ConfigError, NotFoundError, TenantContextError
from ..core.protocols import TenantRow, TenantScope

logger = logging.getLogger("netquota.backends.yaml_network")

DEFAULT_QUOTA_MB = 100


# =============================================================================
# Network Document
# =============================================================================

class SiteEntry(BaseModel):
    """One site of the network file"""
    model_config = ConfigDict(extra="allow")

    blog_id: int = Field(description="Site ID", ge=1)
    siteurl: str = Field(default="", description="Site URL")
    used_mb: float = Field(default=0.0, description="Storage used (MB)", ge=0)
    quota_mb: Optional[int] = Field(default=None, description="Site quota override (MB)")


class NetworkDocument(BaseModel):
    """Complete network file"""
    model_config = ConfigDict(extra="allow")

    multisite: bool = Field(default=True, description="Multi-tenant network")
    current_site: int = Field(default=1, description="Site used when no ID is given")
    default_quota_mb: int = Field(
        default=DEFAULT_QUOTA_MB, description="Network default quota (MB)"
    )
    sites: List[SiteEntry] = Field(default_factory=list, description="Sites")


class YamlNetwork:
    """
    Tenant network stored in a YAML file.

    Overrides are kept in memory until save() is called; the CLI saves
    after each mutating command.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, path: Optional[Path] = None):
        self.path = path
        try:
            document = NetworkDocument.model_validate(data if data is not None else {})
        except ValidationError as e:
            raise ConfigError(
                f"Invalid network file: {path or '<memory>'}",
                path=str(path) if path else None,
                details={
                    "errors": [
                        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    ]
                },
                cause=e,
            )
        self.data = document.model_dump(exclude_none=True)
        self._active: Optional[int] = None

    @classmethod
    def load(cls, path: Path) -> "YamlNetwork":
        """Load a network file"""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Network file not found: {path}", path=str(path))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid network file: {path}", path=str(path), cause=e)

        network = cls(data, path=path)
        logger.debug(f"Loaded {len(network.sites)} sites from {path}")
        return network

    def save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(
            yaml.safe_dump(self.data, default_flow_style=False, sort_keys=False),
            encoding="utf-8",
        )
        logger.debug(f"Saved network file {self.path}")

    def _site(self, tenant_id: int) -> Optional[Dict[str, Any]]:
        for site in self.data["sites"]:
            if site["blog_id"] == int(tenant_id):
                return site
        return None

    def _scoped_site(self, scope: TenantScope) -> Dict[str, Any]:
        if self._active != scope.tenant_id:
            raise TenantContextError(
                f"Tenant scope {scope.tenant_id} is not active", tenant_id=scope.tenant_id
            )
        site = self._site(scope.tenant_id)
        if site is None:
            raise NotFoundError("Site not found.", tenant_id=scope.tenant_id)
        return site

    # =========================================================================
    # TenantDirectory
    # =========================================================================

    def list(self, where: Optional[Mapping[str, Any]] = None) -> Iterator[TenantRow]:
        """Yield tenant rows whose columns equal every ``where`` value"""
        where = where or {}
        for site in self.data["sites"]:
            row = TenantRow(blog_id=site["blog_id"], siteurl=site["siteurl"])
            if all(str(getattr(row, col, site.get(col))) == str(val) for col, val in where.items()):
                yield row

    def get(self, tenant_id: int) -> Optional[TenantRow]:
        site = self._site(tenant_id)
        if site is None:
            return None
        return TenantRow(blog_id=site["blog_id"], siteurl=site["siteurl"])

    # =========================================================================
    # TenantContext
    # =========================================================================

    @contextmanager
    def with_tenant(self, tenant_id: int) -> Iterator[TenantScope]:
        previous = self._active
        self._active = int(tenant_id)
        try:
            yield TenantScope(tenant_id=int(tenant_id))
        finally:
            self._active = previous

    # =========================================================================
    # StorageAccounting
    # =========================================================================

    def allocation_for(self, scope: TenantScope) -> int:
        site = self._scoped_site(scope)
        if site.get("quota_mb") is not None:
            return int(site["quota_mb"])
        return self.default_allocation_mb()

    def used_for(self, scope: TenantScope) -> float:
        return self._scoped_site(scope)["used_mb"]

    # =========================================================================
    # NetworkConfig
    # =========================================================================

    def is_multitenant(self) -> bool:
        return self.data["multisite"]

    def current_tenant_id(self) -> int:
        return self.data["current_site"]

    def default_allocation_mb(self) -> int:
        return self.data["default_quota_mb"]

    def set_tenant_override(self, scope: TenantScope, value: Optional[int]) -> None:
        site = self._scoped_site(scope)
        if value is None:
            site.pop("quota_mb", None)
        else:
            site["quota_mb"] = int(value)

    @property
    def sites(self) -> List[Dict[str, Any]]:
        return self.data["sites"]
