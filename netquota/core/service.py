# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Quota Service

Runs the quota commands against the network collaborators:
- list / get: annotate directory rows with usage and filter them lazily
- set / add / subtract: compute a new allocation and write it back once

Every operation checks first that the network is multi-tenant. The new
allocation is computed completely before the single write, so a bad
quota token leaves the network untouched.
"""

import logging
from typing import Any, Callable, Iterator, Mapping, Optional

from . import calculator
from .exceptions import NotFoundError, PreconditionError
from .filters import filter_usage
from .models import QuotaChange, TenantQuotaRecord, ThresholdFilter
from .protocols import (
    NetworkConfig,
    StorageAccounting,
    TenantContext,
    TenantDirectory,
    TenantRow,
)

logger = logging.getLogger("netquota.service")


def trailingslashit(url: str) -> str:
    return url.rstrip("/\\") + "/"


class QuotaService:
    """Quota operations over a tenant network"""

    def __init__(
        self,
        directory: TenantDirectory,
        accounting: StorageAccounting,
        context: TenantContext,
        network: NetworkConfig,
    ):
        self.directory = directory
        self.accounting = accounting
        self.context = context
        self.network = network

    # =========================================================================
    # Lookups
    # =========================================================================

    def ensure_multitenant(self) -> None:
        if not self.network.is_multitenant():
            raise PreconditionError("This is not a multisite installation.")

    def resolve_tenant(
        self, tenant_id: Optional[int] = None, not_found: str = "Site not found."
    ) -> TenantRow:
        """
        Find a tenant, defaulting to the network's current one.

        ``not_found`` is the error message for a missing tenant and may
        reference ``{tenant_id}``.
        """
        if tenant_id is None:
            tenant_id = self.network.current_tenant_id()

        row = self.directory.get(tenant_id) if tenant_id else None
        if row is None:
            raise NotFoundError(not_found.format(tenant_id=tenant_id), tenant_id=tenant_id)
        return row

    def determine_quota(self, row: TenantRow) -> TenantQuotaRecord:
        """Read allocation and usage of one tenant and annotate them"""
        with self.context.with_tenant(row.blog_id) as scope:
            allocation = self.accounting.allocation_for(scope)
            used = self.accounting.used_for(scope)

        figures = calculator.annotate(allocation, used)
        return TenantQuotaRecord(
            blog_id=row.blog_id,
            url=trailingslashit(row.siteurl),
            quota=allocation,
            quota_used=figures.used_mb,
            quota_used_percent=figures.used_percent,
        )

    def iter_records(
        self, where: Optional[Mapping[str, Any]] = None
    ) -> Iterator[TenantQuotaRecord]:
        for row in self.directory.list(where or {}):
            yield self.determine_quota(row)

    # =========================================================================
    # Listing
    # =========================================================================

    def list_quotas(
        self,
        thresholds: Optional[ThresholdFilter] = None,
        where: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[TenantQuotaRecord]:
        """Lazily list tenants whose usage clears ``thresholds``"""
        self.ensure_multitenant()
        return filter_usage(self.iter_records(where), thresholds or ThresholdFilter())

    def get_quota(self, tenant_id: Optional[int] = None) -> Iterator[TenantQuotaRecord]:
        self.ensure_multitenant()
        row = self.resolve_tenant(tenant_id)
        return filter_usage(self.iter_records({"blog_id": row.blog_id}), ThresholdFilter())

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_quota(self, token: str, tenant_id: Optional[int] = None) -> QuotaChange:
        """Set the quota of a tenant, e.g. ``set_quota("10g", 2)``"""
        self.ensure_multitenant()
        row = self.resolve_tenant(tenant_id)
        new_quota = calculator.resolve_set(token).megabytes
        return self.apply_allocation(row, new_quota)

    def add_quota(self, token: str, tenant_id: Optional[int] = None) -> QuotaChange:
        return self._change_quota(calculator.resolve_add, token, tenant_id)

    def subtract_quota(self, token: str, tenant_id: Optional[int] = None) -> QuotaChange:
        return self._change_quota(
            calculator.resolve_subtract, token, tenant_id,
            not_found="Site with ID {tenant_id} not found.",
        )

    def _change_quota(
        self,
        resolve: Callable[[int, str], int],
        token: str,
        tenant_id: Optional[int],
        not_found: str = "Site not found.",
    ) -> QuotaChange:
        self.ensure_multitenant()
        row = self.resolve_tenant(tenant_id, not_found)

        with self.context.with_tenant(row.blog_id) as scope:
            current = self.accounting.allocation_for(scope)

        return self.apply_allocation(row, resolve(current, token))

    def apply_allocation(self, row: TenantRow, new_quota: int) -> QuotaChange:
        """Write the allocation, clearing the override when it equals the network default"""
        default = self.network.default_allocation_mb()
        write = calculator.should_write(new_quota, default)

        with self.context.with_tenant(row.blog_id) as scope:
            self.network.set_tenant_override(scope, new_quota if write else None)

        if write:
            logger.info(f"Set quota override of blog {row.blog_id} to {new_quota} MB")
        else:
            logger.info(
                f"Cleared quota override of blog {row.blog_id}, "
                f"network default {default} MB applies"
            )

        return QuotaChange(
            blog_id=row.blog_id,
            url=trailingslashit(row.siteurl),
            quota=new_quota,
            override_cleared=not write,
        )
