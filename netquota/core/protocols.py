# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Collaborator interfaces consumed by the quota service.

The tenant context is explicit: ``with_tenant`` yields a scope object that
is handed to the storage accounting calls, instead of switching a global
"current site".
"""

from dataclasses import dataclass
from typing import Any, ContextManager, Iterable, Mapping, Optional, Protocol


@dataclass(frozen=True)
class TenantRow:
    """Raw tenant row from the directory"""
    blog_id: int
    siteurl: str


@dataclass(frozen=True)
class TenantScope:
    """Execution context of one tenant, valid inside ``with_tenant``"""
    tenant_id: int


class TenantDirectory(Protocol):
    def list(self, where: Optional[Mapping[str, Any]] = None) -> Iterable[TenantRow]:
        ...

    def get(self, tenant_id: int) -> Optional[TenantRow]:
        ...


class StorageAccounting(Protocol):
    def allocation_for(self, scope: TenantScope) -> int:
        ...

    def used_for(self, scope: TenantScope) -> float:
        ...


class TenantContext(Protocol):
    def with_tenant(self, tenant_id: int) -> ContextManager[TenantScope]:
        ...


class NetworkConfig(Protocol):
    def is_multitenant(self) -> bool:
        ...

    def current_tenant_id(self) -> int:
        ...

    def default_allocation_mb(self) -> int:
        ...

    def set_tenant_override(self, scope: TenantScope, value: Optional[int]) -> None:
        ...
