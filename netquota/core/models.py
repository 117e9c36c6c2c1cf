# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Quota data model

- QuotaMagnitude: a parsed quota value, always in megabytes
- TenantQuotaRecord: one row of a listing, annotated with usage figures
- ThresholdFilter: usage thresholds for the listing filter
- QuotaChange: outcome of a set/add/subtract operation
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_FIELDS = ["blog_id", "url", "quota", "quota_used", "quota_used_percent"]

MB_PER_GB = 1024


@dataclass(frozen=True)
class QuotaMagnitude:
    """A quota value in megabytes. Built by the unit parser only."""
    megabytes: int


@dataclass(frozen=True)
class UsageFigures:
    """Rounded usage and saturated usage percentage"""
    used_mb: float
    used_percent: float


@dataclass
class TenantQuotaRecord:
    """Quota figures of a single tenant, in output column order"""
    blog_id: int
    url: str
    quota: int
    quota_used: float
    quota_used_percent: float


@dataclass(frozen=True)
class QuotaChange:
    """Allocation written for a tenant by a mutating operation"""
    blog_id: int
    url: str
    quota: int
    override_cleared: bool = False

    @property
    def message(self) -> str:
        return f"Quota is now {self.quota} MB for {self.url}."


class ThresholdFilter(BaseModel):
    """Usage thresholds; unset thresholds are ignored"""
    model_config = ConfigDict(frozen=True)

    min_used_mb: Optional[float] = Field(
        default=None, description="Minimum used storage (MB)", ge=0
    )
    min_used_percent: Optional[float] = Field(
        default=None, description="Minimum used storage (percent)", ge=0, le=100
    )

    @property
    def is_empty(self) -> bool:
        return self.min_used_mb is None and self.min_used_percent is None
