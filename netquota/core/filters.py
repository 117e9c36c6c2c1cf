# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Usage filter for tenant listings.

Records are pulled from the source one at a time, so an expensive
directory scan is never materialized up front. Order is preserved.

Thresholds combine as a union: with both configured, a record passes
when it clears either one.

Usage:
    cfg = ThresholdFilter(min_used_mb=100, min_used_percent=90)
    for record in filter_usage(records, cfg):
        ...
"""

import logging
from typing import Iterable, Iterator, Optional

from .models import TenantQuotaRecord, ThresholdFilter

logger = logging.getLogger("netquota.filters")


def accepts(record: TenantQuotaRecord, config: ThresholdFilter) -> bool:
    """Whether a single record passes the configured thresholds"""
    if config.is_empty:
        return True

    if config.min_used_mb is not None and record.quota_used >= config.min_used_mb:
        return True

    if (
        config.min_used_percent is not None
        and record.quota_used_percent >= config.min_used_percent
    ):
        return True

    return False


def filter_usage(
    source: Iterable[TenantQuotaRecord], config: ThresholdFilter
) -> Iterator[TenantQuotaRecord]:
    """Lazily yield the records of ``source`` that pass ``config``"""
    for record in source:
        if accepts(record, config):
            yield record
        else:
            logger.debug(f"Filtered out blog {record.blog_id}")


class UsageFilter:
    """Reusable filter stage holding a threshold configuration"""

    def __init__(self, config: Optional[ThresholdFilter] = None):
        self.config = config or ThresholdFilter()

    def filter(self, source: Iterable[TenantQuotaRecord]) -> Iterator[TenantQuotaRecord]:
        return filter_usage(source, self.config)

    __call__ = filter
