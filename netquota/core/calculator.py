# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
Quota calculations.

Derives usage percentages from raw allocation/usage figures and computes
the new allocation for set, add and subtract. Nothing here performs I/O;
malformed tokens raise ParseError from the unit parser unchanged.
"""

import logging

from .models import QuotaMagnitude, UsageFigures
from .units import parse_quota

logger = logging.getLogger("netquota.calculator")

FULL_PERCENT = 100.0


def annotate(allocation_mb: int, used_mb: float) -> UsageFigures:
    """
    Round usage and compute the usage percentage.

    Usage is rounded to two decimals before the comparison. A tenant using
    at least its allocation (this includes a zero allocation) is at 100%.
    """
    used = round(float(used_mb), 2)

    if used >= allocation_mb:
        percent = FULL_PERCENT
    else:
        percent = round(used / allocation_mb * 100, 2)

    return UsageFigures(used_mb=used, used_percent=percent)


def resolve_set(requested: str) -> QuotaMagnitude:
    """New allocation for set; 0 is a valid quota"""
    return parse_quota(requested)


def resolve_add(current_allocation_mb: int, delta_token: str) -> int:
    delta = parse_quota(delta_token)
    new_allocation = current_allocation_mb + delta.megabytes
    logger.debug(f"add: {current_allocation_mb} + {delta.megabytes} = {new_allocation}")
    return new_allocation


def resolve_subtract(current_allocation_mb: int, delta_token: str) -> int:
    """New allocation for subtract. The result is not clamped and may be negative."""
    delta = parse_quota(delta_token)
    new_allocation = current_allocation_mb - delta.megabytes
    logger.debug(
        f"subtract: {current_allocation_mb} - {delta.megabytes} = {new_allocation}"
    )
    return new_allocation


def should_write(new_allocation_mb: int, network_default_mb: int) -> bool:
    """
    Whether the allocation must be stored as a tenant override.

    Returns False when the allocation equals the network default, meaning
    the override is removed and the tenant inherits the default.
    """
    return new_allocation_mb != network_default_mb
