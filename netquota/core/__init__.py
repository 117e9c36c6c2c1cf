# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
NetQuota Core

Quota parsing, usage calculation and filtering, plus the service that runs
the quota commands against a tenant network.
"""

from .calculator import annotate, resolve_add, resolve_set, resolve_subtract, should_write
from .exceptions import (
    ConfigError,
    NotFoundError,
    ParseError,
    PreconditionError,
    QuotaError,
    TenantContextError,
    ValidationError,
)
from .filters import UsageFilter, accepts, filter_usage
from .formatter import FORMATS, format_field, format_items, parse_fields
from .models import (
    DEFAULT_FIELDS,
    QuotaChange,
    QuotaMagnitude,
    TenantQuotaRecord,
    ThresholdFilter,
    UsageFigures,
)
from .service import QuotaService
from .units import parse_quota

__all__ = [
    # Units / calculation
    "parse_quota",
    "annotate",
    "resolve_set",
    "resolve_add",
    "resolve_subtract",
    "should_write",
    # Filtering
    "UsageFilter",
    "accepts",
    "filter_usage",
    # Output
    "FORMATS",
    "format_field",
    "format_items",
    "parse_fields",
    # Models
    "DEFAULT_FIELDS",
    "QuotaChange",
    "QuotaMagnitude",
    "TenantQuotaRecord",
    "ThresholdFilter",
    "UsageFigures",
    # Service
    "QuotaService",
    # Errors
    "QuotaError",
    "ConfigError",
    "ValidationError",
    "ParseError",
    "NotFoundError",
    "PreconditionError",
    "TenantContextError",
]
