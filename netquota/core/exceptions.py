# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
NetQuota Exception Hierarchy

Exception Hierarchy:
    QuotaError (base)
    ├── ConfigError
    ├── ValidationError
    │   └── ParseError
    ├── NotFoundError
    ├── PreconditionError
    └── TenantContextError

Every error raised here is a deterministic input or environment failure.
None of them is retried.
"""

from typing import Any, Dict, List, Optional

# ============================================================================
# Base Exceptions
# ============================================================================


class QuotaError(Exception):
    """Base exception for all NetQuota errors"""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        result = {
            "type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

        if self.cause:
            result["cause"] = {
                "type": self.cause.__class__.__name__,
                "message": str(self.cause),
            }

        return result

    def __str__(self):
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigError(QuotaError):
    """Configuration or network file errors"""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(QuotaError):
    """Input validation errors"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Any = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(
            {
                "field": self.field,
                "value": self.value,
                "errors": self.errors,
            }
        )
        return result


class ParseError(ValidationError):
    """Quota magnitude token could not be parsed"""

    def __init__(self, token: Any, message: str = "Error parsing quota value", **kwargs):
        super().__init__(message, field="quota", value=token, **kwargs)
        self.token = token


# ============================================================================
# Tenant Errors
# ============================================================================


class NotFoundError(QuotaError):
    """Requested tenant does not exist"""

    def __init__(
        self, message: str = "Site not found.", tenant_id: Any = None, **kwargs
    ):
        super().__init__(message, **kwargs)
        self.tenant_id = tenant_id

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["tenant_id"] = self.tenant_id
        return result


class PreconditionError(QuotaError):
    """Operation invoked outside a multi-tenant network"""



class TenantContextError(QuotaError):
    """Tenant data accessed outside its active tenant scope"""

    def __init__(self, message: str, tenant_id: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.tenant_id = tenant_id

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["tenant_id"] = self.tenant_id
        return result
