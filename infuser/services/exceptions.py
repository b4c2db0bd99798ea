"""Domain-specific exceptions for the record mapping layer.

This module provides a structured exception hierarchy for schema declaration,
attribute access, association loading and row store failures.

Architecture:
- InfuserError: Base exception with correlation ID and context support
- Category Base Classes: SchemaError, AssociationError, StoreError
- Specific Exceptions: Concrete exceptions for specific mapping scenarios
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and monitoring."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification and handling."""
    SCHEMA = "schema"
    ASSOCIATION = "association"
    STORE = "store"
    SYSTEM = "system"


class InfuserError(Exception):
    """Base exception for all record mapping errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        correlation_id: Correlation ID for tracing
        details: Additional error context
        severity: Error severity level for logging/monitoring
        category: Error category for classification
    """

    def __init__(
        self,
        message: str,
        error_code: str = "INFUSER_ERROR",
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.correlation_id = correlation_id
        self.details = details or {}
        self.severity = severity
        self.category = category

    def to_dict(self, include_details: bool = True) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging.

        Args:
            include_details: Whether to include the details mapping

        Returns:
            Dictionary representation of the error
        """
        result = {
            "error_code": self.error_code,
            "message": self.message,
            "severity": self.severity.value,
            "category": self.category.value,
        }

        if self.correlation_id:
            result["correlation_id"] = self.correlation_id

        if include_details and self.details:
            result["details"] = self.details

        return result

    def __str__(self) -> str:
        """String representation for logging."""
        return f"{self.error_code}: {self.message}"


# =============================================================================
# SCHEMA ERRORS
# =============================================================================

class SchemaError(InfuserError):
    """Base class for schema declaration and attribute access errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.HIGH
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            severity=severity,
            category=ErrorCategory.SCHEMA
        )


class SchemaDefinitionError(SchemaError):
    """A schema or association declaration is malformed."""

    def __init__(self, record_type: str, reason: str):
        super().__init__(
            message=f"Invalid declaration on {record_type}: {reason}",
            error_code="SCHEMA_DEFINITION_INVALID",
            details={"record_type": record_type, "reason": reason}
        )


class UnknownAttributeError(SchemaError, AttributeError):
    """Attribute name was never declared on the record type."""

    def __init__(
        self,
        record_type: str,
        name: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"{record_type} has no declared attribute '{name}'",
            error_code="UNKNOWN_ATTRIBUTE",
            correlation_id=correlation_id,
            details={"record_type": record_type, "attribute": name}
        )
        self.record_type = record_type
        self.name = name


class UnknownRecordTypeError(SchemaError):
    """A record type referenced by name is not registered."""

    def __init__(self, type_name: str):
        super().__init__(
            message=f"Record type '{type_name}' is not registered",
            error_code="UNKNOWN_RECORD_TYPE",
            details={"record_type": type_name}
        )


# =============================================================================
# ASSOCIATION ERRORS
# =============================================================================

class AssociationError(InfuserError):
    """Base class for association errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            correlation_id=correlation_id,
            details=details,
            severity=severity,
            category=ErrorCategory.ASSOCIATION
        )


class UnresolvedOwnerError(AssociationError):
    """Association accessed before the owning record has an identifier."""

    def __init__(
        self,
        record_type: str,
        association: str,
        primary_key: str,
        correlation_id: Optional[str] = None
    ):
        super().__init__(
            message=f"Cannot load {record_type}.{association}: '{primary_key}' is not set",
            error_code="UNRESOLVED_OWNER",
            correlation_id=correlation_id,
            details={
                "record_type": record_type,
                "association": association,
                "primary_key": primary_key
            }
        )


class UnknownAssociationError(AssociationError):
    """Association name was never declared on the record type."""

    def __init__(self, record_type: str, association: str):
        super().__init__(
            message=f"{record_type} has no association '{association}'",
            error_code="UNKNOWN_ASSOCIATION",
            details={"record_type": record_type, "association": association},
            severity=ErrorSeverity.HIGH
        )


# =============================================================================
# STORE ERRORS
# =============================================================================

class StoreError(InfuserError):
    """Row store could not satisfy a request."""

    def __init__(
        self,
        reason: str,
        correlation_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "STORE_FAILURE"
    ):
        super().__init__(
            message=f"Row store failure: {reason}",
            error_code=error_code,
            correlation_id=correlation_id,
            details={"reason": reason, **(details or {})},
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.STORE
        )


class StoreNotConfiguredError(StoreError):
    """No row store is available to load an association."""

    def __init__(self, record_type: str, association: str):
        super().__init__(
            reason=f"no row store bound for {record_type}.{association}",
            details={"record_type": record_type, "association": association},
            error_code="STORE_NOT_CONFIGURED"
        )
