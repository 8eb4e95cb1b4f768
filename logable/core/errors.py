"""
Centralized error catalog for the audit behaviors.

This module provides standardized error codes, messages and exception types
so that callers can tell a lost optimistic-lock race apart from a
misconfiguration or a record that was never persisted.
"""

from enum import Enum
from typing import Any, Dict, Optional, Type


class ErrorCode(Enum):
    """Standardized error codes."""

    # Concurrency errors
    STALE_OBJECT = "LOCK_001"

    # Record state errors
    RECORD_NOT_PERSISTED = "RECORD_001"

    # Behavior wiring errors
    BEHAVIOR_NOT_ATTACHED = "BEHAVIOR_001"

    # Configuration errors
    INVALID_ATTRIBUTE_SPEC = "CONFIG_001"


class ErrorMessage:
    """Standardized error messages."""

    STALE_OBJECT = "The object being updated is outdated."
    RECORD_NOT_PERSISTED = "The record has no persistent identity or session"
    BEHAVIOR_NOT_ATTACHED = "No audit behavior is attached to this record"
    OWNER_RELEASED = "The record owning this behavior no longer exists"
    INVALID_ATTRIBUTE_SPEC = "Invalid audit attribute configuration"


class LogableError(Exception):
    """Base class for all errors raised by the audit behaviors."""

    def __init__(self, error_code: ErrorCode, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary."""
        error_detail = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            error_detail["details"] = self.details
        return error_detail


class StaleObjectError(LogableError):
    """Raised when an optimistic-locked write matches no row."""


class RecordNotPersistedError(LogableError):
    """Raised when a storage operation needs a persistent record."""


class BehaviorNotAttachedError(LogableError):
    """Raised when a behavior is used without a live owner."""


class InvalidAttributeSpecError(LogableError, ValueError):
    """Raised for malformed attribute slots or event overrides."""


class AuditError:
    """Standardized error factories."""

    @staticmethod
    def create_error(
        error_class: Type[LogableError],
        error_code: ErrorCode,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> LogableError:
        """
        Create a standardized exception with error code and message.

        Args:
            error_class: Exception type to instantiate
            error_code: Standardized error code
            message: Error message
            details: Optional additional details

        Returns:
            LogableError: Exception ready to be raised
        """
        return error_class(error_code, message, details)

    @staticmethod
    def stale_object(model: str, condition: Dict[str, Any]) -> StaleObjectError:
        """Optimistic lock conflict error."""
        return AuditError.create_error(
            StaleObjectError,
            ErrorCode.STALE_OBJECT,
            ErrorMessage.STALE_OBJECT,
            details={"model": model, "condition": dict(condition)},
        )

    @staticmethod
    def record_not_persisted(model: str) -> RecordNotPersistedError:
        """Record without identity or session error."""
        return AuditError.create_error(
            RecordNotPersistedError,
            ErrorCode.RECORD_NOT_PERSISTED,
            ErrorMessage.RECORD_NOT_PERSISTED,
            details={"model": model},
        )

    @staticmethod
    def behavior_not_attached(model: Optional[str] = None) -> BehaviorNotAttachedError:
        """Missing behavior error."""
        if model is None:
            return AuditError.create_error(
                BehaviorNotAttachedError,
                ErrorCode.BEHAVIOR_NOT_ATTACHED,
                ErrorMessage.OWNER_RELEASED,
            )
        return AuditError.create_error(
            BehaviorNotAttachedError,
            ErrorCode.BEHAVIOR_NOT_ATTACHED,
            ErrorMessage.BEHAVIOR_NOT_ATTACHED,
            details={"model": model},
        )

    @staticmethod
    def invalid_attribute_spec(reason: str, value: Any = None) -> InvalidAttributeSpecError:
        """Malformed attribute configuration error."""
        return AuditError.create_error(
            InvalidAttributeSpecError,
            ErrorCode.INVALID_ATTRIBUTE_SPEC,
            f"{ErrorMessage.INVALID_ATTRIBUTE_SPEC}: {reason}",
            details={"value": repr(value)},
        )
