"""Error types and the boundary error handler."""

import logging
import time
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class KEGGToolError(Exception):
    """Base class for failures reported to callers as structured errors."""

    error_type = "unknown"


class InvalidArguments(KEGGToolError):
    """Caller arguments failed shape validation."""

    error_type = "invalid_arguments"


class RemoteCallFailure(KEGGToolError):
    """A KEGG REST call failed (network, timeout, status or body)."""

    error_type = "remote_call_failure"

    def __init__(self, message: str, endpoint: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class InvalidAddress(KEGGToolError):
    """A resource URI matched none of the known patterns."""

    error_type = "invalid_address"


class UnknownOperation(KEGGToolError):
    """An operation name outside the catalogue."""

    error_type = "unknown_operation"


class ErrorType(Enum):
    """Types of errors that can occur."""
    INVALID_ARGUMENTS = "invalid_arguments"
    REMOTE_CALL_FAILURE = "remote_call_failure"
    INVALID_ADDRESS = "invalid_address"
    UNKNOWN_OPERATION = "unknown_operation"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorContext:
    """Context information for an error."""
    error_type: ErrorType
    severity: ErrorSeverity
    message: str
    timestamp: float
    operation: str
    item_id: Optional[str] = None
    traceback: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Structured error body returned to the invocation host."""
        payload = {
            'error': self.message,
            'error_type': self.error_type.value,
            'operation': self.operation,
        }
        if self.item_id:
            payload['item_id'] = self.item_id
        return payload


class ErrorHandler:
    """Classifies and logs failures caught at a boundary."""

    def __init__(self):
        self.logger = logging.getLogger('kegg_tool.error')

    def handle_error(self,
                     error: Exception,
                     operation: str,
                     item_id: Optional[str] = None) -> ErrorContext:
        """
        Handle an error with appropriate logging.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            item_id: Batch or fan-out item the failure belongs to

        Returns:
            ErrorContext describing the failure
        """
        error_type = self._classify_error(error)
        severity = self._determine_severity(error_type, item_id)

        context = ErrorContext(
            error_type=error_type,
            severity=severity,
            message=str(error) or type(error).__name__,
            timestamp=time.time(),
            operation=operation,
            item_id=item_id,
            traceback=traceback.format_exc() if error_type == ErrorType.UNKNOWN else None
        )

        self._log_error(context)
        return context

    def _classify_error(self, error: Exception) -> ErrorType:
        """Classify the error type based on exception."""
        if isinstance(error, KEGGToolError):
            try:
                return ErrorType(error.error_type)
            except ValueError:
                return ErrorType.UNKNOWN
        return ErrorType.UNKNOWN

    def _determine_severity(self, error_type: ErrorType, item_id: Optional[str]) -> ErrorSeverity:
        """Determine error severity based on type."""
        if error_type == ErrorType.UNKNOWN:
            return ErrorSeverity.CRITICAL

        if error_type in [ErrorType.INVALID_ARGUMENTS, ErrorType.UNKNOWN_OPERATION, ErrorType.INVALID_ADDRESS]:
            return ErrorSeverity.WARNING

        # Per-item remote failures never fail the enclosing operation
        if item_id is not None:
            return ErrorSeverity.WARNING

        return ErrorSeverity.ERROR

    def _log_error(self, context: ErrorContext):
        level = _LOG_LEVELS[context.severity]
        message = f"{context.operation} - {context.error_type.value}: {context.message}"
        if context.item_id:
            message += f" (item: {context.item_id})"
        self.logger.log(level, message)
        if context.traceback:
            self.logger.log(level, f"Traceback:\n{context.traceback}")
