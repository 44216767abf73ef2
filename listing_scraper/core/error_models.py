"""
Pydantic models for structured error logging.

This module defines type-safe error record models with automatic validation
and classification so card-level and record-level faults are logged
consistently.
"""

import json
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict


class ErrorComponent(str, Enum):
    """System components that can generate errors."""
    EXTRACTOR = "extractor"
    ENRICHER = "enricher"
    NAVIGATION = "navigation"
    RUNNER = "runner"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Error severity levels matching logging standards."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorType(str, Enum):
    """
    Categorized error types for classification.

    New error types should be added here to maintain consistency.
    """
    # Extraction
    EXTRACTION_FAULT = "extraction_fault"
    EMPTY_RESULT = "empty_result"
    SELECTOR_ERROR = "selector_error"

    # Browser / network
    NAVIGATION_FAULT = "navigation_fault"
    TIMEOUT = "timeout"
    BROWSER_ERROR = "browser_error"
    CONNECTION_ERROR = "connection_error"

    # Validation
    VALIDATION_ERROR = "validation_error"

    UNKNOWN = "unknown"


class ErrorStage:
    """
    Standardized stage names for error logging.

    Use these constants to ensure consistency across the codebase.
    """
    # Page setup
    LOAD_PAGE = "load_page"
    WAIT_FOR_LOAD = "wait_for_load"
    FINGERPRINT = "fingerprint"
    SCROLL = "scroll"
    SNAPSHOT = "snapshot"
    HANDLE_PAGE = "handle_page"

    # Extraction
    RESOLVE_CARDS = "resolve_cards"
    EXTRACT_CARD = "extract_card"

    # Enrichment
    NAVIGATE_DETAIL = "navigate_detail"


class ErrorRecord(BaseModel):
    """
    Structured error record written by the ErrorLogger.

    Validates all error data before logging so that logging an error can
    never cause an additional failure.
    """
    component: ErrorComponent = Field(..., description="System component")
    stage: str = Field(..., min_length=1, max_length=100, description="Processing stage")
    error_type: ErrorType = Field(..., description="Error category")
    severity: ErrorSeverity = Field(default=ErrorSeverity.ERROR, description="Severity level")
    message: str = Field(..., min_length=1, description="Human-readable error message")

    url: Optional[str] = Field(None, max_length=2048, description="Page or detail URL if applicable")
    exception_type: Optional[str] = Field(None, max_length=255, description="Exception class name")
    stack_trace: Optional[str] = Field(None, description="Stack trace for unexpected errors")

    metadata: Dict[str, Any] = Field(default_factory=dict, description="Additional context")

    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Error timestamp"
    )

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        use_enum_values=True,
    )

    @field_validator("stage")
    @classmethod
    def validate_stage(cls, v: str) -> str:
        """Ensure stage is not empty and normalized."""
        if not v or not v.strip():
            return "unknown"
        return v.strip().lower().replace(" ", "_")

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v or not v.strip():
            return "No error message provided"
        return v.strip()[:5000]

    @field_validator("metadata")
    @classmethod
    def sanitize_metadata(cls, v: Dict[str, Any]) -> Dict[str, Any]:
        """Convert non JSON-serializable metadata values to strings."""
        sanitized = {}
        for key, value in v.items():
            try:
                json.dumps(value)
                sanitized[key] = value
            except (TypeError, ValueError):
                sanitized[key] = str(value)
        return sanitized

    @classmethod
    def from_exception(
        cls,
        exc: BaseException,
        component: ErrorComponent,
        stage: str,
        url: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        error_type: Optional[ErrorType] = None,
        include_stack_trace: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ErrorRecord":
        """
        Create ErrorRecord from an exception with automatic classification.

        Args:
            exc: The exception that occurred
            component: System component where error occurred
            stage: Processing stage
            url: Optional page or detail URL
            severity: Error severity (default: ERROR)
            error_type: Optional explicit error type (auto-detected if None)
            include_stack_trace: Whether to include full stack trace (auto if None)
            metadata: Additional context

        Returns:
            ErrorRecord instance ready for logging

        Example:
            >>> try:
            ...     await page.goto(record.url, timeout=15000)
            ... except Exception as e:
            ...     rec = ErrorRecord.from_exception(
            ...         e,
            ...         component=ErrorComponent.ENRICHER,
            ...         stage=ErrorStage.NAVIGATE_DETAIL,
            ...         url=record.url,
            ...         severity=ErrorSeverity.WARNING,
            ...     )
        """
        if error_type is None:
            error_type = cls._classify_exception(exc)

        message = str(exc) or f"{type(exc).__name__} occurred"
        exception_type = f"{type(exc).__module__}.{type(exc).__name__}"

        if include_stack_trace is None:
            include_stack_trace = cls._should_include_stack(exc, severity)

        stack_trace = None
        if include_stack_trace:
            stack_trace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            if len(stack_trace) > 10000:
                stack_trace = stack_trace[:10000] + "\n... (truncated)"

        return cls(
            component=component,
            stage=stage,
            error_type=error_type,
            severity=severity,
            url=url,
            message=message,
            exception_type=exception_type,
            stack_trace=stack_trace,
            metadata=metadata or {},
        )

    @staticmethod
    def _classify_exception(exc: BaseException) -> ErrorType:
        """
        Automatically classify exception into ErrorType.

        Uses exception type and message patterns to determine category.
        """
        exc_name = type(exc).__name__.lower()
        exc_msg = str(exc).lower()

        if exc_name == "extractionfault":
            return ErrorType.EXTRACTION_FAULT
        if exc_name == "navigationfault":
            return ErrorType.NAVIGATION_FAULT
        if "validation" in exc_name:
            return ErrorType.VALIDATION_ERROR
        if "timeout" in exc_name or "timeout" in exc_msg:
            return ErrorType.TIMEOUT
        if "connection" in exc_name or "net::err" in exc_msg:
            return ErrorType.CONNECTION_ERROR
        if "selector" in exc_name or "selector" in exc_msg:
            return ErrorType.SELECTOR_ERROR
        if "playwright" in exc_name or "browser" in exc_name or "target closed" in exc_msg:
            return ErrorType.BROWSER_ERROR

        return ErrorType.UNKNOWN

    @staticmethod
    def _should_include_stack(exc: BaseException, severity: ErrorSeverity) -> bool:
        """
        Determine if stack trace should be included based on exception type and severity.

        Expected errors (timeouts, validation) don't need stacks.
        """
        if severity == ErrorSeverity.CRITICAL:
            return True

        if severity in (ErrorSeverity.WARNING, ErrorSeverity.INFO, ErrorSeverity.DEBUG):
            return False

        EXPECTED_ERRORS = (
            'ValidationError',
            'ValueError',
            'TimeoutError',
            'NavigationFault',
        )
        return type(exc).__name__ not in EXPECTED_ERRORS
