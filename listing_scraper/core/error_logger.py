"""
Centralized error logging for card-level and record-level faults.

This module provides a fail-safe error logger that:
- Mirrors every record onto the standard logger at the matching level
- Appends structured records to a dated JSON-lines file
- Uses Pydantic validation for type safety
- Never raises, so a logging failure cannot abort an extraction pass
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from listing_scraper.core.logging import get_logger
from listing_scraper.core.error_models import (
    ErrorRecord,
    ErrorComponent,
    ErrorSeverity,
    ErrorType,
)

logger = get_logger(__name__)

ERROR_LOG_DIR = Path(os.getenv("ERROR_LOG_DIR", "logs/errors"))

_LEVELS = {
    ErrorSeverity.DEBUG.value: logging.DEBUG,
    ErrorSeverity.INFO.value: logging.INFO,
    ErrorSeverity.WARNING.value: logging.WARNING,
    ErrorSeverity.ERROR.value: logging.ERROR,
    ErrorSeverity.CRITICAL.value: logging.CRITICAL,
}

_error_logger: Optional["ErrorLogger"] = None


class ErrorLogger:
    """
    Error logger with a JSON-lines file sink.

    Usage:
        >>> error_logger = ErrorLogger(Path("logs/errors"))
        >>> error_logger.log_error(
        ...     component=ErrorComponent.EXTRACTOR,
        ...     stage=ErrorStage.RESOLVE_CARDS,
        ...     error_type=ErrorType.EMPTY_RESULT,
        ...     message="No job cards matched any container selector",
        ...     url="https://www.linkedin.com/jobs/search/?keywords=python",
        ...     severity=ErrorSeverity.WARNING,
        ... )
    """

    def __init__(self, log_dir: Optional[Path] = None, write_files: bool = True):
        self._log_dir = Path(log_dir) if log_dir is not None else ERROR_LOG_DIR
        self._write_files = write_files

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def log_error(
        self,
        component: ErrorComponent,
        stage: str,
        error_type: ErrorType,
        message: str,
        url: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        exception_type: Optional[str] = None,
        stack_trace: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Log a structured error.

        This method never raises exceptions.

        Returns:
            True if logged successfully, False otherwise
        """
        try:
            record = ErrorRecord(
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
            return self._emit(record)
        except Exception as e:
            logger.error(f"Error logger failed: {e} - Original error: {message}")
            return False

    def log_exception(
        self,
        exc: BaseException,
        component: ErrorComponent,
        stage: str,
        url: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        error_type: Optional[ErrorType] = None,
        include_stack_trace: Optional[bool] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Log an exception with automatic classification.

        Convenience wrapper around ErrorRecord.from_exception().

        Example:
            >>> try:
            ...     await page.goto(url, timeout=15000)
            ... except Exception as e:
            ...     error_logger.log_exception(
            ...         e,
            ...         component=ErrorComponent.ENRICHER,
            ...         stage=ErrorStage.NAVIGATE_DETAIL,
            ...         url=url,
            ...         severity=ErrorSeverity.WARNING,
            ...     )
        """
        try:
            record = ErrorRecord.from_exception(
                exc=exc,
                component=component,
                stage=stage,
                url=url,
                severity=severity,
                error_type=error_type,
                include_stack_trace=include_stack_trace,
                metadata=metadata,
            )
            return self._emit(record)
        except Exception as e:
            logger.error(f"Error logger failed: {e} - Original exception: {type(exc).__name__}")
            return False

    def _emit(self, record: ErrorRecord) -> bool:
        level = _LEVELS.get(record.severity, logging.ERROR)
        where = f" [{record.url}]" if record.url else ""
        logger.log(level, f"{record.component}/{record.stage}: {record.message}{where}")
        if not self._write_files:
            return True
        return self._write_to_file(record)

    def _write_to_file(self, record: ErrorRecord) -> bool:
        """Append error record to the dated JSON-lines file."""
        try:
            self._log_dir.mkdir(exist_ok=True, parents=True)
            date_str = datetime.now(timezone.utc).strftime("%Y%m%d")
            file_path = self._log_dir / f"errors_{date_str}.jsonl"

            with open(file_path, "a", encoding="utf-8") as f:
                json.dump(record.model_dump(), f)
                f.write("\n")

            return True
        except Exception as e:
            logger.error(f"File error write failed: {e}")
            return False

    def read_errors(self, limit: int = 100) -> list:
        """
        Read the most recent error records from today's file.

        Args:
            limit: Maximum number of records to return (newest last)

        Returns:
            List of error record dicts
        """
        date_str = datetime.now(timezone.utc).strftime("%Y%m%d")
        file_path = self._log_dir / f"errors_{date_str}.jsonl"
        if not file_path.exists():
            return []
        lines = file_path.read_text("utf-8").splitlines()
        return [json.loads(line) for line in lines[-limit:] if line.strip()]


def get_error_logger() -> ErrorLogger:
    """
    Get the process-wide default ErrorLogger.

    Components accept an explicit ErrorLogger; this accessor only supplies
    the default when none is injected.
    """
    global _error_logger
    if _error_logger is None:
        _error_logger = ErrorLogger()
    return _error_logger
