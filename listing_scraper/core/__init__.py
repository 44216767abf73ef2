"""
Core utilities for listing_scraper.

This module contains shared utilities used across all components:
- Configuration management
- Structured logging
- Error logging and the fault taxonomy
"""

from listing_scraper.core.logging import get_logger, setup_logging
from listing_scraper.core.config import get_config, Config
from listing_scraper.core.error_logger import ErrorLogger, get_error_logger
from listing_scraper.core.error_models import (
    ErrorComponent,
    ErrorSeverity,
    ErrorType,
    ErrorStage,
    ErrorRecord,
)
from listing_scraper.core.errors import (
    ScraperError,
    ExtractionFault,
    NavigationFault,
    PageSetupError,
    PageVisitError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "get_config",
    "Config",
    "ErrorLogger",
    "get_error_logger",
    "ErrorComponent",
    "ErrorSeverity",
    "ErrorType",
    "ErrorStage",
    "ErrorRecord",
    "ScraperError",
    "ExtractionFault",
    "NavigationFault",
    "PageSetupError",
    "PageVisitError",
]
