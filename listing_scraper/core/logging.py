"""
Structured Logging Configuration for listing_scraper

This module provides centralized logging configuration with:
- Console and file output
- Configurable log levels
- Structured log formatting
- Per-module loggers
"""

import logging
import sys
from pathlib import Path
from typing import Optional
from datetime import datetime


DEFAULT_LOG_LEVEL = "INFO"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    console: bool = True,
    log_dir: Path = Path("logs"),
) -> logging.Logger:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file (default: <log_dir>/scraper_<date>.log)
        console: Whether to log to console (default: True)
        log_dir: Directory for the dated log file when log_file is not given

    Returns:
        Configured root logger

    Example:
        >>> logger = setup_logging(level="DEBUG")
        >>> logger.info("Scraper started")
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(getattr(logging, level.upper()))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
    else:
        date_str = datetime.now().strftime("%Y%m%d")
        log_path = log_dir / f"scraper_{date_str}.log"

    log_path.parent.mkdir(exist_ok=True, parents=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(getattr(logging, level.upper()))
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    root_logger.info(f"Logging initialized - Level: {level}, File: {log_path}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Logger instance for the module
    """
    return logging.getLogger(name)
