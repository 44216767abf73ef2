"""
Shared utility functions for listing_scraper.

This module contains reusable utilities used across components:
- URL resolution and company-URL validation
- Retry logic with exponential backoff
- File I/O helpers
"""

from listing_scraper.utils.url_utils import (
    resolve_href,
    is_valid_company_url,
    clean_company_url,
    canonical_company_url,
    canonical_job_url,
)
from listing_scraper.utils.retry import retry_async_with_backoff, RetryConfig
from listing_scraper.utils.files import read_urls_from_file, write_jsonl

__all__ = [
    # URL utilities
    "resolve_href",
    "is_valid_company_url",
    "clean_company_url",
    "canonical_company_url",
    "canonical_job_url",
    # Retry utilities
    "retry_async_with_backoff",
    "RetryConfig",
    # File utilities
    "read_urls_from_file",
    "write_jsonl",
]
