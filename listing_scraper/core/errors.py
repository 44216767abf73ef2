"""
Exception types raised inside the scraper.

Card-level and record-level faults are absorbed where they occur. Page-level
faults (PageSetupError, PageVisitError) reach the runner, which logs them
and moves on to the next listing page. A selector that matches nothing is
not an exception at all: it resolves to an empty field.
"""

from typing import Optional


class ScraperError(Exception):
    """Base class for scraper faults."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class ExtractionFault(ScraperError):
    """Processing a single job card failed."""

    def __init__(self, index: int, cause: BaseException):
        super().__init__(f"Card {index} extraction failed: {cause}")
        self.index = index
        self.__cause__ = cause


class NavigationFault(ScraperError):
    """Navigating to or evaluating a detail page failed."""

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Detail page failed: {cause}", url=url)
        self.__cause__ = cause


class PageSetupError(ScraperError):
    """Initial navigation to a listing page failed."""


class PageVisitError(ScraperError):
    """A loaded listing page failed before its DOM could be snapshotted."""

    def __init__(self, message: str, url: Optional[str] = None, stage: str = "unknown"):
        super().__init__(message, url=url)
        self.stage = stage
