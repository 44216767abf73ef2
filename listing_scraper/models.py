"""
Pydantic models for extracted listings and scrape options.

ListingRecord is the unit handed to the persistence collaborator. Its
text fields use "" as the not-found sentinel, and ``company_url`` is either
absent or a canonical, valid company URL.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, field_validator, ConfigDict

from listing_scraper.utils.url_utils import canonical_company_url


class PacingMode(str, Enum):
    """Pacing policies for outbound requests."""
    CONSERVATIVE = "conservative"
    FAST = "fast"


class ExtractionStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ListingRecord(BaseModel):
    """
    One extracted job posting.

    Serializes with camelCase keys (``postedDate``, ``companyUrl``,
    ``scrapedAt``) via ``to_output()``.
    """
    id: str = Field(default="", description="Native card id or job_<index>")
    title: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Company name")
    location: str = Field(default="", description="Job location")
    posted_date: str = Field(default="", alias="postedDate", description="Posted date text")
    url: str = Field(default="", description="Detail page URL")
    company_url: Optional[str] = Field(default=None, alias="companyUrl", description="Canonical company URL")
    scraped_at: str = Field(default_factory=_now_iso, alias="scrapedAt", frozen=True)

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    @field_validator("id", "title", "company", "location", "posted_date", "url", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        if v is None:
            return ""
        return v

    @field_validator("company_url")
    @classmethod
    def validate_company_url(cls, v: Optional[str]) -> Optional[str]:
        """Reject non-company URLs and store the canonical form."""
        if v is None or not v.strip():
            return None
        canonical = canonical_company_url(v.strip())
        if not canonical:
            raise ValueError(f"not a valid company URL: {v!r}")
        return canonical

    def to_output(self) -> Dict[str, Any]:
        """Serialize for the persistence collaborator, omitting an absent companyUrl."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScrapeOptions(BaseModel):
    """
    Options for one listing-page visit.

    ``title_keywords`` and ``enrich_limit`` are policy knobs: an empty keyword
    list accepts every non-empty title, and ``enrich_limit=None`` enriches
    every record that lacks a company URL.
    """
    include_company_url: bool = Field(default=False, alias="includeCompanyUrl")
    max_results: int = Field(default=50, ge=1, alias="maxResults")
    mode: PacingMode = Field(default=PacingMode.CONSERVATIVE)
    title_keywords: List[str] = Field(default_factory=list, alias="titleKeywords")
    enrich_limit: Optional[int] = Field(default=None, ge=0, alias="enrichLimit")
    dedupe: bool = True

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("title_keywords")
    @classmethod
    def normalize_keywords(cls, v: List[str]) -> List[str]:
        return [k.strip().lower() for k in v if k and k.strip()]

    @classmethod
    def from_config(cls, config) -> "ScrapeOptions":
        """Build options from a loaded Config."""
        return cls(
            include_company_url=config.include_company_url,
            max_results=config.max_results,
            mode=config.pacing_mode,
            title_keywords=config.title_keywords,
            enrich_limit=config.enrich_limit,
            dedupe=config.dedupe,
        )


class ExtractionResult(BaseModel):
    """Outcome of one extraction pass over a listing page."""
    records: List[ListingRecord] = Field(default_factory=list)
    status: ExtractionStatus = ExtractionStatus.OK
    card_selector: Optional[str] = None
    cards_seen: int = 0
    cards_skipped: int = 0
    duplicates: int = 0

    @property
    def is_empty(self) -> bool:
        return self.status == ExtractionStatus.EMPTY


class EnrichmentStats(BaseModel):
    attempted: int = 0
    resolved: int = 0
    failed: int = 0
    skipped: int = 0


class PageResult(BaseModel):
    """Everything produced by one listing-page visit."""
    url: str = ""
    records: List[ListingRecord] = Field(default_factory=list)
    status: ExtractionStatus = ExtractionStatus.OK
    enrichment: Optional[EnrichmentStats] = None

    @property
    def is_empty(self) -> bool:
        return self.status == ExtractionStatus.EMPTY

    def batch(self) -> List[Dict[str, Any]]:
        """Records as output dicts, in DOM order."""
        return [record.to_output() for record in self.records]
