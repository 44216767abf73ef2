"""
URL rules for job and company links.

This module owns href resolution, the company-URL validity predicate and
company-URL canonicalization. Canonicalization is a fixed point: a cleaned
URL that passes validation passes it again, and cleaning it again is a no-op.
"""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlparse, urlunparse


TRACKING_PARAMS = {
    "utm_source", "utm_medium", "utm_campaign", "utm_term", "utm_content",
    "gclid", "fbclid",
    "refid", "trackingid", "trk", "trkinfo", "position", "pagenum", "lipi",
}

COMPANY_PATH_MARKER = "linkedin.com/company/"
COMPANY_HREF_MARKER = "/company/"
EXCLUDED_PATH_MARKERS = ("/jobs/", "/posts/", "/people/")
FILTER_QUERY_PARAMS = ("f_C=", "f_T=")

_NON_NAVIGABLE_SCHEMES = ("javascript:", "mailto:", "tel:", "data:")


def resolve_href(base_url: Optional[str], href: Optional[str]) -> str:
    """
    Resolve a raw href attribute the way a browser's ``element.href`` does.

    Args:
        base_url: URL of the document the element lives in (may be empty)
        href: Raw href attribute value

    Returns:
        Absolute URL, or "" when the href is missing or not navigable

    Example:
        >>> resolve_href("https://www.linkedin.com/jobs/search/", "/jobs/view/123")
        'https://www.linkedin.com/jobs/view/123'
    """
    if href is None:
        return ""
    href = href.strip()
    if not href or href.lower().startswith(_NON_NAVIGABLE_SCHEMES):
        return ""
    if not base_url:
        return href
    try:
        return urljoin(base_url, href)
    except ValueError:
        return href


def is_valid_company_url(url: Optional[str]) -> bool:
    """
    Check whether a URL points at a company page.

    A company URL must contain the company path marker, must not contain a
    job, post or people path marker, and must not carry a search filter
    query (``f_C=`` / ``f_T=``).

    Examples:
        >>> is_valid_company_url("https://www.linkedin.com/company/acme?trk=x")
        True
        >>> is_valid_company_url("https://www.linkedin.com/company/acme/jobs/")
        False
        >>> is_valid_company_url("https://www.linkedin.com/company/acme?f_C=1234")
        False
    """
    if not url or not isinstance(url, str):
        return False

    if COMPANY_PATH_MARKER not in url:
        return False

    if any(marker in url for marker in EXCLUDED_PATH_MARKERS):
        return False

    if "?" in url and any(param in url for param in FILTER_QUERY_PARAMS):
        return False

    return True


def clean_company_url(url: Optional[str]) -> str:
    """
    Strip query string, fragment and trailing slashes from a company URL.

    Examples:
        >>> clean_company_url("https://www.linkedin.com/company/acme/?trk=public_jobs#about")
        'https://www.linkedin.com/company/acme'
    """
    if not url:
        return ""
    cleaned = url.split("?", 1)[0].split("#", 1)[0]
    return cleaned.rstrip("/")


def canonical_company_url(url: Optional[str]) -> str:
    """
    Validate and clean a candidate company URL.

    Returns:
        The canonical URL, or "" if the candidate (or its cleaned form) is
        not a valid company URL
    """
    if not is_valid_company_url(url):
        return ""
    cleaned = clean_company_url(url)
    # "…/company/" collapses to "…/company" once the slash is stripped
    if not is_valid_company_url(cleaned):
        return ""
    return cleaned


def is_canonical_company_url(url: Optional[str]) -> bool:
    """True when url is a valid company URL already in canonical form."""
    return bool(url) and canonical_company_url(url) == url


def canonical_job_url(url: Optional[str]) -> str:
    """
    Drop tracking parameters and the fragment from a job detail URL.

    Other query parameters are kept in their original order.

    Example:
        >>> canonical_job_url("https://www.linkedin.com/jobs/view/123/?refId=a&trackingId=b#top")
        'https://www.linkedin.com/jobs/view/123/'
    """
    if not url:
        return ""
    try:
        u = urlparse(url)
    except ValueError:
        return url
    qs = [
        (k, v) for (k, v) in parse_qsl(u.query, keep_blank_values=True)
        if k.lower() not in TRACKING_PARAMS
    ]
    return urlunparse((u.scheme, u.netloc, u.path, u.params, urlencode(qs), ""))
