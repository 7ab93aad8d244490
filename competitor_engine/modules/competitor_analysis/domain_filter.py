"""Domain normalization and the competitor eligibility filter."""

import re
from typing import Iterable

# Platforms, directories, media and government sites that rank for almost
# anything and are never meaningful organic competitors.
EXCLUDED_DOMAINS: tuple[str, ...] = (
    "wikipedia.org",
    "youtube.com",
    "facebook.com",
    "linkedin.com",
    "reddit.com",
    "amazon.com",
    "ebay.com",
    "gov.uk",
    "bbc.com",
    "adobe.com",
    "microsoft.com",
    "google.com",
    "apple.com",
    "trustpilot.com",
    "yelp.com",
    "glassdoor.com",
    "indeed.com",
)

MIN_DOMAIN_LENGTH = 4

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_WWW_RE = re.compile(r"^www\.", re.IGNORECASE)
_PATH_RE = re.compile(r"[/?#].*$", re.DOTALL)


def normalize_domain(raw: str) -> str:
    """Reduce a URL or host to its lowercased host without a leading ``www.``.

    >>> normalize_domain("https://www.Example.com")
    'example.com'
    """
    domain = (raw or "").strip()
    domain = _SCHEME_RE.sub("", domain)
    domain = _PATH_RE.sub("", domain)
    domain = _WWW_RE.sub("", domain)
    return domain.lower()


def is_excluded(
    domain: str,
    target_domain: str,
    extra_exclusions: Iterable[str] = (),
) -> bool:
    """True when a normalized domain must not be counted as a competitor."""
    if domain == target_domain:
        return True
    if len(domain) < MIN_DOMAIN_LENGTH:
        return True
    for skip in EXCLUDED_DOMAINS:
        if skip in domain:
            return True
    return any(skip in domain for skip in extra_exclusions if skip)


def is_eligible_competitor(
    raw_domain: str,
    target_domain: str,
    extra_exclusions: Iterable[str] = (),
) -> bool:
    """Normalize ``raw_domain`` and check it against the target and skip-list."""
    return not is_excluded(
        normalize_domain(raw_domain),
        normalize_domain(target_domain),
        extra_exclusions,
    )
