"""General-purpose helper utilities for the competitor engine."""

import math
from urllib.parse import urlparse


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding upward.

    Python's built-in ``round`` uses banker's rounding, which would publish
    different scores at exact .5 boundaries.

    Examples:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(66.66)
        67
    """
    return int(math.floor(value + 0.5))


def truncate_text(text: str, max_length: int = 60, suffix: str = "...") -> str:
    """Truncate text to a maximum length, breaking at word boundaries.

    Args:
        text: Input text.
        max_length: Maximum allowed length including suffix.
        suffix: String appended when truncation occurs.

    Returns:
        Truncated text with suffix if it was shortened.
    """
    if len(text) <= max_length:
        return text
    truncated = text[: max_length - len(suffix)]
    last_space = truncated.rfind(" ")
    if last_space > 0:
        truncated = truncated[:last_space]
    return truncated.rstrip(".,;:!? ") + suffix


def format_number(n: int | float) -> str:
    """Format a number with human-readable suffixes.

    Examples:
        >>> format_number(1500)
        '1.5K'
        >>> format_number(999)
        '999'
    """
    abs_n = abs(n)
    sign = "-" if n < 0 else ""
    if abs_n >= 1_000_000:
        return f"{sign}{abs_n / 1_000_000:.1f}M"
    if abs_n >= 1_000:
        return f"{sign}{abs_n / 1_000:.1f}K"
    if isinstance(n, float):
        return f"{sign}{abs_n:.1f}"
    return f"{sign}{abs_n}"


def extract_domain(url: str) -> str:
    """Extract the host of a URL, lowercased and without a leading ``www.``.

    Args:
        url: Full URL string, or a bare host.

    Returns:
        Domain name without protocol, port or path.
    """
    url = (url or "").strip()
    if not url:
        return ""
    try:
        parsed = urlparse(url if "://" in url else f"https://{url}")
        host = (parsed.hostname or "").lower()
    except ValueError:
        host = url.split("://", 1)[-1].split("/")[0].lower()
    return host.removeprefix("www.")
