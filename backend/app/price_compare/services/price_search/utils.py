"""Utilities shared by the price sources and the aggregation engine."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urljoin, urlparse


DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-IN,en;q=0.9",
}


def normalize_whitespace(value: str) -> str:
    """Collapse repeated spaces and newlines."""
    return re.sub(r"\s+", " ", value).strip()


def normalize_query(raw: str) -> str:
    """Canonical form of a search query: trimmed, single-spaced, lower-case.

    Whitespace-only input yields an empty string; that is still a valid query.
    """
    return normalize_whitespace(raw).lower()


def parse_whole_price(price_text: str | None) -> Optional[int]:
    """Keep only the digits of a displayed price.

    Returns None when nothing numeric is left or the value is zero, since a
    zero price is never a real offer.
    """
    if not price_text:
        return None

    digits = re.sub(r"\D", "", price_text)
    if not digits:
        return None

    value = int(digits)
    return value if value > 0 else None


def absolutize_url(href: str | None, origin: str) -> Optional[str]:
    """Resolve ``href`` against ``origin``; None if the result is not a web URL."""
    if not href:
        return None

    href = href.strip()
    if not href:
        return None

    try:
        url = urljoin(origin, href)
        parsed = urlparse(url)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


def format_price(value: int, symbol: str = "₹") -> str:
    """Format a whole-unit price for display."""
    return f"{symbol}{value}"
