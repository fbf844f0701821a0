"""Amazon India price source."""

from __future__ import annotations

from .base import BasePriceProvider


class AmazonPriceProvider(BasePriceProvider):
    """Scrape the first Amazon search result."""

    site_name = "Amazon"
    origin = "https://www.amazon.in"
    search_url = "https://www.amazon.in/s?k={query}"
    card_selectors = ('[data-component-type="s-search-result"]',)
    title_selector = "h2 span"
    price_selector = ".a-price-whole"
    link_selector = "a.a-link-normal.s-no-outline"
