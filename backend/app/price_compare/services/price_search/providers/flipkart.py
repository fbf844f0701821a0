"""Flipkart price source."""

from __future__ import annotations

from .base import BasePriceProvider


class FlipkartPriceProvider(BasePriceProvider):
    """Scrape the first Flipkart search result.

    Flipkart serves either a list layout or a grid layout depending on the
    product category, so both card classes are accepted.
    """

    site_name = "Flipkart"
    origin = "https://www.flipkart.com"
    search_url = "https://www.flipkart.com/search?q={query}"
    card_selectors = ("._1fQZEK", "._2kHMtA")
    title_selector = "._4rR01T"
    price_selector = "._30jeq3"
