"""Base classes for scraping price sources."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup
from bs4.element import Tag

from ..models import ExtractionFailure, Offer, RenderFailure
from ..rendering import PageRenderer
from ..utils import absolutize_url, normalize_whitespace, parse_whole_price


class BasePriceProvider(ABC):
    """Common behaviour for scraping sources.

    Subclasses only describe the site: where to search and which selectors
    locate the first result card and its fields. Card selectors are tried in
    order and the first one that matches wins.
    """

    image_selector: str = "img"
    link_selector: str = "a"

    def __init__(self, renderer: PageRenderer) -> None:
        self.renderer = renderer
        self.logger = logging.getLogger(f"price_search.{self.site_name.lower()}")

    @property
    @abstractmethod
    def site_name(self) -> str:
        """Name shown to the user as the offer's platform."""

    @property
    @abstractmethod
    def origin(self) -> str:
        """Scheme and host that relative links are resolved against."""

    @property
    @abstractmethod
    def search_url(self) -> str:
        """Search page template with a ``{query}`` placeholder."""

    @property
    @abstractmethod
    def card_selectors(self) -> Sequence[str]:
        """Result card selectors, most current layout first."""

    @property
    @abstractmethod
    def title_selector(self) -> str:
        """Product name inside a card."""

    @property
    @abstractmethod
    def price_selector(self) -> str:
        """Displayed price inside a card."""

    async def fetch_offer(self, query: str, timeout: float) -> Optional[Offer]:
        """Public entry point; every source failure becomes ``None``."""
        try:
            return await asyncio.wait_for(self._fetch(query), timeout)
        except ExtractionFailure as exc:
            self.logger.warning(
                "Could not extract an offer from %s: %s", exc.site, exc.message
            )
        except asyncio.TimeoutError:
            self.logger.warning(
                "%s did not answer within %.1fs for '%s'.", self.site_name, timeout, query
            )
        except Exception:
            self.logger.exception(
                "Unexpected error while searching prices on %s", self.site_name
            )
        return None

    def build_search_url(self, query: str) -> str:
        return self.search_url.format(query=quote(query))

    async def _fetch(self, query: str) -> Offer:
        url = self.build_search_url(query)
        async with self.renderer.session() as session:
            try:
                html = await session.render(url)
            except RenderFailure as exc:
                raise ExtractionFailure(self.site_name, exc.message) from exc
        return self.extract_offer(html)

    def extract_offer(self, html: str) -> Offer:
        """Build an offer from the first result card of a search page."""
        soup = BeautifulSoup(html, "html.parser")
        card = self._first_card(soup)
        if card is None:
            raise ExtractionFailure(self.site_name, "no result card on the page.")

        price_tag = card.select_one(self.price_selector)
        price = parse_whole_price(price_tag.get_text() if price_tag else None)
        if price is None:
            raise ExtractionFailure(self.site_name, "missing or unparsable price.")

        link_tag = card.select_one(self.link_selector)
        detail_url = absolutize_url(
            link_tag.get("href") if link_tag else None, self.origin
        )
        if detail_url is None:
            raise ExtractionFailure(self.site_name, "missing product link.")

        title_tag = card.select_one(self.title_selector)
        title = normalize_whitespace(title_tag.get_text()) if title_tag else ""
        image_tag = card.select_one(self.image_selector)
        return Offer(
            source_name=self.site_name,
            price=price,
            detail_url=detail_url,
            title=title or None,
            image_url=absolutize_url(
                image_tag.get("src") if image_tag else None, self.origin
            ),
        )

    def _first_card(self, soup: BeautifulSoup) -> Optional[Tag]:
        for selector in self.card_selectors:
            card = soup.select_one(selector)
            if card is not None:
                return card
        return None
