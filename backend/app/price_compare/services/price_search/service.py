"""High-level service that orchestrates price comparisons."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import List, Optional, Sequence

from fastapi import Depends

from ...configs import settings
from .models import AggregateResult, NoOffersFound, Offer
from .providers.amazon import AmazonPriceProvider
from .providers.base import BasePriceProvider
from .providers.catalog import CatalogPriceProvider
from .providers.flipkart import FlipkartPriceProvider
from .rendering import PageRenderer, PlaywrightRenderer
from .utils import format_price, normalize_query

logger = logging.getLogger("price_search.service")


class PriceComparisonService:
    """Find the cheapest offer for a query across every registered source.

    All sources run concurrently and the service waits for every one of them
    to settle. The fallback catalog is only consulted when none of them
    produced an offer, so primary and fallback offers are never mixed.
    """

    def __init__(
        self,
        providers: Sequence[BasePriceProvider] | None = None,
        catalog: CatalogPriceProvider | None = None,
        renderer: PageRenderer | None = None,
        source_timeout: float | None = None,
        fallback_max_items: int | None = None,
    ) -> None:
        if providers is None:
            renderer = renderer or PlaywrightRenderer()
            providers = (
                AmazonPriceProvider(renderer),
                FlipkartPriceProvider(renderer),
            )
        self.providers: Sequence[BasePriceProvider] = providers
        self.catalog = catalog or CatalogPriceProvider()
        self.source_timeout = source_timeout or settings.SOURCE_TIMEOUT_SECONDS
        self.fallback_max_items = (
            settings.FALLBACK_MAX_ITEMS
            if fallback_max_items is None
            else fallback_max_items
        )

    async def aggregate(self, query: str) -> AggregateResult:
        """Compare prices for ``query``.

        Raises:
            NoOffersFound: no source and no fallback item produced an offer.
        """
        normalized = normalize_query(query)

        offers = await self._collect_offers(normalized)
        if not offers:
            logger.info(
                "No source returned an offer for '%s'; using fallback.", normalized
            )
            offers = await self._fallback_offers(normalized)

        if not offers:
            raise NoOffersFound(query, normalized)

        best = select_best(offers)
        logger.info(
            "%d offer(s) for '%s'; best is %s at %s.",
            len(offers),
            normalized,
            best.price,
            best.source_name,
        )
        return AggregateResult(
            query=query,
            normalized_query=normalized,
            offers=tuple(offers),
            best=best,
            summary_text=self.render_summary(query, best),
        )

    async def _collect_offers(self, query: str) -> List[Offer]:
        arrivals: List[Offer] = []

        async def run(provider: BasePriceProvider) -> None:
            offer = await provider.fetch_offer(query, self.source_timeout)
            if offer is not None:
                arrivals.append(offer)

        outcomes = await asyncio.gather(
            *(run(provider) for provider in self.providers),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return arrivals

    async def _fallback_offers(self, query: str) -> List[Offer]:
        items = await asyncio.to_thread(self.catalog.search, query)
        offers: List[Offer] = []
        for item in items[: self.fallback_max_items]:
            offer = self.catalog.to_offer(item)
            if offer is not None:
                offers.append(offer)
        return offers

    def render_summary(self, query: str, best: Offer) -> str:
        """Sentence shown above the offer list."""
        price = format_price(best.price, settings.CURRENCY_SYMBOL)
        return f'Best price for "{query}" is {price} at {best.source_name}.'


def select_best(offers: Sequence[Offer]) -> Optional[Offer]:
    """Cheapest offer; among equal prices the earliest one wins."""
    best: Optional[Offer] = None
    for offer in offers:
        if best is None or offer.price < best.price:
            best = offer
    return best


@lru_cache(maxsize=1)
def get_page_renderer() -> PageRenderer:
    """Browser pool shared by every request so the session bound holds."""
    return PlaywrightRenderer()


def get_price_comparison_service(
    renderer: PageRenderer = Depends(get_page_renderer),
) -> PriceComparisonService:
    """FastAPI dependency that wires the default sources."""
    return PriceComparisonService(renderer=renderer)
