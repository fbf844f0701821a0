"""Fallback product catalog consulted when every scraping source fails."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

import requests

from price_compare.configs import settings
from ..models import CatalogItem, FallbackUnavailable, Offer
from ..utils import DEFAULT_HEADERS, absolutize_url

logger = logging.getLogger("price_search.catalog")

FALLBACK_SOURCE_NAME = "Dummy Store"

# Native prices of 10**13 or more are rejected.
MAX_PRICE_EXPONENT = 12


class CatalogPriceProvider:
    """Keyword search against a public JSON product catalog."""

    def __init__(
        self,
        search_url: str | None = None,
        product_url: str | None = None,
        timeout: float | None = None,
        currency_factor: int | None = None,
    ) -> None:
        self.search_url = search_url or settings.FALLBACK_CATALOG_URL
        self.product_url = product_url or settings.FALLBACK_PRODUCT_URL
        self.timeout = timeout or settings.FALLBACK_TIMEOUT_SECONDS
        self.currency_factor = currency_factor or settings.FALLBACK_CURRENCY_FACTOR

    def search(self, query: str) -> List[CatalogItem]:
        """Return catalog items in response order, or an empty list on failure."""
        try:
            return self._search_impl(query)
        except FallbackUnavailable as exc:
            logger.warning("Fallback catalog unavailable: %s", exc.message)
            return []

    def _search_impl(self, query: str) -> List[CatalogItem]:
        try:
            response = requests.get(
                self.search_url,
                params={"q": query},
                headers=DEFAULT_HEADERS,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.HTTPError as http_err:
            raise FallbackUnavailable(f"HTTP error: {http_err}") from http_err
        except requests.exceptions.Timeout as timeout_err:
            raise FallbackUnavailable(f"Timeout error: {timeout_err}") from timeout_err
        except requests.exceptions.RequestException as req_err:
            raise FallbackUnavailable(f"Request error: {req_err}") from req_err
        except ValueError as json_err:
            raise FallbackUnavailable(f"Invalid JSON body: {json_err}") from json_err

        products = payload.get("products") if isinstance(payload, dict) else None
        if not isinstance(products, list):
            raise FallbackUnavailable("Response body has no product list.")

        items = [_to_catalog_item(product) for product in products]
        if not items:
            logger.info("No catalog products found for '%s'.", query)
        return items

    def to_offer(self, item: CatalogItem) -> Optional[Offer]:
        """Convert a catalog item to the local currency; None if unusable."""
        native_price = item.native_price
        if native_price is None or not item.id:
            return None
        if not native_price.is_finite() or native_price <= 0:
            return None
        if native_price.adjusted() > MAX_PRICE_EXPONENT:
            return None

        price = int(native_price * self.currency_factor)
        if price <= 0:
            return None

        return Offer(
            source_name=FALLBACK_SOURCE_NAME,
            price=price,
            detail_url=f"{self.product_url}{item.id}",
            title=item.title,
            image_url=absolutize_url(item.image_url, self.product_url),
        )


def _to_catalog_item(product: Any) -> CatalogItem:
    if not isinstance(product, dict):
        return CatalogItem()

    raw_id = product.get("id")
    title = product.get("title")
    thumbnail = product.get("thumbnail")
    return CatalogItem(
        id=str(raw_id) if raw_id not in (None, "") else None,
        title=title if isinstance(title, str) else None,
        native_price=_to_decimal(product.get("price")),
        image_url=thumbnail if isinstance(thumbnail, str) else None,
    )


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite() or number.adjusted() > MAX_PRICE_EXPONENT:
        return None
    return number
