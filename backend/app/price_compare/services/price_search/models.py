"""Domain models for price comparison results."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class Offer:
    """Single product listing found on one source."""

    source_name: str
    price: int
    detail_url: str
    title: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """Raw item returned by the fallback catalog, in its native currency."""

    id: Optional[str] = None
    title: Optional[str] = None
    native_price: Optional[Decimal] = None
    image_url: Optional[str] = None


@dataclass(frozen=True, slots=True)
class AggregateResult:
    """Outcome of one price comparison."""

    query: str
    normalized_query: str
    offers: Tuple[Offer, ...]
    best: Offer
    summary_text: str


class PriceSearchError(RuntimeError):
    """Base class for failures raised while searching prices."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExtractionFailure(PriceSearchError):
    """Raised when a source cannot produce a usable offer."""

    def __init__(self, site: str, message: str) -> None:
        super().__init__(message)
        self.site = site


class RenderFailure(PriceSearchError):
    """Raised when a page cannot be rendered (navigation error or timeout)."""


class FallbackUnavailable(PriceSearchError):
    """Raised when the fallback catalog cannot be queried."""


class NoOffersFound(PriceSearchError):
    """Raised when neither the sources nor the fallback returned an offer."""

    def __init__(self, query: str, normalized_query: str) -> None:
        super().__init__(f'No offers found for "{query}".')
        self.query = query
        self.normalized_query = normalized_query
