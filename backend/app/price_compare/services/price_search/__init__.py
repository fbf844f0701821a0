"""Multi-source price comparison."""

from .models import (
    AggregateResult,
    CatalogItem,
    ExtractionFailure,
    FallbackUnavailable,
    NoOffersFound,
    Offer,
    PriceSearchError,
)
from .service import PriceComparisonService, select_best
from .utils import normalize_query

__all__ = [
    "AggregateResult",
    "CatalogItem",
    "ExtractionFailure",
    "FallbackUnavailable",
    "NoOffersFound",
    "Offer",
    "PriceComparisonService",
    "PriceSearchError",
    "normalize_query",
    "select_best",
]
