"""Price comparison endpoint.

Receive a product query, compare prices across the configured sources and
return the cheapest offer.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from price_compare.configs import settings
from price_compare.models.price_models import (
    ErrorResponse,
    PriceCompareRequest,
    PriceCompareResponse,
)
from price_compare.services.price_search.models import NoOffersFound
from price_compare.services.price_search.service import (
    PriceComparisonService,
    get_price_comparison_service,
)

logger = logging.getLogger("price_search.controller")

price_router = APIRouter(prefix="/api", tags=["Prices"])


def _error(status_code: int, payload: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.model_dump(by_alias=True, exclude_none=True),
    )


@price_router.post(
    "/price-compare",
    response_model=PriceCompareResponse,
    response_model_by_alias=True,
    responses={
        200: {"model": PriceCompareResponse, "description": "Cheapest offer found"},
        404: {"model": ErrorResponse, "description": "No source had an offer"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
        504: {"model": ErrorResponse, "description": "Comparison took too long"},
    },
)
async def compare_price(
    data: PriceCompareRequest,
    service: PriceComparisonService = Depends(get_price_comparison_service),
):
    """
    Compare prices for a product.

    Args:
        data (PriceCompareRequest): Body carrying the raw query.

    Returns:
        PriceCompareResponse with every offer and the best one, or an
        ErrorResponse when nothing was found or the comparison failed.
    """
    try:
        result = await asyncio.wait_for(
            service.aggregate(data.query), settings.REQUEST_TIMEOUT_SECONDS
        )
    except NoOffersFound as exc:
        logger.info("No offers found for '%s'.", exc.normalized_query)
        return _error(
            status.HTTP_404_NOT_FOUND,
            ErrorResponse(
                error="No offers found",
                query=exc.query,
                cleaned_query=exc.normalized_query,
            ),
        )
    except asyncio.TimeoutError:
        logger.warning("Price comparison for '%s' timed out.", data.query)
        return _error(
            status.HTTP_504_GATEWAY_TIMEOUT,
            ErrorResponse(error="Request timed out", query=data.query),
        )
    except Exception:
        logger.exception("Price comparison for '%s' failed.", data.query)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error="Server error"),
        )

    return PriceCompareResponse.from_result(result)
