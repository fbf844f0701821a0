"""Request and response models of the price comparison endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from price_compare.services.price_search.models import AggregateResult, Offer


class PriceCompareRequest(BaseModel):
    """Body of a price comparison request."""

    query: str = Field(..., description="Free-text product name typed by the user.")


class OfferModel(BaseModel):
    """One listing as shown on a price card."""

    platform: str = Field(..., description="Source the offer was found on.")
    name: Optional[str] = Field(default=None, description="Product title.")
    price: int = Field(..., description="Whole-unit price in the display currency.")
    image: Optional[str] = Field(default=None, description="Absolute image URL.")
    link: str = Field(..., description="Absolute URL of the listing.")

    @classmethod
    def from_offer(cls, offer: Offer) -> "OfferModel":
        return cls(
            platform=offer.source_name,
            name=offer.title,
            price=offer.price,
            image=offer.image_url,
            link=offer.detail_url,
        )


class PriceCompareResponse(BaseModel):
    """Offers found for a query and the cheapest among them."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., description="Query as typed by the user.")
    cleaned_query: str = Field(
        ..., alias="cleanedQuery", description="Normalized query sent to the sources."
    )
    platforms: List[OfferModel] = Field(
        ..., description="Offers in the order they arrived."
    )
    best: OfferModel = Field(..., description="Cheapest offer.")
    summary: str = Field(..., description="One-sentence summary of the best price.")

    @classmethod
    def from_result(cls, result: AggregateResult) -> "PriceCompareResponse":
        return cls(
            query=result.query,
            cleaned_query=result.normalized_query,
            platforms=[OfferModel.from_offer(offer) for offer in result.offers],
            best=OfferModel.from_offer(result.best),
            summary=result.summary_text,
        )


class ErrorResponse(BaseModel):
    """Error payload understood by the web client."""

    model_config = ConfigDict(populate_by_name=True)

    error: str = Field(..., description="Human readable error.")
    query: Optional[str] = None
    cleaned_query: Optional[str] = Field(default=None, alias="cleanedQuery")
