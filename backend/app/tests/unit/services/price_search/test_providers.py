"""Tests for the scraping sources."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from price_compare.services.price_search.models import ExtractionFailure, RenderFailure
from price_compare.services.price_search.providers.base import BasePriceProvider
from price_compare.services.price_search.rendering import _PlaywrightSession
from price_compare.services.price_search.providers.amazon import AmazonPriceProvider
from price_compare.services.price_search.providers.flipkart import (
    FlipkartPriceProvider,
)

AMAZON_HTML = """
<html><body>
  <div data-component-type="s-search-result">
    <h2><span>Apple iPhone 15 (128 GB) - Black</span></h2>
    <img src="https://m.media-amazon.com/images/I/71d7rfSl0wL.jpg">
    <span class="a-price"><span class="a-price-whole">69,999.</span></span>
    <a class="a-link-normal s-no-outline" href="/Apple-iPhone-15/dp/B0CHX1W1XY">link</a>
  </div>
  <div data-component-type="s-search-result">
    <h2><span>Apple iPhone 15 Plus</span></h2>
    <span class="a-price-whole">79,999</span>
    <a class="a-link-normal s-no-outline" href="/Apple-iPhone-15-Plus/dp/B0CHX2">x</a>
  </div>
</body></html>
"""

FLIPKART_GRID_HTML = """
<div class="_2kHMtA">
  <a href="/apple-iphone-15-black-128-gb/p/itm6ac6485515ae4">
    <img src="/img/iphone15.jpeg">
    <div class="_4rR01T">APPLE iPhone 15 (Black, 128 GB)</div>
    <div class="_30jeq3">₹65,999</div>
  </a>
</div>
"""

FLIPKART_BOTH_LAYOUTS_HTML = """
<div class="_2kHMtA">
  <a href="/grid-item/p/itm1"><div class="_30jeq3">₹1,000</div></a>
</div>
<div class="_1fQZEK">
  <a href="/list-item/p/itm2"><div class="_30jeq3">₹2,000</div></a>
</div>
"""


def test_amazon_extracts_first_result_card(fake_renderer):
    renderer = fake_renderer(AMAZON_HTML)
    provider = AmazonPriceProvider(renderer)

    offer = asyncio.run(provider.fetch_offer("iphone 15", timeout=5))

    assert offer is not None
    assert offer.source_name == "Amazon"
    assert offer.title == "Apple iPhone 15 (128 GB) - Black"
    assert offer.price == 69999
    assert offer.detail_url == "https://www.amazon.in/Apple-iPhone-15/dp/B0CHX1W1XY"
    assert offer.image_url == "https://m.media-amazon.com/images/I/71d7rfSl0wL.jpg"
    assert renderer.urls == ["https://www.amazon.in/s?k=iphone%2015"]


def test_flipkart_falls_back_to_second_card_selector(fake_renderer):
    renderer = fake_renderer(FLIPKART_GRID_HTML)
    provider = FlipkartPriceProvider(renderer)

    offer = asyncio.run(provider.fetch_offer("iphone 15", timeout=5))

    assert offer is not None
    assert offer.source_name == "Flipkart"
    assert offer.price == 65999
    assert offer.title == "APPLE iPhone 15 (Black, 128 GB)"
    assert (
        offer.detail_url
        == "https://www.flipkart.com/apple-iphone-15-black-128-gb/p/itm6ac6485515ae4"
    )
    assert offer.image_url == "https://www.flipkart.com/img/iphone15.jpeg"
    assert renderer.urls == ["https://www.flipkart.com/search?q=iphone%2015"]


def test_first_matching_selector_wins_over_document_order():
    offer = FlipkartPriceProvider(renderer=None).extract_offer(
        FLIPKART_BOTH_LAYOUTS_HTML
    )

    assert offer.price == 2000
    assert offer.detail_url == "https://www.flipkart.com/list-item/p/itm2"
    assert offer.title is None


@pytest.mark.parametrize(
    "html, reason",
    [
        ("<div>no results</div>", "no result card"),
        (
            '<div data-component-type="s-search-result">'
            '<span class="a-price-whole">N/A</span>'
            '<a class="a-link-normal s-no-outline" href="/dp/1">x</a></div>',
            "price",
        ),
        (
            '<div data-component-type="s-search-result">'
            '<span class="a-price-whole">0</span>'
            '<a class="a-link-normal s-no-outline" href="/dp/1">x</a></div>',
            "price",
        ),
        (
            '<div data-component-type="s-search-result">'
            '<span class="a-price-whole">1,499</span></div>',
            "link",
        ),
        (
            '<div data-component-type="s-search-result">'
            '<span class="a-price-whole">1,499</span>'
            '<a class="a-link-normal s-no-outline">x</a></div>',
            "link",
        ),
    ],
)
def test_unusable_cards_raise_extraction_failure(html, reason):
    with pytest.raises(ExtractionFailure) as exc_info:
        AmazonPriceProvider(renderer=None).extract_offer(html)

    assert exc_info.value.site == "Amazon"
    assert reason in exc_info.value.message


def test_invalid_price_becomes_no_result(fake_renderer):
    html = AMAZON_HTML.replace("69,999.", "N/A")
    renderer = fake_renderer(html)

    offer = asyncio.run(AmazonPriceProvider(renderer).fetch_offer("iphone", 5))

    assert offer is None
    assert renderer.open_sessions == 0


def test_render_error_becomes_no_result_and_releases_session(fake_renderer):
    renderer = fake_renderer(error=RuntimeError("browser crashed"))

    offer = asyncio.run(AmazonPriceProvider(renderer).fetch_offer("iphone", 5))

    assert offer is None
    assert renderer.opened == 1
    assert renderer.open_sessions == 0


def test_timeout_becomes_no_result_and_releases_session(fake_renderer):
    renderer = fake_renderer(hang=True)

    offer = asyncio.run(FlipkartPriceProvider(renderer).fetch_offer("tv", 0.05))

    assert offer is None
    assert renderer.opened == 1
    assert renderer.open_sessions == 0


def test_cancellation_propagates_and_releases_session(fake_renderer):
    renderer = fake_renderer(hang=True)
    provider = AmazonPriceProvider(renderer)

    async def scenario():
        task = asyncio.create_task(provider.fetch_offer("tv", 30))
        while renderer.opened == 0:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    assert renderer.open_sessions == 0


def test_each_call_gets_its_own_session(fake_renderer):
    renderer = fake_renderer(AMAZON_HTML)
    provider = AmazonPriceProvider(renderer)

    async def scenario():
        return await asyncio.gather(
            provider.fetch_offer("iphone", 5), provider.fetch_offer("iphone", 5)
        )

    first, second = asyncio.run(scenario())

    assert first == second
    assert renderer.opened == 2
    assert renderer.open_sessions == 0


def test_navigation_failure_is_logged_as_warning(fake_renderer):
    renderer = fake_renderer(error=RenderFailure("Timeout 20000ms exceeded."))
    provider = AmazonPriceProvider(renderer)

    with patch.object(provider, "logger") as mock_logger:
        offer = asyncio.run(provider.fetch_offer("iphone", 5))

    assert offer is None
    mock_logger.warning.assert_called_once()
    assert "Timeout 20000ms exceeded." in mock_logger.warning.call_args.args
    mock_logger.exception.assert_not_called()
    assert renderer.open_sessions == 0


def test_playwright_navigation_timeout_becomes_render_failure():
    page = MagicMock()
    page.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 20000ms exceeded."))
    page.content = AsyncMock()
    session = _PlaywrightSession(page, navigation_timeout_ms=20000)

    with pytest.raises(RenderFailure, match="Timeout 20000ms exceeded"):
        asyncio.run(session.render("https://www.amazon.in/s?k=tv"))

    page.goto.assert_awaited_once_with(
        "https://www.amazon.in/s?k=tv", wait_until="domcontentloaded", timeout=20000
    )
    page.content.assert_not_awaited()


def test_each_source_logs_under_its_own_name():
    assert AmazonPriceProvider(renderer=None).logger.name == "price_search.amazon"
    assert FlipkartPriceProvider(renderer=None).logger.name == "price_search.flipkart"


def test_source_must_describe_its_site():
    class HalfDescribedProvider(BasePriceProvider):
        site_name = "Half"
        origin = "https://half.example"

    with pytest.raises(TypeError):
        BasePriceProvider(renderer=None)
    with pytest.raises(TypeError):
        HalfDescribedProvider(renderer=None)
