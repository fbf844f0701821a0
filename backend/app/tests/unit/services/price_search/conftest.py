"""In-memory stand-ins for browsers and sources."""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

import pytest

from price_compare.services.price_search.models import Offer
from price_compare.services.price_search.rendering import PageRenderer, RenderSession


class FakeSession(RenderSession):
    def __init__(self, renderer: "FakeRenderer") -> None:
        self.renderer = renderer

    async def render(self, url: str) -> str:
        self.renderer.urls.append(url)
        if self.renderer.hang:
            await asyncio.Event().wait()
        if self.renderer.error is not None:
            raise self.renderer.error
        return self.renderer.html


class FakeRenderer(PageRenderer):
    """Serve fixed HTML and count open sessions."""

    def __init__(self, html: str = "", error: Exception | None = None, hang: bool = False):
        self.html = html
        self.error = error
        self.hang = hang
        self.urls: list[str] = []
        self.opened = 0
        self.closed = 0

    @property
    def open_sessions(self) -> int:
        return self.opened - self.closed

    @asynccontextmanager
    async def session(self):
        self.opened += 1
        try:
            yield FakeSession(self)
        finally:
            self.closed += 1


class StubProvider:
    """Source returning a canned outcome, optionally after another one finished."""

    def __init__(
        self,
        offer: Optional[Offer] = None,
        *,
        after: "StubProvider | None" = None,
        error: Exception | None = None,
        delay: float = 0,
    ) -> None:
        self.offer = offer
        self.after = after
        self.error = error
        self.delay = delay
        self.calls: list[tuple[str, float]] = []
        self.finished = asyncio.Event()

    async def fetch_offer(self, query: str, timeout: float) -> Optional[Offer]:
        self.calls.append((query, timeout))
        try:
            if self.after is not None:
                await self.after.finished.wait()
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.offer
        finally:
            self.finished.set()


def make_offer(price: int, source: str = "Amazon", suffix: str = "") -> Offer:
    return Offer(
        source_name=source,
        price=price,
        detail_url=f"https://example.com/{source.lower()}/{price}{suffix}",
        title=f"{source} item {price}",
    )


@pytest.fixture()
def fake_renderer():
    return FakeRenderer


@pytest.fixture()
def stub_provider():
    return StubProvider


@pytest.fixture()
def offer_factory():
    return make_offer
