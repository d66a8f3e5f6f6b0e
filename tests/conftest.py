"""Shared fixtures: an in-memory stand-in for the browser session."""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Optional

import pytest

from linkcheck.config import NavigationConfig
from linkcheck.infrastructure.browser_session import NavigationResponse

SELECTOR_RE = re.compile(r"^\[id='([^']*)'\], \[name='([^']*)'\]$")


@dataclass
class FakeSite:
    """What a URL serves in the fake browser."""

    status: Optional[int] = 200
    ids: set[str] = field(default_factory=set)
    names: set[str] = field(default_factory=set)
    body: str = "<body></body>"
    delay: float = 0.0
    error: Optional[Exception] = None
    same_page_links: list[str] = field(default_factory=list)
    same_site_links: list[str] = field(default_factory=list)
    off_site_links: list[str] = field(default_factory=list)


class FakePage:
    """PageContext over FakeSite objects."""

    def __init__(self, session: "FakeSession"):
        self._session = session
        self.site: Optional[FakeSite] = None
        self.closed = False
        self.cache_enabled: Optional[bool] = None
        self.navigations: list[tuple[str, NavigationConfig]] = []

    def _require_open(self) -> None:
        if self.closed:
            raise RuntimeError("Target page, context or browser has been closed")

    def _require_site(self) -> FakeSite:
        self._require_open()
        if self.site is None:
            raise RuntimeError("Nothing loaded")
        return self.site

    async def goto(self, url, navigation):
        self._require_open()
        self.navigations.append((url, navigation))
        self._session.visited.append(url)
        site = self._session.sites.get(url.split("#", 1)[0])
        if site is None:
            raise RuntimeError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        if site.delay:
            await asyncio.sleep(site.delay)
        if site.error is not None:
            raise site.error
        self.site = site
        if site.status is None:
            return None
        return NavigationResponse(status_code=site.status, ok=200 <= site.status < 300)

    async def has_selector(self, selector):
        site = self._require_site()
        match = SELECTOR_RE.match(selector)
        if match is None:
            raise ValueError(f"'{selector}' is not a valid selector")
        return match.group(1) in site.ids or match.group(2) in site.names

    async def body_html(self):
        return self._require_site().body

    async def set_cache_enabled(self, enabled):
        self._require_open()
        self.cache_enabled = enabled

    async def same_page_links(self):
        return list(self._require_site().same_page_links)

    async def same_site_links(self):
        return list(self._require_site().same_site_links)

    async def off_site_links(self):
        return list(self._require_site().off_site_links)

    async def close(self):
        if self.closed:
            return
        self.closed = True
        self._session.open_pages -= 1


class FakeSession:
    """Session that serves FakeSite objects keyed by URL (without fragment)."""

    def __init__(self, sites: dict[str, FakeSite], new_page_error: Optional[Exception] = None):
        self.sites = sites
        self.new_page_error = new_page_error
        self.pages: list[FakePage] = []
        self.visited: list[str] = []
        self.open_pages = 0
        self.peak_open_pages = 0
        self.start_calls = 0
        self.close_calls = 0

    async def start(self):
        self.start_calls += 1

    async def new_page(self):
        if self.new_page_error is not None:
            raise self.new_page_error
        page = FakePage(self)
        self.pages.append(page)
        self.open_pages += 1
        self.peak_open_pages = max(self.peak_open_pages, self.open_pages)
        return page

    async def close(self):
        self.close_calls += 1


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep LINKCHECK_* variables from the developer's shell out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("LINKCHECK_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sites():
    """A small site: a home page, two internal pages and some external ones."""
    return {
        "https://example.com/": FakeSite(
            ids={"intro", "usage"},
            names={"legacy"},
            same_page_links=["#intro", "#intro", "#legacy", "#missing", "", "#"],
            same_site_links=[
                "https://example.com/about",
                "https://example.com/about",
                "https://example.com/docs#install",
                "https://example.com/docs#gone",
            ],
            off_site_links=[
                "https://other.org/",
                "https://other.org/missing",
            ],
        ),
        "https://example.com/about": FakeSite(),
        "https://example.com/docs": FakeSite(ids={"install"}),
        "https://other.org/": FakeSite(),
        "https://other.org/missing": FakeSite(status=404),
    }


@pytest.fixture
def session(sites):
    return FakeSession(sites)
