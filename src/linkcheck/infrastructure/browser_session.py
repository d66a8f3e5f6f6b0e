"""
Playwright rendering session.

The checker talks to the browser only through the small ``Session`` and
``PageContext`` protocols defined here; ``PlaywrightSession`` is the real
implementation. Each page context is a fresh Playwright ``BrowserContext``
so concurrent checks never share cookies, storage or navigation state.

Usage:
    async with PlaywrightSession(BrowserConfig()) as session:
        page = await session.new_page()
        try:
            response = await page.goto("https://example.com", NavigationConfig())
        finally:
            await page.close()
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from playwright.async_api import async_playwright

from ..browser_config import BrowserConfig
from ..config import NavigationConfig

logger = logging.getLogger(__name__)


# Same-origin http(s) anchors, excluding bare fragment links.
SAME_SITE_LINKS_SCRIPT = """
elems => elems
    .filter(a => a.origin === location.origin)
    .map(a => a.href)
"""

# Anchors pointing at another origin over http(s).
OFF_SITE_LINKS_SCRIPT = """
elems => elems
    .filter(a => /https?:/.test(a.protocol) && a.origin !== location.origin)
    .map(a => a.href)
"""

SAME_PAGE_LINKS_SCRIPT = "elems => elems.map(a => a.hash)"

BODY_HTML_SCRIPT = "e => e.outerHTML"


@dataclass(frozen=True)
class NavigationResponse:
    """The part of a navigation response the checker cares about."""

    status_code: int
    ok: bool


class PageContext(Protocol):
    """An isolated page within a session."""

    async def goto(
        self, url: str, navigation: NavigationConfig
    ) -> Optional[NavigationResponse]: ...

    async def has_selector(self, selector: str) -> bool: ...

    async def body_html(self) -> str: ...

    async def set_cache_enabled(self, enabled: bool) -> None: ...

    async def same_page_links(self) -> list[str]: ...

    async def same_site_links(self) -> list[str]: ...

    async def off_site_links(self) -> list[str]: ...

    async def close(self) -> None: ...


class Session(Protocol):
    """A rendering session able to open isolated page contexts."""

    async def start(self) -> None: ...

    async def new_page(self) -> PageContext: ...

    async def close(self) -> None: ...


class PlaywrightPage:
    """PageContext backed by a Playwright page in its own browser context."""

    def __init__(self, context: Any, page: Any, browser_type: str = "chromium"):
        self._context = context
        self._page = page
        self._browser_type = browser_type
        self._closed = False

    async def goto(
        self, url: str, navigation: NavigationConfig
    ) -> Optional[NavigationResponse]:
        """Navigate and summarize the main response (None if there was none)."""
        response = await self._page.goto(
            url,
            timeout=navigation.timeout_ms,
            wait_until=navigation.playwright_wait_until,
        )
        if response is None:
            return None
        return NavigationResponse(status_code=response.status, ok=response.ok)

    async def has_selector(self, selector: str) -> bool:
        """Whether at least one element matches. Raises on an invalid selector."""
        element = await self._page.query_selector(selector)
        return element is not None

    async def body_html(self) -> str:
        return await self._page.eval_on_selector("body", BODY_HTML_SCRIPT)

    async def set_cache_enabled(self, enabled: bool) -> None:
        """
        Toggle the HTTP cache for this page.

        Only Chromium exposes this (through the DevTools protocol); on other
        engines the browser default is kept.
        """
        if self._browser_type != "chromium":
            logger.debug(f"Cache toggling not supported on {self._browser_type}")
            return

        cdp = await self._context.new_cdp_session(self._page)
        await cdp.send("Network.enable")
        await cdp.send("Network.setCacheDisabled", {"cacheDisabled": not enabled})

    async def same_page_links(self) -> list[str]:
        return await self._page.eval_on_selector_all(
            "a[href^='#']", SAME_PAGE_LINKS_SCRIPT
        )

    async def same_site_links(self) -> list[str]:
        return await self._page.eval_on_selector_all(
            "a[href]:not([href^='#'])", SAME_SITE_LINKS_SCRIPT
        )

    async def off_site_links(self) -> list[str]:
        return await self._page.eval_on_selector_all(
            "a[href]", OFF_SITE_LINKS_SCRIPT
        )

    async def close(self) -> None:
        """Close the page and its browser context. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._context.close()
        except Exception as e:
            logger.warning(f"Error closing page context: {e}")


class PlaywrightSession:
    """
    Session backed by a single Playwright browser.

    Designed to be used as an async context manager, or with explicit
    ``start()`` / ``close()`` calls. ``close()`` is idempotent.
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialize the session.

        Args:
            config: BrowserConfig with launch settings
        """
        self._config = config or BrowserConfig()
        self._playwright = None
        self._browser = None
        self._closed = False

    async def __aenter__(self) -> "PlaywrightSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def is_started(self) -> bool:
        """Whether the browser is running."""
        return self._browser is not None

    async def start(self) -> None:
        """Launch the browser."""
        if self._browser is not None:
            return

        logger.info(
            f"Launching {self._config.browser_type} browser (headless={self._config.headless})"
        )

        self._playwright = await async_playwright().start()
        browser_launcher = getattr(self._playwright, self._config.browser_type)

        launch_options: dict[str, Any] = {"headless": self._config.headless}
        if self._config.launch_args:
            launch_options["args"] = self._config.launch_args

        try:
            self._browser = await browser_launcher.launch(**launch_options)
        except Exception:
            await self._playwright.stop()
            self._playwright = None
            raise

        logger.info("Browser launched successfully")

    async def new_page(self) -> PlaywrightPage:
        """
        Open a page in a new, isolated browser context.

        Raises:
            RuntimeError: If the session has not been started
        """
        if self._browser is None:
            raise RuntimeError("Browser session not started. Call start() first.")

        context_options: dict[str, Any] = {
            "ignore_https_errors": self._config.ignore_https_errors,
        }
        if self._config.user_agent:
            context_options["user_agent"] = self._config.user_agent

        context = await self._browser.new_context(**context_options)
        try:
            page = await context.new_page()
        except Exception:
            await context.close()
            raise

        return PlaywrightPage(context, page, self._config.browser_type)

    async def close(self) -> None:
        """Close the browser and stop Playwright."""
        if self._closed:
            return
        self._closed = True

        if self._browser:
            logger.info("Closing browser")
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None
