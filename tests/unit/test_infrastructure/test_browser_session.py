"""Unit tests for the Playwright session adapter.

Playwright itself is replaced by mocks; nothing here launches a browser.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from linkcheck.browser_config import BrowserConfig
from linkcheck.config import NavigationConfig
from linkcheck.infrastructure.browser_session import (
    NavigationResponse,
    PlaywrightPage,
    PlaywrightSession,
)


@pytest.fixture
def playwright_page():
    page = MagicMock()
    page.goto = AsyncMock()
    page.query_selector = AsyncMock()
    page.eval_on_selector = AsyncMock()
    page.eval_on_selector_all = AsyncMock()
    return page


@pytest.fixture
def browser_context():
    context = MagicMock()
    context.close = AsyncMock()
    cdp = MagicMock()
    cdp.send = AsyncMock()
    context.new_cdp_session = AsyncMock(return_value=cdp)
    return context


@pytest.fixture
def mock_playwright(browser_context, playwright_page):
    """Patch async_playwright() with a mock chain down to the page."""
    browser_context.new_page = AsyncMock(return_value=playwright_page)

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=browser_context)
    browser.close = AsyncMock()

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.firefox.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock()

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)

    with patch(
        "linkcheck.infrastructure.browser_session.async_playwright",
        return_value=starter,
    ):
        yield playwright, browser


class TestPlaywrightPage:
    """Test cases for PlaywrightPage."""

    @pytest.mark.asyncio
    async def test_goto_summarizes_response(self, browser_context, playwright_page):
        """Test the response is reduced to status and ok flag."""
        playwright_page.goto.return_value = MagicMock(status=404, ok=False)
        page = PlaywrightPage(browser_context, playwright_page)

        response = await page.goto("https://example.com/x", NavigationConfig())

        assert response == NavigationResponse(status_code=404, ok=False)

    @pytest.mark.asyncio
    async def test_goto_without_response(self, browser_context, playwright_page):
        """Test a navigation with no response returns None."""
        playwright_page.goto.return_value = None
        page = PlaywrightPage(browser_context, playwright_page)

        assert await page.goto("https://example.com/#top", NavigationConfig()) is None

    @pytest.mark.asyncio
    async def test_goto_passes_navigation_options(self, browser_context, playwright_page):
        """Test timeout and the mapped wait condition are passed to Playwright."""
        playwright_page.goto.return_value = None
        page = PlaywrightPage(browser_context, playwright_page)

        await page.goto(
            "https://example.com/",
            NavigationConfig(timeout_ms=1234, wait_until="networkidle2"),
        )

        playwright_page.goto.assert_awaited_once_with(
            "https://example.com/", timeout=1234, wait_until="networkidle"
        )

    @pytest.mark.asyncio
    async def test_has_selector(self, browser_context, playwright_page):
        """Test selector matches are reported as booleans."""
        page = PlaywrightPage(browser_context, playwright_page)

        playwright_page.query_selector.return_value = MagicMock()
        assert await page.has_selector("[id='a']") is True

        playwright_page.query_selector.return_value = None
        assert await page.has_selector("[id='b']") is False

    @pytest.mark.asyncio
    async def test_body_html(self, browser_context, playwright_page):
        """Test the body markup is read from the page."""
        playwright_page.eval_on_selector.return_value = "<body>hi</body>"
        page = PlaywrightPage(browser_context, playwright_page)

        assert await page.body_html() == "<body>hi</body>"
        assert playwright_page.eval_on_selector.call_args[0][0] == "body"

    @pytest.mark.asyncio
    async def test_link_extraction_selectors(self, browser_context, playwright_page):
        """Test each category queries the right anchors."""
        playwright_page.eval_on_selector_all.return_value = []
        page = PlaywrightPage(browser_context, playwright_page)

        await page.same_page_links()
        await page.same_site_links()
        await page.off_site_links()

        selectors = [c[0][0] for c in playwright_page.eval_on_selector_all.call_args_list]
        assert selectors == ["a[href^='#']", "a[href]:not([href^='#'])", "a[href]"]

    @pytest.mark.asyncio
    async def test_cache_toggle_on_chromium(self, browser_context, playwright_page):
        """Test the cache is disabled over the DevTools protocol."""
        page = PlaywrightPage(browser_context, playwright_page, "chromium")

        await page.set_cache_enabled(False)

        cdp = await browser_context.new_cdp_session()
        cdp.send.assert_any_await("Network.setCacheDisabled", {"cacheDisabled": True})

    @pytest.mark.asyncio
    async def test_cache_toggle_skipped_elsewhere(self, browser_context, playwright_page):
        """Test non-Chromium engines keep their cache settings."""
        page = PlaywrightPage(browser_context, playwright_page, "firefox")

        await page.set_cache_enabled(False)

        browser_context.new_cdp_session.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, browser_context, playwright_page):
        """Test closing twice closes the context once."""
        page = PlaywrightPage(browser_context, playwright_page)

        await page.close()
        await page.close()

        browser_context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_swallows_errors(self, browser_context, playwright_page):
        """Test a failing context close does not raise."""
        browser_context.close.side_effect = RuntimeError("already gone")
        page = PlaywrightPage(browser_context, playwright_page)

        await page.close()


class TestPlaywrightSession:
    """Test cases for PlaywrightSession."""

    @pytest.mark.asyncio
    async def test_new_page_before_start_raises(self):
        """Test opening a page on an unstarted session fails."""
        session = PlaywrightSession()

        with pytest.raises(RuntimeError, match="not started"):
            await session.new_page()

    @pytest.mark.asyncio
    async def test_start_launches_configured_browser(self, mock_playwright):
        """Test the configured engine is launched with its options."""
        playwright, _ = mock_playwright
        session = PlaywrightSession(
            BrowserConfig(browser_type="firefox", headless=False, launch_args=["--foo"])
        )

        await session.start()

        playwright.firefox.launch.assert_awaited_once_with(headless=False, args=["--foo"])
        assert session.is_started

    @pytest.mark.asyncio
    async def test_each_page_gets_a_new_context(self, mock_playwright):
        """Test pages are opened in fresh, isolated browser contexts."""
        _, browser = mock_playwright
        session = PlaywrightSession(BrowserConfig(user_agent="Bot/1.0"))
        await session.start()

        page_one = await session.new_page()
        page_two = await session.new_page()

        assert isinstance(page_one, PlaywrightPage)
        assert page_one is not page_two
        assert browser.new_context.await_count == 2
        browser.new_context.assert_awaited_with(
            ignore_https_errors=False, user_agent="Bot/1.0"
        )

    @pytest.mark.asyncio
    async def test_context_closed_when_page_fails(self, mock_playwright, browser_context):
        """Test the context is released if the page cannot be created."""
        browser_context.new_page.side_effect = RuntimeError("crashed")
        session = PlaywrightSession()
        await session.start()

        with pytest.raises(RuntimeError, match="crashed"):
            await session.new_page()

        browser_context.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_once(self, mock_playwright):
        """Test leaving the context manager closes the browser, and close is idempotent."""
        playwright, browser = mock_playwright

        async with PlaywrightSession() as session:
            assert session.is_started

        await session.close()

        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()
        assert not session.is_started

    @pytest.mark.asyncio
    async def test_close_without_start(self):
        """Test closing a session that never started is harmless."""
        await PlaywrightSession().close()
