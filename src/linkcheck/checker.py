"""
Link check orchestration.

Loads one page, enumerates its links and validates them, streaming an
``Entry`` per distinct link. Categories are always emitted in the order
same page, same site, off site.

The browser session is owned by the run and closed exactly once: when the
stream is exhausted, when a fatal error is raised, or when the consumer
closes the stream early. Use the stream as an async context manager to get
that guarantee on ``break``:

    async with check_links("https://example.com", {"concurrency": 10}) as entries:
        async for entry in entries:
            print(entry.category, entry.input.link, entry.status)
"""

import logging
import time
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Mapping, Optional, Union

from .browser_config import DEFAULT_CONFIG
from .config import CheckerConfig, resolve_config
from .constants import MIN_FRAGMENT_LENGTH
from .exceptions import NavigationError
from .infrastructure.browser_session import PageContext, PlaywrightSession, Session
from .links import collect_links
from .models import Entry, LinkCategory, LinkInput, Observation, ValidationOutcome
from .scheduler import bounded_map
from .validator import is_fragment_valid, is_link_valid

logger = logging.getLogger(__name__)

SessionFactory = Callable[[CheckerConfig], Session]


def default_session_factory(config: CheckerConfig) -> Session:
    """Create a Playwright session with the default browser settings."""
    return PlaywrightSession(DEFAULT_CONFIG)


async def check_same_page_links(
    links: Mapping[str, int],
    page: PageContext,
) -> AsyncIterator[tuple[LinkInput, ValidationOutcome]]:
    """Check fragment links against the already loaded page, in discovery order."""
    for link, count in links.items():
        if len(link) < MIN_FRAGMENT_LENGTH:
            continue
        fragment_exists = await is_fragment_valid(link, page)
        yield (
            LinkInput(link=link, count=count),
            Observation(page_exists=True, fragment_exists=fragment_exists),
        )


async def check_off_page_links(
    links: Mapping[str, int],
    session: Session,
    config: CheckerConfig,
) -> AsyncIterator[tuple[LinkInput, ValidationOutcome]]:
    """Validate each distinct link once, ``config.concurrency`` at a time.

    Results arrive in completion order.
    """
    # TODO: retry navigations that failed with a timeout
    results = bounded_map(
        lambda link: is_link_valid(link, config, session),
        list(links),
        config.concurrency,
    )
    async with aclosing(results):
        async for result in results:
            yield LinkInput(link=result.input, count=links[result.input]), result.output


class LinkCheck:
    """
    A running link check: an async iterator of ``Entry`` objects.

    Nothing happens until the first entry is requested. ``aclose()`` (or
    leaving the ``async with`` block) stops the run and releases the browser.
    """

    def __init__(
        self,
        url: str,
        config: CheckerConfig,
        session_factory: Optional[SessionFactory] = None,
    ):
        self.url = url
        self.config = config
        self._session_factory = session_factory or default_session_factory
        self._entries = self._run()

    def __aiter__(self) -> "LinkCheck":
        return self

    async def __anext__(self) -> Entry:
        return await self._entries.__anext__()

    async def __aenter__(self) -> "LinkCheck":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the run, cancelling in-flight checks and closing the browser."""
        await self._entries.aclose()

    async def _run(self) -> AsyncIterator[Entry]:
        logger.info(f"Checking links on {self.url}")
        start_time = time.time()
        emitted = 0

        session = self._session_factory(self.config)
        try:
            await session.start()
            page = await session.new_page()
            await page.set_cache_enabled(self.config.cache_enabled)
            await self._load(page)

            links = await collect_links(page, self.config)

            async with aclosing(check_same_page_links(links.same_page, page)) as results:
                async for link_input, output in results:
                    emitted += 1
                    yield Entry(link_input, output, LinkCategory.SAME_PAGE)

            for category, occurrences in (
                (LinkCategory.SAME_SITE, links.same_site),
                (LinkCategory.OFF_SITE, links.off_site),
            ):
                checks = check_off_page_links(occurrences, session, self.config)
                async with aclosing(checks) as results:
                    async for link_input, output in results:
                        emitted += 1
                        yield Entry(link_input, output, category)

            logger.info(
                f"Link check complete: {self.url} "
                f"({emitted} entries, time={time.time() - start_time:.2f}s)"
            )
        finally:
            await session.close()

    async def _load(self, page: PageContext) -> None:
        """Navigate to the page being checked, failing the run if it does not load."""
        try:
            response = await page.goto(self.url, self.config.navigation)
        except Exception as e:
            logger.error(f"Failed to load {self.url}: {e}")
            raise NavigationError(self.url, reason=str(e)) from e

        if response is None or not response.ok:
            status_code = response.status_code if response is not None else None
            logger.error(f"Failed to load {self.url} (status={status_code})")
            raise NavigationError(self.url, status_code=status_code)


def check_links(
    url: str,
    options: Union[CheckerConfig, Mapping[str, Any], None] = None,
    *,
    session_factory: Optional[SessionFactory] = None,
) -> LinkCheck:
    """
    Check every link on a page.

    Options are validated immediately, so an invalid configuration raises
    before any browser is launched.

    Args:
        url: Page to check
        options: Partial options mapping or a CheckerConfig
        session_factory: Builds the rendering session (defaults to Playwright)

    Returns:
        LinkCheck streaming one Entry per distinct link per enabled category

    Raises:
        ConfigurationError: If the options are invalid
    """
    config = resolve_config(options)
    return LinkCheck(url, config, session_factory)
