"""Fragment and link validation.

Both validators report problems as values: a fragment that cannot be queried
is simply missing, and a link that cannot be loaded becomes a ``Failure``.
"""

import logging
import re
from urllib.parse import urlsplit

from .config import CheckerConfig
from .constants import MIN_FRAGMENT_LENGTH
from .infrastructure.browser_session import PageContext, Session
from .models import Failure, Observation, ValidationOutcome

logger = logging.getLogger(__name__)


def describe_error(exc: BaseException) -> str:
    """Error text for a Failure, falling back to the exception type."""
    return str(exc) or type(exc).__name__


def fragment_selector(fragment: str) -> str:
    """Build a selector matching elements whose id or name is the fragment."""
    identifier = fragment[1:] if fragment.startswith("#") else fragment
    return f"[id='{identifier}'], [name='{identifier}']"


async def is_fragment_valid(fragment: str, page: PageContext) -> bool:
    """
    Check whether the page currently loaded in ``page`` has the fragment target.

    Does not navigate. If the selector cannot be evaluated (odd characters in
    the fragment, page already closed...) the fragment counts as missing.

    Args:
        fragment: Fragment such as "#section1"
        page: Page context to query

    Returns:
        True if an element with that id or name exists
    """
    try:
        return await page.has_selector(fragment_selector(fragment))
    except Exception as e:
        logger.debug(f"Fragment query failed for {fragment}: {e}")
        return False


async def is_link_valid(
    link: str,
    config: CheckerConfig,
    session: Session,
) -> ValidationOutcome:
    """
    Load a link in its own page context and classify the outcome.

    The page exists if the navigation succeeded with a 2xx status, or
    produced no response at all. When fragments are enabled, the fragment of
    the link (if any) is checked on the loaded page. If ``bad_content`` is
    configured and matches the page body, the link fails regardless of status.

    The page context is always closed before returning.

    Args:
        link: Absolute URL to check
        config: Run configuration
        session: Rendering session to open the page context from

    Returns:
        Observation, or Failure if the check could not complete
    """
    try:
        page = await session.new_page()
    except Exception as e:
        logger.warning(f"Could not open page for {link}: {e}")
        return Failure(error=describe_error(e))

    try:
        response = await page.goto(link, config.navigation)
        page_exists = response is None or response.ok

        fragment_exists = None
        fragment = f"#{urlsplit(link).fragment}"
        if config.fragments and page_exists and len(fragment) >= MIN_FRAGMENT_LENGTH:
            fragment_exists = await is_fragment_valid(fragment, page)

        status_code = response.status_code if response is not None else None

        if config.bad_content:
            html = await page.body_html()
            if re.search(config.bad_content, html):
                logger.info(f"Bad content found at {link}")
                return Failure(error=f"Bad content found at {link}: {config.bad_content}")

        return Observation(
            page_exists=page_exists,
            fragment_exists=fragment_exists,
            status_code=status_code,
        )

    except Exception as e:
        logger.debug(f"Check failed for {link}: {e}")
        return Failure(error=describe_error(e))

    finally:
        await page.close()
