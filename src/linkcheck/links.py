"""Link discovery and deduplication.

Raw links are pulled out of the rendered page by the browser session and
collapsed here into occurrence maps: each distinct link mapped to how many
times it appeared.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Protocol, TypeVar

from .config import CheckerConfig

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class LinkSource(Protocol):
    """The part of a page context that can enumerate its anchors."""

    async def same_page_links(self) -> list[str]: ...

    async def same_site_links(self) -> list[str]: ...

    async def off_site_links(self) -> list[str]: ...


def count(items: Iterable[T]) -> dict[T, int]:
    """Map each distinct item to its number of occurrences.

    >>> count(["#a", "#a", "#b"])
    {'#a': 2, '#b': 1}
    """
    return dict(Counter(items))


@dataclass(frozen=True)
class LinkSet:
    """Occurrence maps for the three link categories."""

    same_page: dict[str, int] = field(default_factory=dict)
    same_site: dict[str, int] = field(default_factory=dict)
    off_site: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Number of distinct links across all categories."""
        return len(self.same_page) + len(self.same_site) + len(self.off_site)


async def collect_links(page: LinkSource, config: CheckerConfig) -> LinkSet:
    """Extract and count the links on an already loaded page.

    Categories disabled in ``config`` are not extracted at all and come back
    as empty maps.
    """
    same_page = count(await page.same_page_links()) if config.same_page else {}
    same_site = count(await page.same_site_links()) if config.same_site else {}
    off_site = count(await page.off_site_links()) if config.off_site else {}

    links = LinkSet(same_page=same_page, same_site=same_site, off_site=off_site)
    logger.info(
        f"Found {links.total} distinct links "
        f"(same page: {len(same_page)}, same site: {len(same_site)}, off site: {len(off_site)})"
    )
    return links
