"""
Infrastructure Package.

Provides the rendering session the checker drives: protocols describing what
the checker needs from a browser, and the Playwright implementation.
"""

from .browser_session import (
    NavigationResponse,
    PageContext,
    PlaywrightPage,
    PlaywrightSession,
    Session,
)

__all__ = [
    "NavigationResponse",
    "PageContext",
    "PlaywrightPage",
    "PlaywrightSession",
    "Session",
]
