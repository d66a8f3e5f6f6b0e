"""Exceptions raised by the link checker.

Only configuration and top-level navigation problems are raised. A failure
while checking one link is reported as a ``Failure`` value on its entry.
"""

from typing import Optional


class LinkCheckError(Exception):
    """Base class for fatal link check errors."""


class ConfigurationError(LinkCheckError, ValueError):
    """Raised when the checker configuration is invalid."""


class NavigationError(LinkCheckError):
    """Raised when the page being checked cannot be loaded."""

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.reason = reason

        message = f"Failed to navigate to {url}"
        if status_code is not None:
            message += f". HTTP {status_code}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
