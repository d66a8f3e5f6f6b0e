"""
Browser configuration for the Playwright rendering session.

This module provides a validated Pydantic configuration model for how the
browser is launched and how each isolated page context is created, plus a
few pre-configured instances.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class BrowserConfig(BaseModel):
    """
    Configuration for the Playwright-based PlaywrightSession.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    model_config = ConfigDict(frozen=True)

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (no visible UI)"
    )

    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Browser engine to use for checking"
    )

    launch_args: List[str] = Field(
        default_factory=list,
        description="Additional browser launch arguments (e.g., '--disable-http2')"
    )

    user_agent: Optional[str] = Field(
        default=None,
        description="Custom user agent. If None, the browser's own is used."
    )

    ignore_https_errors: bool = Field(
        default=False,
        description="Treat pages with invalid certificates as reachable"
    )


# --- Pre-configured Instances for Common Use Cases ---

DEFAULT_CONFIG = BrowserConfig()

CI_CONFIG = BrowserConfig(
    headless=True,
    launch_args=[
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
    ],
)
"""
Configuration for containers and CI runners.

Chromium's sandbox and shared-memory usage both fail in most unprivileged
containers, so they are switched off here.
"""
