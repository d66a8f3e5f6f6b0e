# src/linkcheck/constants.py
"""Centralized constants for the link checker.

Defaults used by config.py and the CLI live here so both agree on them.
"""

# =============================================================================
# Concurrency Constants
# =============================================================================

# Default number of links validated at a time
DEFAULT_CONCURRENCY = 5

# Inclusive bounds for the concurrency setting
MIN_CONCURRENCY = 1
MAX_CONCURRENCY = 100


# =============================================================================
# Navigation Constants
# =============================================================================

# Per-navigation timeout in milliseconds
DEFAULT_NAVIGATION_TIMEOUT_MS = 20_000

# Default navigation wait condition
DEFAULT_WAIT_UNTIL = "load"

# Wait conditions accepted in configuration, mapped to what Playwright understands.
# Playwright has a single network-idle state (no connections for 500ms), so
# both the "0 connections" and "at most 2 connections" variants map to it.
WAIT_UNTIL_EVENTS = {
    "load": "load",
    "domcontentloaded": "domcontentloaded",
    "networkidle": "networkidle",
    "networkidle0": "networkidle",
    "networkidle2": "networkidle",
    "commit": "commit",
}


# =============================================================================
# Link Constants
# =============================================================================

# Links this short ("#" alone) are never validated
MIN_FRAGMENT_LENGTH = 2

# Environment variable prefix for configuration overrides
ENV_PREFIX = "LINKCHECK_"
