"""Check that every link on a web page points somewhere real."""

__version__ = "0.1.0"

from linkcheck.checker import LinkCheck, check_links
from linkcheck.config import CheckerConfig, NavigationConfig, resolve_config
from linkcheck.browser_config import BrowserConfig
from linkcheck.exceptions import ConfigurationError, LinkCheckError, NavigationError
from linkcheck.links import LinkSet, collect_links, count
from linkcheck.models import (
    Entry,
    Failure,
    LinkCategory,
    LinkInput,
    Observation,
    ResultStatus,
    ValidationOutcome,
)
from linkcheck.scheduler import MapResult, bounded_map
from linkcheck.validator import is_fragment_valid, is_link_valid

# Infrastructure
from linkcheck.infrastructure import (
    NavigationResponse,
    PageContext,
    PlaywrightSession,
    Session,
)

__all__ = [
    # Core
    "check_links",
    "LinkCheck",
    "bounded_map",
    "MapResult",
    "count",
    "collect_links",
    "LinkSet",
    "is_fragment_valid",
    "is_link_valid",
    # Configuration
    "CheckerConfig",
    "NavigationConfig",
    "BrowserConfig",
    "resolve_config",
    # Models
    "Entry",
    "Failure",
    "LinkCategory",
    "LinkInput",
    "Observation",
    "ResultStatus",
    "ValidationOutcome",
    # Errors
    "LinkCheckError",
    "ConfigurationError",
    "NavigationError",
    # Infrastructure
    "NavigationResponse",
    "PageContext",
    "PlaywrightSession",
    "Session",
]
