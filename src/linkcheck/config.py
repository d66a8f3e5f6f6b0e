"""
Link checker configuration.

A ``CheckerConfig`` is an immutable snapshot for one run. Callers usually pass
a partial mapping to :func:`resolve_config`, which merges it over the defaults
and turns any validation problem into a :class:`ConfigurationError` before a
browser is ever launched.
"""
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_NAVIGATION_TIMEOUT_MS,
    DEFAULT_WAIT_UNTIL,
    ENV_PREFIX,
    MAX_CONCURRENCY,
    MIN_CONCURRENCY,
    WAIT_UNTIL_EVENTS,
)
from .exceptions import ConfigurationError

WaitUntil = Literal[
    "load", "domcontentloaded", "networkidle", "networkidle0", "networkidle2", "commit"
]


class NavigationConfig(BaseModel):
    """Options applied to every page navigation."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    timeout_ms: int = Field(
        default=DEFAULT_NAVIGATION_TIMEOUT_MS,
        ge=0,
        description="Navigation timeout in milliseconds (0 disables it)",
    )

    wait_until: WaitUntil = Field(
        default=DEFAULT_WAIT_UNTIL,
        description="When to consider navigation complete",
    )

    @property
    def playwright_wait_until(self) -> str:
        """The equivalent Playwright ``wait_until`` value."""
        return WAIT_UNTIL_EVENTS[self.wait_until]


class CheckerConfig(BaseModel):
    """
    Configuration for a single link check run.

    Field names are snake_case; the camelCase spellings (``samePage``,
    ``badContent``, ``timeoutMs``...) are accepted as aliases.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    same_page: bool = Field(
        default=True,
        description="Check existence of fragment links on the same page",
    )

    same_site: bool = Field(
        default=True,
        description="Check links on the same origin",
    )

    off_site: bool = Field(
        default=True,
        description="Check external site links",
    )

    fragments: bool = Field(
        default=True,
        description="Check existence of fragments on pages other than the current one",
    )

    cache_enabled: bool = Field(
        default=False,
        description="Allow the browser to cache scanned pages",
    )

    concurrency: int = Field(
        default=DEFAULT_CONCURRENCY,
        description="How many links to check at a time",
    )

    bad_content: Optional[str] = Field(
        default=None,
        description="Fail a link if this pattern is found in the page body",
    )

    navigation: NavigationConfig = Field(default_factory=NavigationConfig)

    @field_validator("concurrency")
    @classmethod
    def _check_concurrency(cls, value: int) -> int:
        if value < MIN_CONCURRENCY or value > MAX_CONCURRENCY:
            raise ValueError(
                f"concurrency must be between {MIN_CONCURRENCY}-{MAX_CONCURRENCY}, got {value}"
            )
        return value

    @classmethod
    def from_env(cls) -> "CheckerConfig":
        """Load configuration from ``LINKCHECK_*`` environment variables.

        A ``.env`` file in the working directory is loaded first; variables
        already set in the environment win.

        Returns:
            CheckerConfig with values from environment

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        return resolve_config(env_options())

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "CheckerConfig":
        """Load configuration from a JSON file.

        The options may sit at the top level or under a ``linkcheck`` key.
        A missing file yields the defaults.

        Raises:
            ConfigurationError: If the file is not valid JSON or holds invalid options
        """
        file_path = Path(path)
        if not file_path.exists():
            return cls()

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in {file_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Top level of {file_path} must be an object, got {type(data).__name__}"
            )

        return resolve_config(data.get("linkcheck", data))

    def to_dict(self) -> dict:
        """Convert the configuration to a plain dictionary."""
        return self.model_dump()


def env_options() -> dict[str, Any]:
    """Raw options from ``LINKCHECK_*`` variables, not yet validated.

    Loads a ``.env`` file from the working directory first.
    """
    load_dotenv()

    options: dict[str, Any] = {}
    for field_name in ("same_page", "same_site", "off_site", "fragments",
                       "cache_enabled", "concurrency", "bad_content"):
        env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value is not None:
            options[field_name] = env_value

    navigation: dict[str, Any] = {}
    for field_name in ("timeout_ms", "wait_until"):
        env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value is not None:
            navigation[field_name] = env_value
    if navigation:
        options["navigation"] = navigation

    return options


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def resolve_config(
    options: Union[CheckerConfig, Mapping[str, Any], None] = None,
) -> CheckerConfig:
    """Merge caller options over the defaults.

    Args:
        options: A partial mapping of options, an existing config, or None

    Returns:
        Validated CheckerConfig

    Raises:
        ConfigurationError: If any option is invalid (e.g. concurrency outside 1-100)
    """
    if options is None:
        return CheckerConfig()
    if isinstance(options, CheckerConfig):
        return options
    if not isinstance(options, Mapping):
        raise ConfigurationError(
            f"options must be a mapping, got {type(options).__name__}"
        )

    try:
        return CheckerConfig(**options)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid options: {_describe(exc)}") from exc
