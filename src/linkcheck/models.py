"""Data models for link check results."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class LinkCategory(str, Enum):
    """Where a link points, relative to the checked page."""

    SAME_PAGE = "samePage"
    SAME_SITE = "sameSite"
    OFF_SITE = "offSite"


class ResultStatus(Enum):
    """Overall verdict for one entry."""

    OK = "ok"
    INVALID_PAGE = "invalid_page"
    INVALID_FRAGMENT = "invalid_fragment"
    ERROR = "error"


@dataclass(frozen=True)
class Failure:
    """The check itself could not complete (navigation error, bad content...)."""

    error: str

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error}


@dataclass(frozen=True)
class Observation:
    """What was observed when the link was loaded.

    ``fragment_exists`` is None when no fragment was checked, and
    ``status_code`` is None when the navigation produced no response.
    """

    page_exists: bool
    fragment_exists: Optional[bool] = None
    status_code: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"pageExists": self.page_exists}
        if self.fragment_exists is not None:
            data["fragmentExists"] = self.fragment_exists
        if self.status_code is not None:
            data["statusCode"] = self.status_code
        return data


ValidationOutcome = Union[Failure, Observation]


@dataclass(frozen=True)
class LinkInput:
    """A distinct link and how many times it appeared on the page."""

    link: str
    count: int


@dataclass(frozen=True)
class Entry:
    """Result for one distinct link in one category."""

    input: LinkInput
    output: ValidationOutcome
    category: LinkCategory

    @property
    def status(self) -> ResultStatus:
        """Classify the outcome."""
        output = self.output
        if isinstance(output, Failure):
            return ResultStatus.ERROR
        if isinstance(output, Observation):
            if not output.page_exists:
                return ResultStatus.INVALID_PAGE
            if output.fragment_exists is False:
                return ResultStatus.INVALID_FRAGMENT
            return ResultStatus.OK
        raise TypeError(f"Unknown validation outcome: {output!r}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON output shape."""
        return {
            "category": self.category.value,
            "input": {"link": self.input.link, "count": self.input.count},
            "output": self.output.to_dict(),
        }
