"""Command-line interface for the link checker."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Optional, TextIO

from linkcheck.browser_config import CI_CONFIG, BrowserConfig
from linkcheck.checker import check_links
from linkcheck.config import CheckerConfig, env_options, resolve_config
from linkcheck.constants import WAIT_UNTIL_EVENTS
from linkcheck.infrastructure import PlaywrightSession
from linkcheck.logging_config import setup_logging
from linkcheck.models import Entry, LinkCategory, ResultStatus

logger = logging.getLogger(__name__)

CATEGORY_HEADINGS = {
    LinkCategory.SAME_PAGE: "Same page links (fragments)",
    LinkCategory.SAME_SITE: "Same site links",
    LinkCategory.OFF_SITE: "External links",
}

EMOJI_MARKERS = {
    ResultStatus.OK: "✅",
    ResultStatus.INVALID_PAGE: "❌",
    ResultStatus.INVALID_FRAGMENT: "🚧",
    ResultStatus.ERROR: "🚨",
}

TEXT_MARKERS = {
    ResultStatus.OK: "OK",
    ResultStatus.INVALID_PAGE: "FAIL",
    ResultStatus.INVALID_FRAGMENT: "FRAG",
    ResultStatus.ERROR: "ERR",
}


def format_heading(category: LinkCategory) -> str:
    """Format a category heading with its underline."""
    heading = f"{CATEGORY_HEADINGS[category]}:"
    return f"\n{heading}\n{'-' * len(heading)}"


def format_entry(entry: Entry, emoji: bool = True) -> str:
    """Format one entry as a single line.

    Args:
        entry: Entry to format
        emoji: Use emoji markers instead of plain text

    Returns:
        e.g. "✅\\thttps://example.com/about [x2]"
    """
    markers = EMOJI_MARKERS if emoji else TEXT_MARKERS
    text = f"{markers[entry.status]}\t{entry.input.link} [x{entry.input.count}]"
    error = getattr(entry.output, "error", None)
    if error:
        text += f" ({error})"
    return text


async def run_check(
    url: str,
    config: CheckerConfig,
    browser_config: BrowserConfig,
    output_format: str = "pretty",
    emoji: bool = True,
    out: Optional[TextIO] = None,
) -> int:
    """Run a check, writing results to ``out`` (stdout by default) as they arrive.

    Returns:
        Number of entries written
    """
    out = out or sys.stdout
    if output_format == "pretty":
        print(f"Navigating to {url} ...", file=out)

    written = 0
    last_category = None
    checker = check_links(
        url, config, session_factory=lambda _: PlaywrightSession(browser_config)
    )
    async with checker as entries:
        async for entry in entries:
            if output_format == "json":
                print(json.dumps(entry.to_dict(), ensure_ascii=False), file=out, flush=True)
            else:
                if entry.category != last_category:
                    last_category = entry.category
                    print(format_heading(entry.category), file=out)
                print(format_entry(entry, emoji=emoji), file=out, flush=True)
            written += 1

    return written


def build_config(args: argparse.Namespace) -> CheckerConfig:
    """Layer command-line flags over environment configuration.

    Raises:
        ConfigurationError: If the combined options are invalid
    """
    options: dict[str, Any] = env_options()

    for flag, field_name in (
        ("no_same_page", "same_page"),
        ("no_same_site", "same_site"),
        ("no_off_site", "off_site"),
        ("no_fragments", "fragments"),
    ):
        if getattr(args, flag):
            options[field_name] = False

    if args.cache:
        options["cache_enabled"] = True
    if args.concurrency is not None:
        options["concurrency"] = args.concurrency
    if args.bad_content is not None:
        options["bad_content"] = args.bad_content
    if args.timeout is not None:
        options.setdefault("navigation", {})["timeout_ms"] = args.timeout
    if args.wait_until is not None:
        options.setdefault("navigation", {})["wait_until"] = args.wait_until

    return resolve_config(options)


def build_browser_config(args: argparse.Namespace) -> BrowserConfig:
    """Browser launch settings from command-line flags."""
    base = CI_CONFIG if args.ci else BrowserConfig()
    return BrowserConfig(
        **{**base.model_dump(), "browser_type": args.browser, "headless": not args.headed}
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linkcheck",
        description="Link checker - Verify that every link on a page points somewhere real",
    )
    parser.add_argument("url", help="Page whose links should be checked")

    # What to check
    parser.add_argument(
        "--no-same-page",
        action="store_true",
        help="Skip fragment links to the same page",
    )
    parser.add_argument(
        "--no-same-site",
        action="store_true",
        help="Skip links on the same origin",
    )
    parser.add_argument(
        "--no-off-site",
        action="store_true",
        help="Skip links to other sites",
    )
    parser.add_argument(
        "--no-fragments",
        action="store_true",
        help="Do not check fragments on other pages",
    )
    parser.add_argument(
        "--cache",
        action="store_true",
        help="Allow the browser to cache scanned pages",
    )
    parser.add_argument(
        "--concurrency",
        "-c",
        type=int,
        help="How many links to check at a time, 1-100 (default: 5)",
    )
    parser.add_argument(
        "--bad-content",
        help="Fail a link if this pattern is found in its page body",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        help="Navigation timeout in milliseconds (default: 20000)",
    )
    parser.add_argument(
        "--wait-until",
        choices=sorted(WAIT_UNTIL_EVENTS),
        help="When to consider navigation complete (default: load)",
    )

    # Browser
    parser.add_argument(
        "--browser",
        choices=["chromium", "firefox", "webkit"],
        default="chromium",
        help="Browser engine (default: chromium)",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window",
    )
    parser.add_argument(
        "--ci",
        action="store_true",
        help="Use browser flags suited to containers and CI runners",
    )

    # Output
    parser.add_argument(
        "--format",
        "-o",
        dest="output_format",
        choices=["pretty", "json"],
        default="pretty",
        help="Output format (default: pretty)",
    )
    parser.add_argument(
        "--no-emoji",
        action="store_true",
        help="Use plain text markers in pretty output",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        config = build_config(args)
        asyncio.run(
            run_check(
                args.url,
                config,
                build_browser_config(args),
                output_format=args.output_format,
                emoji=not args.no_emoji,
            )
        )
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except Exception as e:
        logger.debug("Link check failed", exc_info=True)
        print(str(e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
