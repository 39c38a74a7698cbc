"""Command-line argument parsing for the PR pickup report."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .config import DEFAULT_BUSINESS_DAYS, DEFAULT_STATE, VALID_STATES


def _positive_int(value: str) -> int:
    """Parse and validate a positive integer CLI value.

    Args:
        value: Raw command-line argument value.

    Returns:
        The validated positive integer.

    Raises:
        argparse.ArgumentTypeError: If value is not a positive integer.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than 0")

    return parsed


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments for the pickup report.

    Returns:
        Parsed CLI arguments containing the repository, state filter, fetch
        limit, ``gh`` path, business-day window, and output options.
    """
    parser = argparse.ArgumentParser(
        prog="prpickup",
        description=(
            "Report pull-request pickup time and merge time for a GitHub "
            "repository, measured in business time (excluding weekends and US holidays)."
        ),
    )

    parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Repository as owner/repo (default: detected from the current directory).",
    )
    parser.add_argument(
        "-s",
        "--state",
        choices=VALID_STATES,
        default=DEFAULT_STATE,
        help=f"Pull request state to fetch (default: {DEFAULT_STATE}).",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=_positive_int,
        default=None,
        help="Maximum number of PRs to fetch (default: scaled from --business-days).",
    )
    parser.add_argument(
        "--gh-command",
        default=None,
        help="Path to the gh executable (default: gh).",
    )
    parser.add_argument(
        "--business-days",
        type=_positive_int,
        default=DEFAULT_BUSINESS_DAYS,
        help=f"Report PRs created in the last N business days (default: {DEFAULT_BUSINESS_DAYS}).",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Include per-PR tables in the report.",
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr.",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only log warnings and errors to stderr.",
    )

    return parser.parse_args(argv)
