"""Application entry point for the PR pickup report."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .business_calendar import BusinessCalendar
from .cli import parse_args
from .config import load_config
from .errors import ApiError, AuthenticationError, ConfigurationError
from .gh_client import GhCliClient
from .metrics import collect_metrics, exclude_closed_unmerged, filter_created_since
from .report import generate_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNEXPECTED = 1
EXIT_CONFIGURATION = 2
EXIT_AUTHENTICATION = 3
EXIT_API = 4


def configure_logging(args: argparse.Namespace) -> None:
    """Send log records to stderr at a level chosen by ``--verbose``/``--quiet``."""
    level = logging.INFO
    if getattr(args, "verbose", False):
        level = logging.DEBUG
    elif getattr(args, "quiet", False):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def orchestrate_report(argv: Optional[Sequence[str]] = None) -> int:
    """Run the full report workflow and return a process exit code.

    Exit codes:
        0: success
        1: unexpected error
        2: configuration error
        3: GitHub CLI authentication error
        4: GitHub CLI / API error
    """
    try:
        args = parse_args(argv)
        configure_logging(args)

        config = load_config(
            repo=args.repo,
            state=args.state,
            limit=args.limit,
            gh_command=args.gh_command,
            business_days=args.business_days,
            details=args.details,
        )
        gh_client = GhCliClient(config=config)

        repo = config.repo or gh_client.detect_repository()
        if not repo:
            raise ConfigurationError(
                "owner/repo is required when not run inside a GitHub repository checkout."
            )

        business_calendar = BusinessCalendar()

        logger.info("Fetching pull requests from %s...", repo)
        pull_requests = gh_client.list_pull_requests(
            repo,
            state=config.state,
            limit=config.fetch_limit,
        )

        logger.info("Filtering %d pull requests...", len(pull_requests))
        pull_requests = exclude_closed_unmerged(pull_requests)
        cutoff = business_calendar.business_days_cutoff(config.business_days)
        pull_requests = filter_created_since(pull_requests, cutoff)

        logger.info("Calculating metrics for %d pull requests...", len(pull_requests))
        metrics = collect_metrics(
            gh_client,
            repo,
            pull_requests,
            ignored_actors=config.ignored_actors,
            business_calendar=business_calendar,
        )

        print(
            generate_report(
                metrics,
                repo=repo,
                business_days=config.business_days,
                detailed=config.details,
                business_calendar=business_calendar,
            )
        )
        return EXIT_OK
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_CONFIGURATION
    except AuthenticationError as exc:
        logger.error("Authentication error: %s", exc)
        return EXIT_AUTHENTICATION
    except ApiError as exc:
        logger.error("GitHub API error: %s", exc)
        return EXIT_API
    except Exception:
        logger.exception("Unexpected error while generating the report")
        return EXIT_UNEXPECTED


def main() -> None:
    """Console script entry point."""
    raise SystemExit(orchestrate_report())


if __name__ == "__main__":
    main()
