"""Per-pull-request metric extraction.

This module computes PR-level measurements for the report:
- Pickup time: business seconds from creation to the first qualifying human
  response (see :mod:`prpickup.pickup`).
- Merge time: business seconds from creation to merge.
- Size: additions, deletions and changed files.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import AbstractSet, Any, List, Optional

from .business_calendar import BusinessCalendar, parse_time
from .gh_client import GhCliClient
from .models import PickupEvent, PullRequestMetrics, PullRequestRef
from .pickup import IGNORED_ACTORS, resolve_pickup

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def compute_metrics(
    pull_request: PullRequestRef,
    created_at: Optional[datetime],
    merged_at: Optional[datetime],
    pickup_event: Optional[PickupEvent],
    business_calendar: Optional[BusinessCalendar] = None,
) -> PullRequestMetrics:
    """Assemble the metrics record for one pull request.

    Business logic:
    - Pickup time is measured from ``created_at`` to the pickup timestamp.
    - Merge time is measured from ``created_at`` to ``merged_at``.
    - Both use business seconds and are ``None`` when an instant is unknown.
    - Size fields default to ``0`` when missing or non-numeric.
    """
    business_calendar = business_calendar or BusinessCalendar()

    pickup_seconds: Optional[int] = None
    if pickup_event is not None and created_at is not None:
        pickup_seconds = business_calendar.business_seconds_between(
            created_at, pickup_event.timestamp
        )

    merge_seconds: Optional[int] = None
    if created_at is not None and merged_at is not None:
        merge_seconds = business_calendar.business_seconds_between(created_at, merged_at)

    return PullRequestMetrics(
        number=pull_request.number,
        title=pull_request.title,
        author=pull_request.author,
        created_at=created_at,
        merged_at=merged_at,
        additions=_to_int(pull_request.additions),
        deletions=_to_int(pull_request.deletions),
        changed_files=_to_int(pull_request.changed_files),
        pickup_time_seconds=pickup_seconds,
        merge_time_seconds=merge_seconds,
        pickup_actor=pickup_event.actor if pickup_event else None,
        pickup_at=pickup_event.timestamp if pickup_event else None,
        pickup_source=pickup_event.source if pickup_event else None,
    )


def metrics_for_pull_request(
    gh_client: GhCliClient,
    repo: str,
    pull_request: PullRequestRef,
    ignored_actors: AbstractSet[str] = IGNORED_ACTORS,
    business_calendar: Optional[BusinessCalendar] = None,
) -> PullRequestMetrics:
    """Fetch activity for one pull request and compute its metrics."""
    created_at = parse_time(pull_request.created_at)
    merged_at = parse_time(pull_request.merged_at)

    pickup_event = resolve_pickup(
        author=pull_request.author,
        created_at=created_at,
        review_events=gh_client.list_reviews(repo, pull_request.number),
        review_comment_events=gh_client.list_review_comments(repo, pull_request.number),
        issue_comment_events=gh_client.list_issue_comments(repo, pull_request.number),
        ignored_actors=ignored_actors,
    )

    if pickup_event is None:
        logger.debug("No pickup found", extra={"pr_number": pull_request.number})

    return compute_metrics(
        pull_request,
        created_at=created_at,
        merged_at=merged_at,
        pickup_event=pickup_event,
        business_calendar=business_calendar,
    )


def exclude_closed_unmerged(pull_requests: List[PullRequestRef]) -> List[PullRequestRef]:
    """Drop pull requests that were closed without being merged."""
    return [pr for pr in pull_requests if not pr.is_closed_unmerged]


def filter_created_since(
    pull_requests: List[PullRequestRef],
    cutoff: Optional[datetime],
) -> List[PullRequestRef]:
    """Keep pull requests created at or after ``cutoff``.

    Pull requests with an unknown creation time are dropped. A ``None`` cutoff
    keeps everything.
    """
    if cutoff is None:
        return list(pull_requests)

    selected: List[PullRequestRef] = []
    for pr in pull_requests:
        created_at = parse_time(pr.created_at)
        if created_at is None:
            logger.debug("Skipping PR with unparseable createdAt", extra={"pr_number": pr.number})
            continue
        if created_at >= cutoff:
            selected.append(pr)
    return selected


def collect_metrics(
    gh_client: GhCliClient,
    repo: str,
    pull_requests: List[PullRequestRef],
    ignored_actors: AbstractSet[str] = IGNORED_ACTORS,
    business_calendar: Optional[BusinessCalendar] = None,
) -> List[PullRequestMetrics]:
    """Compute metrics for every pull request, in order.

    One calendar instance is shared so holiday tables are built once per year.
    """
    business_calendar = business_calendar or BusinessCalendar()
    total = len(pull_requests)
    results: List[PullRequestMetrics] = []

    for index, pr in enumerate(pull_requests, start=1):
        logger.info("Analyzing PR #%s (%d/%d)", pr.number, index, total)
        results.append(
            metrics_for_pull_request(
                gh_client,
                repo,
                pr,
                ignored_actors=ignored_actors,
                business_calendar=business_calendar,
            )
        )

    with_pickup = sum(1 for metric in results if metric.has_pickup)
    logger.info(
        "Collected PR metrics",
        extra={
            "repo": repo,
            "prs_total": total,
            "prs_with_pickup": with_pickup,
            "prs_without_pickup": total - with_pickup,
        },
    )

    return results
