"""Resolution of the first human response ("pickup") to a pull request.

Three activity feeds are considered: submitted reviews, inline review
comments, and conversation (issue) comments. Each feed is reduced to its
earliest qualifying event, then the earliest of those wins. Events by the
pull request author or by known bot and automation accounts never qualify.
"""

from __future__ import annotations

from datetime import datetime
from typing import AbstractSet, FrozenSet, Iterable, List, Optional

from .business_calendar import parse_time
from .models import ActivityEvent, PickupEvent

# Normalized (lower-case, trimmed) identities that never count as a pickup.
IGNORED_ACTORS: FrozenSet[str] = frozenset(
    [
        # CI and workflow automation
        "github-actions",
        "github-actions[bot]",
        "azure-pipelines[bot]",
        "circleci",
        "circleci[bot]",
        "travis-ci",
        "travis-ci[bot]",
        "buildkite[bot]",
        "jenkins",
        "jenkins-bot",
        # Dependency updates
        "dependabot",
        "dependabot[bot]",
        "dependabot-preview[bot]",
        "renovate",
        "renovate[bot]",
        "renovate-bot",
        "greenkeeper[bot]",
        "snyk-bot",
        "pyup-bot",
        # AI code review assistants
        "copilot",
        "copilot[bot]",
        "copilot-bot",
        "copilot-pull-request-reviewer",
        "copilot-pull-request-reviewer[bot]",
        "github-copilot",
        "github-copilot[bot]",
        "coderabbitai",
        "coderabbitai[bot]",
        "sourcery-ai[bot]",
        "gemini-code-assist[bot]",
        "cursor[bot]",
        "ellipsis-dev[bot]",
        "korbit-ai[bot]",
        "qodo-merge-pro[bot]",
        "codium-pr-agent[bot]",
        # Security and code quality
        "codecov",
        "codecov[bot]",
        "codecov-commenter",
        "sonarcloud[bot]",
        "sonarqubecloud[bot]",
        "codeclimate[bot]",
        "codacy-production[bot]",
        "deepsource-autofix[bot]",
        "deepsource-io[bot]",
        "gitguardian[bot]",
        "socket-security[bot]",
        "snyk[bot]",
        "lgtm-com[bot]",
        "pre-commit-ci[bot]",
        # Deployment, release and merge automation
        "vercel",
        "vercel[bot]",
        "netlify",
        "netlify[bot]",
        "railway-app[bot]",
        "mergify",
        "mergify[bot]",
        "kodiakhq[bot]",
        "bors[bot]",
        "graphite-app[bot]",
        "changeset-bot[bot]",
        "release-please[bot]",
        "semantic-release-bot",
        "allcontributors[bot]",
        "stale[bot]",
        "imgbot[bot]",
        "linear[bot]",
    ]
)


def normalize_actor(value: object) -> str:
    """Normalize an identity for comparison: lower-case and trimmed."""
    if value is None:
        return ""
    return str(value).strip().lower()


def to_candidate(
    event: ActivityEvent,
    author: Optional[str],
    ignored_actors: AbstractSet[str] = IGNORED_ACTORS,
) -> Optional[PickupEvent]:
    """Convert an activity event into a pickup candidate, or ``None`` if it does not qualify."""
    if event.actor is None:
        return None

    actor = normalize_actor(event.actor)
    if actor == normalize_actor(author):
        return None
    if actor in ignored_actors:
        return None

    timestamp = parse_time(event.timestamp)
    if timestamp is None:
        return None

    return PickupEvent(actor=event.actor, timestamp=timestamp, source=event.source)


def earliest_candidate(candidates: Iterable[Optional[PickupEvent]]) -> Optional[PickupEvent]:
    """Return the earliest non-``None`` candidate; the first one wins ties."""
    earliest: Optional[PickupEvent] = None
    for candidate in candidates:
        if candidate is None:
            continue
        if earliest is None or candidate.timestamp < earliest.timestamp:
            earliest = candidate
    return earliest


def resolve_pickup(
    author: Optional[str],
    created_at: Optional[datetime],
    review_events: Iterable[ActivityEvent],
    review_comment_events: Iterable[ActivityEvent],
    issue_comment_events: Iterable[ActivityEvent],
    ignored_actors: AbstractSet[str] = IGNORED_ACTORS,
) -> Optional[PickupEvent]:
    """Find the earliest non-author, non-bot response across all three feeds.

    Returns ``None`` when nobody has picked the pull request up yet, or when
    its creation time is unknown.
    """
    per_source: List[Optional[PickupEvent]] = [
        earliest_candidate(to_candidate(event, author, ignored_actors) for event in events)
        for events in (review_events, review_comment_events, issue_comment_events)
    ]

    if created_at is None:
        return None

    return earliest_candidate(per_source)
