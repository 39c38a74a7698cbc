"""Domain models for pull request pickup metrics.

These dataclasses intentionally model only the subset of GitHub payload fields
that are required for pickup and merge time computation. Raw timestamp and
size fields are kept as received; parsing and coercion happen in the metrics
layer so malformed values degrade to "unknown" instead of failing a fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

SOURCE_REVIEW = "review"
SOURCE_REVIEW_COMMENT = "review_comment"
SOURCE_ISSUE_COMMENT = "issue_comment"


@dataclass(frozen=True)
class PullRequestRef:
    """Represents one pull request as listed by the GitHub CLI."""

    number: int
    title: str
    author: Optional[str]
    created_at: Optional[str]
    merged_at: Optional[str]
    state: str = "open"
    additions: Any = 0
    deletions: Any = 0
    changed_files: Any = 0

    @property
    def is_closed_unmerged(self) -> bool:
        return self.state == "closed" and not self.merged_at


@dataclass(frozen=True)
class ActivityEvent:
    """Represents one review, review comment, or issue comment on a pull request."""

    actor: Optional[str]
    timestamp: Optional[str]
    source: str


@dataclass(frozen=True)
class PickupEvent:
    """Represents the earliest qualifying human response to a pull request."""

    actor: str
    timestamp: datetime
    source: str


@dataclass(frozen=True)
class PullRequestMetrics:
    """Represents the per-PR metrics consumed by reporting."""

    number: int
    title: str
    author: Optional[str]
    created_at: Optional[datetime]
    merged_at: Optional[datetime]
    additions: int
    deletions: int
    changed_files: int
    pickup_time_seconds: Optional[int] = None
    merge_time_seconds: Optional[int] = None
    pickup_actor: Optional[str] = None
    pickup_at: Optional[datetime] = None
    pickup_source: Optional[str] = None

    @property
    def has_pickup(self) -> bool:
        return self.pickup_time_seconds is not None

    @property
    def net_lines(self) -> int:
        return self.additions - self.deletions


@dataclass(frozen=True)
class DurationSummary:
    """Aggregated statistics for a set of durations in seconds."""

    count: int
    mean: int
    median: int
    p95: Optional[int]
    minimum: int
    maximum: int


@dataclass(frozen=True)
class NumberSummary:
    """Aggregated statistics for a set of counts such as lines or files."""

    count: int
    mean: float
    median: float
    p95: Optional[float]
    minimum: float
    maximum: float
