"""Text report rendering for PR pickup metrics."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from .business_calendar import BusinessCalendar
from .models import DurationSummary, NumberSummary, PullRequestMetrics
from .stats import (
    format_age,
    format_duration,
    format_net_lines,
    format_number,
    summarize_durations,
    summarize_numbers,
)

REPORT_WIDTH = 86


def _truncate(value: str, length: int) -> str:
    if len(value) <= length:
        return value
    return value[: length - 1] + "…"


def _section_title(title: str) -> List[str]:
    return ["-" * REPORT_WIDTH, f"  {title}", "-" * REPORT_WIDTH]


def _time_period(
    business_days: Optional[int],
    now: datetime,
    business_calendar: BusinessCalendar,
) -> str:
    if not business_days:
        return "all time"

    start = business_calendar.business_days_cutoff(business_days, now=now)
    return (
        f"Last {business_days} business days "
        f"({start.strftime('%b')} {start.day} - {now.strftime('%b')} {now.day})"
    )


def _excluded_text(excluded: Sequence[PullRequestMetrics]) -> str:
    awaiting = sum(1 for metric in excluded if metric.merged_at is None)
    merged = len(excluded) - awaiting

    parts = []
    if awaiting:
        parts.append(f"{awaiting} awaiting pickup")
    if merged:
        parts.append(f"{merged} merged without pickup")

    return ", " + ", ".join(parts) if parts else ""


def _duration_lines(label: str, summary: Optional[DurationSummary]) -> List[str]:
    if summary is None:
        return [f"  {label}: none"]

    name = label.lower()
    lines = [
        f"  Average {name}:  {format_duration(summary.mean)}",
        f"  Median {name}:   {format_duration(summary.median)}",
    ]
    if summary.p95 is not None:
        lines.append(f"  p95 {name}:      {format_duration(summary.p95)}")
    lines.append(f"  Fastest {name}: {format_duration(summary.minimum)}")
    lines.append(f"  Slowest {name}: {format_duration(summary.maximum)}")
    return lines


def _number_lines(label: str, summary: Optional[NumberSummary]) -> List[str]:
    if summary is None:
        return [f"  {label}: none"]

    name = label.lower()
    lines = [
        f"  Average {name}:  {format_number(summary.mean)}",
        f"  Median {name}:   {format_number(summary.median)}",
    ]
    if summary.p95 is not None:
        lines.append(f"  p95 {name}:      {format_number(summary.p95)}")
    lines.append(f"  Min {name}:      {format_number(summary.minimum)}")
    lines.append(f"  Max {name}:      {format_number(summary.maximum)}")
    return lines


def _individual_rows(metrics: Sequence[PullRequestMetrics]) -> List[str]:
    header = "  ".join(
        ["PR".ljust(8), "PICKUP".ljust(12), "MERGE".ljust(12), "LINES".ljust(10), "AUTHOR".ljust(16), "TITLE"]
    )
    rows = [f"  {header}"]

    for metric in sorted(metrics, key=lambda m: -(m.pickup_time_seconds or 0)):
        row = "  ".join(
            [
                f"#{metric.number}".ljust(8),
                format_duration(metric.pickup_time_seconds).ljust(12),
                format_duration(metric.merge_time_seconds).ljust(12),
                format_net_lines(metric.net_lines).ljust(10),
                (metric.author or "unknown").ljust(16),
                _truncate(metric.title, 40),
            ]
        )
        rows.append(f"  {row}")
    return rows


def _excluded_rows(metrics: Sequence[PullRequestMetrics], now: datetime) -> List[str]:
    header = "  ".join(["PR".ljust(10), "AGE".ljust(14), "AUTHOR".ljust(20), "TITLE"])
    rows = [f"  {header}"]

    for metric in metrics:
        age = format_age(metric.created_at, now) if metric.created_at else "unknown"
        row = "  ".join(
            [
                f"#{metric.number}".ljust(10),
                age.ljust(14),
                (metric.author or "unknown").ljust(20),
                _truncate(metric.title, 50),
            ]
        )
        rows.append(f"  {row}")
    return rows


def generate_report(
    metrics: Sequence[PullRequestMetrics],
    repo: str,
    business_days: Optional[int] = None,
    detailed: bool = False,
    now: Optional[datetime] = None,
    business_calendar: Optional[BusinessCalendar] = None,
) -> str:
    """Generate a human-readable pickup report for a repository.

    Statistics are computed over pull requests that have been picked up; the
    rest are counted in the summary title and, with ``detailed``, listed in
    an "EXCLUDED PRs" table.

    Args:
        metrics: Per-PR metrics records.
        repo: Repository display name (``owner/name``).
        business_days: Size of the reporting window, or ``None`` for all time.
        detailed: Whether to include per-PR tables.
        now: Reference time for the header and ages; defaults to local now.
        business_calendar: Calendar used for the header date range.

    Returns:
        Formatted multi-line text report.
    """
    now = now or datetime.now().astimezone()
    business_calendar = business_calendar or BusinessCalendar()

    if not metrics:
        if business_days:
            return "\n".join(
                [
                    f"No pull requests found for {repo} in the last {business_days} business days.",
                    f"To look further back, use: prpickup --business-days N {repo}",
                ]
            )
        return f"No pull requests found for {repo}."

    picked_up = [metric for metric in metrics if metric.has_pickup]
    excluded = [metric for metric in metrics if not metric.has_pickup]

    lines = [
        "=" * REPORT_WIDTH,
        f"  PR Pickup Report | {_time_period(business_days, now, business_calendar)}",
        f"  {repo}",
        "=" * REPORT_WIDTH,
        "",
        "  Pickup time:    Time from PR creation to first reviewer response "
        "(business days, excl. US holidays)",
        "  Time to merge:  Time from PR creation to merge (business days, excl. US holidays)",
        "  PR size:        Net lines changed (additions - deletions)",
        "  Files changed:  Number of files modified in the PR",
        "",
    ]

    lines.extend(
        _section_title(f"SUMMARY ({len(picked_up)} PRs with pickup{_excluded_text(excluded)})")
    )
    lines.append("")
    lines.extend(
        _duration_lines("Pickup time", summarize_durations([m.pickup_time_seconds for m in picked_up]))
    )
    lines.append("")
    lines.extend(
        _duration_lines("Time to merge", summarize_durations([m.merge_time_seconds for m in picked_up]))
    )
    lines.append("")
    lines.extend(
        _number_lines("PR size (net lines)", summarize_numbers([m.net_lines for m in picked_up]))
    )
    lines.append("")
    lines.extend(
        _number_lines("Files changed", summarize_numbers([m.changed_files for m in picked_up]))
    )

    if detailed:
        if picked_up:
            lines.append("")
            lines.extend(_section_title("INDIVIDUAL PRs (slowest pickup first)"))
            lines.append("")
            lines.extend(_individual_rows(picked_up))
        if excluded:
            lines.append("")
            lines.extend(_section_title("EXCLUDED PRs (no pickup yet)"))
            lines.append("")
            lines.extend(_excluded_rows(excluded, now))

    return "\n".join(lines)
