"""Statistics and formatting helpers for PR pickup reporting.

This module provides utilities for:
- Computing nearest-rank percentiles from pre-sorted samples.
- Aggregating summary statistics (mean, median, p95, min, max).
- Formatting second-based durations compactly (``2d 3h``, ``4h 30m``, ``15m``).
- Formatting counts and relative ages for report tables.
"""

from __future__ import annotations

import math
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence, TypeVar, Union

from .models import DurationSummary, NumberSummary

Number = Union[int, float]
N = TypeVar("N", int, float)

MIN_SAMPLES_FOR_P95 = 50
MISSING = "—"


def calculate_percentile(sorted_values: Sequence[N], p: float) -> Optional[N]:
    """Calculate a percentile using the nearest-rank method.

    The input sequence is expected to already be sorted in ascending order.
    No interpolation is performed, so the result is always one of the samples:
    ``rank = ceil(p / 100 * count)`` and the value at ``min(rank - 1, count - 1)``
    is returned.

    Args:
        sorted_values: Sorted numeric samples.
        p: Percentile in the inclusive range ``[0, 100]``.

    Returns:
        The percentile sample, or ``None`` when input is empty.

    Raises:
        ValueError: If ``p`` is outside ``[0, 100]``.
    """
    if not 0 <= p <= 100:
        raise ValueError("Percentile 'p' must be in the range [0, 100].")

    if not sorted_values:
        return None

    count = len(sorted_values)
    rank = math.ceil(p / 100.0 * count)
    index = max(0, min(rank - 1, count - 1))
    return sorted_values[index]


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero instead of Python's banker's rounding."""
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def summarize_durations(samples: Sequence[Optional[int]]) -> Optional[DurationSummary]:
    """Summarize duration samples in seconds.

    ``None`` samples are ignored. Returns ``None`` when no samples remain.
    """
    values: List[int] = sorted(sample for sample in samples if sample is not None)
    if not values:
        return None

    p95 = calculate_percentile(values, 95) if len(values) >= MIN_SAMPLES_FOR_P95 else None
    return DurationSummary(
        count=len(values),
        mean=int(round_half_up(sum(values) / len(values))),
        median=calculate_percentile(values, 50),
        p95=p95,
        minimum=values[0],
        maximum=values[-1],
    )


def summarize_numbers(samples: Sequence[Number]) -> Optional[NumberSummary]:
    """Summarize count samples such as net lines or files changed."""
    values = sorted(samples)
    if not values:
        return None

    p95 = calculate_percentile(values, 95) if len(values) >= MIN_SAMPLES_FOR_P95 else None
    return NumberSummary(
        count=len(values),
        mean=round_half_up(sum(values) / len(values), 1),
        median=calculate_percentile(values, 50),
        p95=p95,
        minimum=values[0],
        maximum=values[-1],
    )


def format_duration(seconds: Optional[Number]) -> str:
    """Format seconds compactly as days/hours, hours/minutes, or minutes.

    Args:
        seconds: Duration in seconds.

    Returns:
        ``"—"`` when ``seconds`` is ``None``; ``"0m"`` for non-positive values;
        otherwise e.g. ``"2d 3h"``, ``"4h 30m"`` or ``"15m"``.
    """
    if seconds is None:
        return MISSING

    seconds = int(seconds)
    if seconds <= 0:
        return "0m"

    total_minutes = int(round_half_up(seconds / 60.0))
    minutes = total_minutes % 60
    total_hours = total_minutes // 60
    hours = total_hours % 24
    days = total_hours // 24

    if days > 0:
        return f"{days}d {hours}h" if hours else f"{days}d"
    if total_hours > 0:
        return f"{total_hours}h {minutes}m" if minutes else f"{total_hours}h"
    return f"{minutes}m"


def format_number(value: Optional[Number]) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and not value.is_integer():
        return str(round_half_up(value, 1))
    return str(int(value))


def format_net_lines(net_lines: int) -> str:
    if net_lines > 0:
        return f"+{net_lines}"
    return str(net_lines)


def format_age(created_at: datetime, now: datetime) -> str:
    """Format the wall-clock age of ``created_at`` relative to ``now``."""
    seconds = (now - created_at).total_seconds()
    if seconds < 60:
        return f"{int(seconds)}s ago"

    minutes = seconds / 60
    if minutes < 60:
        return f"{int(round_half_up(minutes))}m ago"

    hours = minutes / 60
    if hours < 48:
        return f"{int(round_half_up(hours))}h ago"

    return f"{int(round_half_up(hours / 24))}d ago"
