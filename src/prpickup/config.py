"""Configuration parsing and validation for the PR pickup report."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .errors import ConfigurationError
from .pickup import IGNORED_ACTORS, normalize_actor

VALID_STATES = ("open", "closed", "all")
DEFAULT_STATE = "all"
DEFAULT_BUSINESS_DAYS = 14
DEFAULT_GH_COMMAND = "gh"
PRS_PER_BUSINESS_DAY = 5
MAX_AUTO_LIMIT = 200

GH_COMMAND_ENV = "PRPICKUP_GH_COMMAND"
IGNORED_ACTORS_ENV = "PRPICKUP_IGNORED_ACTORS"


@dataclass(frozen=True)
class Config:
    """Validated runtime settings used by the report."""

    repo: Optional[str]
    state: str = DEFAULT_STATE
    limit: Optional[int] = None
    gh_command: str = DEFAULT_GH_COMMAND
    business_days: int = DEFAULT_BUSINESS_DAYS
    details: bool = False
    ignored_actors: FrozenSet[str] = field(default=IGNORED_ACTORS)

    @property
    def fetch_limit(self) -> int:
        """Number of pull requests to request from GitHub.

        An explicit ``limit`` wins; otherwise the limit scales with the
        business-day window and is capped at ``MAX_AUTO_LIMIT``.
        """
        if self.limit is not None:
            return self.limit
        return min(self.business_days * PRS_PER_BUSINESS_DAY, MAX_AUTO_LIMIT)


def _extra_ignored_actors() -> FrozenSet[str]:
    raw = os.getenv(IGNORED_ACTORS_ENV, "")
    return frozenset(
        normalize_actor(actor) for actor in raw.split(",") if normalize_actor(actor)
    )


def load_config(
    repo: Optional[str],
    state: str = DEFAULT_STATE,
    limit: Optional[int] = None,
    gh_command: Optional[str] = None,
    business_days: int = DEFAULT_BUSINESS_DAYS,
    details: bool = False,
) -> Config:
    """Build and validate application configuration.

    Args:
        repo: Repository as ``owner/name``, or ``None`` to detect it with ``gh``.
        state: Pull request state filter: ``open``, ``closed`` or ``all``.
        limit: Maximum number of pull requests to fetch, or ``None`` for auto.
        gh_command: Path to the ``gh`` executable; falls back to the
            ``PRPICKUP_GH_COMMAND`` environment variable, then ``gh``.
        business_days: Positive number of business days of history to report.
        details: Whether to render per-PR tables.

    Returns:
        A validated ``Config`` instance.

    Raises:
        ConfigurationError: If any value is out of range or malformed.
    """
    if repo is not None:
        repo = repo.strip()
        owner, _, name = repo.partition("/")
        if not owner or not name or "/" in name:
            raise ConfigurationError(
                f"Invalid repository '{repo}': expected the form 'owner/repo'."
            )

    if state not in VALID_STATES:
        raise ConfigurationError("Invalid value for 'state': expected open, closed, or all.")

    if limit is not None and limit <= 0:
        raise ConfigurationError("Invalid value for 'limit': expected an integer greater than 0.")

    if business_days <= 0:
        raise ConfigurationError(
            "Invalid value for 'business-days': expected an integer greater than 0."
        )

    command = (gh_command or os.getenv(GH_COMMAND_ENV, "")).strip() or DEFAULT_GH_COMMAND

    return Config(
        repo=repo,
        state=state,
        limit=limit,
        gh_command=command,
        business_days=business_days,
        details=details,
        ignored_actors=IGNORED_ACTORS | _extra_ignored_actors(),
    )
