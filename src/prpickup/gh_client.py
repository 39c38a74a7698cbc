"""GitHub CLI client for pull request activity retrieval."""

from __future__ import annotations

import json
import logging
import subprocess
import time
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlencode

from .config import Config
from .errors import ApiError, AuthenticationError, ConfigurationError
from .models import (
    SOURCE_ISSUE_COMMENT,
    SOURCE_REVIEW,
    SOURCE_REVIEW_COMMENT,
    ActivityEvent,
    PullRequestRef,
)

logger = logging.getLogger(__name__)

PR_LIST_FIELDS = (
    "number",
    "title",
    "author",
    "state",
    "createdAt",
    "mergedAt",
    "additions",
    "deletions",
    "changedFiles",
)

_NOT_FOUND_MESSAGE = (
    "gh CLI not found. Install it from https://cli.github.com and run `gh auth login`."
)


class GhCliClient:
    """Small, typed client that shells out to the GitHub CLI."""

    _PAGE_SIZE = 100
    _MAX_RETRIES = 3
    _MAX_BACKOFF_SECONDS = 10

    def __init__(self, config: Config, timeout_seconds: int = 60) -> None:
        """Initialize the client and verify ``gh`` is installed and authenticated.

        Args:
            config: Validated runtime configuration including the ``gh`` path.
            timeout_seconds: Per-command timeout in seconds.

        Raises:
            ConfigurationError: If the ``gh`` executable cannot be found.
            AuthenticationError: If ``gh auth status`` reports no session.
        """
        self._command = config.gh_command
        self._timeout_seconds = timeout_seconds
        self._verify_cli_available()

    def _execute(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        """Run ``gh`` with retry on timeouts.

        Raises:
            ConfigurationError: If the executable is missing.
            ApiError: If every attempt times out.
        """
        argv = [self._command, *args]
        last_error: Optional[Exception] = None

        for attempt in range(1, self._MAX_RETRIES + 1):
            try:
                return subprocess.run(
                    argv,
                    capture_output=True,
                    text=True,
                    timeout=self._timeout_seconds,
                    check=False,
                )
            except FileNotFoundError as exc:
                raise ConfigurationError(_NOT_FOUND_MESSAGE) from exc
            except subprocess.TimeoutExpired as exc:
                last_error = exc
                logger.debug(
                    "gh command timed out",
                    extra={"gh_args": list(args), "attempt": attempt},
                )
                if attempt < self._MAX_RETRIES:
                    time.sleep(min(self._MAX_BACKOFF_SECONDS, 2 ** (attempt - 1)))

        raise ApiError(
            f"gh {' '.join(args)} timed out after {self._MAX_RETRIES} attempts"
        ) from last_error

    def _run_json(self, args: Sequence[str]) -> Any:
        """Run ``gh`` and decode its JSON output.

        Blank output decodes to ``None``.

        Raises:
            ApiError: If the command exits non-zero or prints invalid JSON.
        """
        result = self._execute(args)

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            message = stderr or (result.stdout or "").strip()
            raise ApiError(f"gh {' '.join(args)} failed: {message}")

        stdout = result.stdout or ""
        if not stdout.strip():
            return None

        try:
            return json.loads(stdout)
        except ValueError as exc:
            raise ApiError(f"Failed to parse gh output for 'gh {' '.join(args)}': {exc}") from exc

    def _verify_cli_available(self) -> None:
        result = self._execute(["auth", "status"])
        if result.returncode != 0:
            raise AuthenticationError("gh CLI not authenticated. Run `gh auth login` first.")

    def _api_list(self, path: str) -> List[Dict[str, Any]]:
        """Fetch every page of a ``gh api`` list endpoint.

        Pages are requested with ``per_page``/``page`` until a short page is returned.
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            query = {"per_page": self._PAGE_SIZE, "page": page}

            payload = self._run_json(["api", f"{path}?{urlencode(query)}"])
            if payload is None:
                payload = []
            if not isinstance(payload, list):
                raise ApiError(f"gh api {path} returned unexpected payload shape")

            items.extend(item for item in payload if isinstance(item, dict))

            if len(payload) < self._PAGE_SIZE:
                break

            page += 1

        return items

    def detect_repository(self) -> Optional[str]:
        """Return ``owner/name`` of the repository in the current directory, if any."""
        try:
            result = self._execute(["repo", "view", "--json", "nameWithOwner"])
        except ApiError:
            return None

        if result.returncode != 0:
            logger.debug("gh repo view failed", extra={"stderr": (result.stderr or "").strip()})
            return None

        try:
            data = json.loads(result.stdout or "")
        except ValueError:
            return None

        if not isinstance(data, dict):
            return None
        return data.get("nameWithOwner") or None

    def list_pull_requests(self, repo: str, state: str, limit: int) -> List[PullRequestRef]:
        """List pull requests for a repository, newest first.

        Args:
            repo: Repository as ``owner/name``.
            state: ``open``, ``closed`` or ``all``.
            limit: Maximum number of pull requests to return.
        """
        payload = self._run_json(
            [
                "pr",
                "list",
                "--repo",
                repo,
                "--state",
                state,
                "--limit",
                str(limit),
                "--json",
                ",".join(PR_LIST_FIELDS),
            ]
        )
        if payload is None:
            payload = []
        if not isinstance(payload, list):
            raise ApiError(f"gh pr list for {repo} returned unexpected payload shape")

        pull_requests: List[PullRequestRef] = []
        for item in payload:
            number = item.get("number") if isinstance(item, dict) else None
            if number is None:
                raise ApiError(
                    f"gh pr list payload is missing required fields: repo={repo}, payload={item}"
                )
            try:
                number = int(number)
            except (TypeError, ValueError, OverflowError) as exc:
                raise ApiError(
                    f"gh pr list payload has an invalid PR number: repo={repo}, payload={item}"
                ) from exc

            author = item.get("author") or {}
            pull_requests.append(
                PullRequestRef(
                    number=number,
                    title=str(item.get("title") or ""),
                    author=author.get("login") if isinstance(author, dict) else None,
                    created_at=item.get("createdAt"),
                    merged_at=item.get("mergedAt"),
                    state=str(item.get("state") or "").lower(),
                    additions=item.get("additions"),
                    deletions=item.get("deletions"),
                    changed_files=item.get("changedFiles"),
                )
            )

        return pull_requests

    def _activity(
        self,
        path: str,
        time_key: str,
        source: str,
    ) -> List[ActivityEvent]:
        events: List[ActivityEvent] = []
        for item in self._api_list(path):
            user = item.get("user") or {}
            events.append(
                ActivityEvent(
                    actor=user.get("login") if isinstance(user, dict) else None,
                    timestamp=item.get(time_key),
                    source=source,
                )
            )
        return events

    def list_reviews(self, repo: str, pr_number: int) -> List[ActivityEvent]:
        """List submitted reviews for a pull request."""
        return self._activity(f"repos/{repo}/pulls/{pr_number}/reviews", "submitted_at", SOURCE_REVIEW)

    def list_review_comments(self, repo: str, pr_number: int) -> List[ActivityEvent]:
        """List inline review comments for a pull request."""
        return self._activity(
            f"repos/{repo}/pulls/{pr_number}/comments", "created_at", SOURCE_REVIEW_COMMENT
        )

    def list_issue_comments(self, repo: str, pr_number: int) -> List[ActivityEvent]:
        """List conversation comments for a pull request."""
        return self._activity(
            f"repos/{repo}/issues/{pr_number}/comments", "created_at", SOURCE_ISSUE_COMMENT
        )
