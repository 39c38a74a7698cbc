"""Tests for command-line argument parsing."""

import sys
from pathlib import Path

import pytest

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from prpickup.cli import parse_args


def test_parse_args_with_valid_arguments():
    """Verify CLI parsing succeeds when all options are provided."""
    args = parse_args(
        [
            "owner/repo",
            "--state",
            "open",
            "--limit",
            "25",
            "--gh-command",
            "/opt/bin/gh",
            "--business-days",
            "10",
            "--details",
            "--verbose",
        ]
    )

    assert args.repo == "owner/repo"
    assert args.state == "open"
    assert args.limit == 25
    assert args.gh_command == "/opt/bin/gh"
    assert args.business_days == 10
    assert args.details is True
    assert args.verbose is True
    assert args.quiet is False


def test_parse_args_defaults(monkeypatch):
    """Verify defaults when only the program name is given."""
    monkeypatch.setattr(sys, "argv", ["prpickup"])

    args = parse_args()

    assert args.repo is None
    assert args.state == "all"
    assert args.limit is None
    assert args.gh_command is None
    assert args.business_days == 14
    assert args.details is False


def test_parse_args_short_options():
    """Verify short option aliases for state and limit."""
    args = parse_args(["-s", "closed", "-l", "5", "-q", "owner/repo"])

    assert args.state == "closed"
    assert args.limit == 5
    assert args.quiet is True
    assert args.repo == "owner/repo"


@pytest.mark.parametrize(
    "argv",
    [
        ["--business-days", "0"],
        ["--business-days", "-3"],
        ["--limit", "abc"],
        ["--state", "merged"],
        ["--verbose", "--quiet"],
    ],
)
def test_parse_args_invalid_values_fail_validation(argv):
    """Verify CLI parsing exits with an error for invalid option values."""
    with pytest.raises(SystemExit):
        parse_args(argv)
