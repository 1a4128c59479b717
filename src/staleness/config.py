"""Policy resolution for the stale triage run.

Inputs arrive the way a GitHub Actions step receives them (``INPUT_<NAME>``
environment variables) and may be overridden on the command line. Everything is
validated once and captured in an immutable :class:`StalePolicy` before any
network call is made.
"""

from __future__ import annotations

import argparse
import datetime as dt
import enum
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from src.secrets import local_repo_token

from .models import ItemKind, parse_timestamp

DEFAULT_DAYS_BEFORE_STALE = 60
DEFAULT_DAYS_BEFORE_CLOSE = 7
DEFAULT_STALE_LABEL = "Stale"
DEFAULT_OPERATIONS_PER_RUN = 100

_TRUE_VALUES = {"true", "1", "yes", "y", "on"}
_FALSE_VALUES = {"false", "0", "no", "n", "off", ""}


class ConfigError(ValueError):
    """Raised when a required input is missing or an input cannot be parsed."""


class PolicyMode(enum.Enum):
    """Which instant item activity is measured against.

    ``COMMIT_DATE`` only replaces the wall clock with the commit author date; the
    usual close / re-notify decisions still apply. It does not label unlabeled
    pull requests updated before the commit for the first time, and it does not
    skip pull requests that already carry the stale label.
    """

    DAYS = "days"
    COMMIT_DATE = "commit-date"


@dataclass(frozen=True)
class StalePolicy:
    """Resolved, immutable settings for one run."""

    repo_token: str
    repository: str
    stale_issue_message: str = ""
    stale_pr_message: str = ""
    days_before_stale: int = DEFAULT_DAYS_BEFORE_STALE
    days_before_close: int = DEFAULT_DAYS_BEFORE_CLOSE
    stale_issue_label: str = DEFAULT_STALE_LABEL
    exempt_issue_label: str = ""
    stale_pr_label: str = DEFAULT_STALE_LABEL
    exempt_pr_label: str = ""
    only_labels: str = ""
    operations_per_run: int = DEFAULT_OPERATIONS_PER_RUN
    debug_only: bool = False
    mode: PolicyMode = PolicyMode.DAYS
    commit_date: Optional[dt.datetime] = None

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]

    def message_for(self, kind: ItemKind) -> str:
        return self.stale_pr_message if kind is ItemKind.PULL_REQUEST else self.stale_issue_message

    def stale_label_for(self, kind: ItemKind) -> str:
        return self.stale_pr_label if kind is ItemKind.PULL_REQUEST else self.stale_issue_label

    def exempt_label_for(self, kind: ItemKind) -> str:
        return self.exempt_pr_label if kind is ItemKind.PULL_REQUEST else self.exempt_issue_label


# (input name, parser dest) pairs; the input name doubles as the CLI flag.
_INPUTS = [
    ("repo-token", "repo_token"),
    ("repository", "repository"),
    ("stale-issue-message", "stale_issue_message"),
    ("stale-pr-message", "stale_pr_message"),
    ("days-before-stale", "days_before_stale"),
    ("days-before-close", "days_before_close"),
    ("stale-issue-label", "stale_issue_label"),
    ("exempt-issue-label", "exempt_issue_label"),
    ("stale-pr-label", "stale_pr_label"),
    ("exempt-pr-label", "exempt_pr_label"),
    ("only-labels", "only_labels"),
    ("operations-per-run", "operations_per_run"),
    ("debug-only", "debug_only"),
    ("stale-mode", "stale_mode"),
    ("commit-json", "commit_json"),
]


class _InputParser(argparse.ArgumentParser):
    """Argument parser that reports bad flags as :class:`ConfigError`."""

    def error(self, message: str) -> None:
        raise ConfigError(f"Invalid arguments: {message}")


def build_arg_parser() -> argparse.ArgumentParser:
    """Return the CLI parser; every option falls back to its ``INPUT_*`` variable."""

    parser = _InputParser(
        description="Mark inactive issues and pull requests stale, and close abandoned ones.",
    )
    for name, dest in _INPUTS:
        parser.add_argument(f"--{name}", dest=dest, default=None)
    parser.add_argument("--verbose", action="store_true", help="print debug diagnostics")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments; accepts argv overrides for testing."""

    parser = build_arg_parser()
    return parser.parse_args(argv)


def get_input(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Read an action input the way the Actions runner exposes it."""

    env = os.environ if env is None else env
    value = env.get(f"INPUT_{name.replace(' ', '_').upper()}")
    return value.strip() if value is not None else None


def _parse_int(name: str, raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Input '{name}' must be an integer, got {raw!r}") from exc


def _parse_bool(name: str, raw: Optional[str]) -> bool:
    text = (raw or "").strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Input '{name}' must be a boolean, got {raw!r}")


def _parse_mode(raw: Optional[str]) -> PolicyMode:
    text = (raw or PolicyMode.DAYS.value).strip().lower()
    for mode in PolicyMode:
        if mode.value == text:
            return mode
    choices = ", ".join(mode.value for mode in PolicyMode)
    raise ConfigError(f"Input 'stale-mode' must be one of: {choices}; got {raw!r}")


def parse_commit_date(raw: Optional[str]) -> dt.datetime:
    """Extract the author date from a serialized GitHub commit payload."""

    if not raw:
        raise ConfigError("Input 'commit-json' is required when stale-mode is commit-date")
    try:
        commit: Dict[str, Any] = json.loads(raw)
        return parse_timestamp(commit["author"]["date"])
    except (ValueError, KeyError, TypeError) as exc:
        raise ConfigError(f"Input 'commit-json' does not hold a commit author date: {exc}") from exc


def resolve_policy(
    args: Optional[argparse.Namespace] = None,
    env: Optional[Mapping[str, str]] = None,
) -> StalePolicy:
    """Merge CLI flags over ``INPUT_*`` variables and validate the result."""

    env = os.environ if env is None else env
    args = args if args is not None else parse_args([])

    raw: Dict[str, Optional[str]] = {}
    for name, dest in _INPUTS:
        cli_value = getattr(args, dest, None)
        raw[name] = cli_value if cli_value is not None else get_input(name, env)

    token = raw["repo-token"] or env.get("GITHUB_TOKEN") or local_repo_token()
    if not token:
        raise ConfigError("Input required and not supplied: repo-token")

    repository = raw["repository"] or env.get("GITHUB_REPOSITORY") or ""
    owner, _, name = repository.partition("/")
    if not owner or not name or "/" in name:
        raise ConfigError(f"Repository must look like 'owner/name', got {repository!r}")

    # Negative values are accepted: a negative stale threshold re-notifies every
    # stale-labeled item, and a budget <= 0 ends the run before the first fetch.
    days_before_stale = _parse_int("days-before-stale", raw["days-before-stale"], DEFAULT_DAYS_BEFORE_STALE)
    operations_per_run = _parse_int(
        "operations-per-run", raw["operations-per-run"], DEFAULT_OPERATIONS_PER_RUN
    )

    mode = _parse_mode(raw["stale-mode"])
    commit_date = parse_commit_date(raw["commit-json"]) if mode is PolicyMode.COMMIT_DATE else None

    return StalePolicy(
        repo_token=token,
        repository=repository,
        stale_issue_message=raw["stale-issue-message"] or "",
        stale_pr_message=raw["stale-pr-message"] or "",
        days_before_stale=days_before_stale,
        days_before_close=_parse_int(
            "days-before-close", raw["days-before-close"], DEFAULT_DAYS_BEFORE_CLOSE
        ),
        stale_issue_label=raw["stale-issue-label"] or DEFAULT_STALE_LABEL,
        exempt_issue_label=raw["exempt-issue-label"] or "",
        stale_pr_label=raw["stale-pr-label"] or DEFAULT_STALE_LABEL,
        exempt_pr_label=raw["exempt-pr-label"] or "",
        only_labels=raw["only-labels"] or "",
        operations_per_run=operations_per_run,
        debug_only=_parse_bool("debug-only", raw["debug-only"]),
        mode=mode,
        commit_date=commit_date,
    )


__all__ = [
    "DEFAULT_DAYS_BEFORE_STALE",
    "DEFAULT_DAYS_BEFORE_CLOSE",
    "DEFAULT_STALE_LABEL",
    "DEFAULT_OPERATIONS_PER_RUN",
    "ConfigError",
    "PolicyMode",
    "StalePolicy",
    "build_arg_parser",
    "parse_args",
    "get_input",
    "parse_commit_date",
    "resolve_policy",
]
