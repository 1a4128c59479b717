"""Entry point wiring the policy, issue tracker, and stale engine together."""

from __future__ import annotations

import sys
from typing import List, Optional

from src.tracker.client import IssueTracker

from .config import StalePolicy, parse_args, resolve_policy
from .engine import DiagnosticSink, StaleEngine
from .sink import ConsoleSink, debug_enabled


def _build_tracker(policy: StalePolicy) -> IssueTracker:
    return IssueTracker(token=policy.repo_token, repository=policy.repository)


def run(policy: StalePolicy, sink: Optional[DiagnosticSink] = None) -> int:
    """Process the repository once and return the unused operation budget."""

    sink = sink or ConsoleSink()
    engine = StaleEngine(policy, _build_tracker(policy), sink=sink)
    remaining = engine.process_issues()
    stats = engine.stats
    sink.info(
        f"Processed {stats.seen} items over {stats.pages} pages in {policy.repository}: "
        f"{stats.marked_stale} marked stale, {stats.closed} closed, {stats.skipped} skipped; "
        f"{remaining} operations left"
    )
    return remaining


def main(argv: Optional[List[str]] = None) -> None:
    """CLI / Actions entry point; exits non-zero on any failure."""

    sink = ConsoleSink(verbose=debug_enabled())
    try:
        args = parse_args(argv)
        sink.verbose = sink.verbose or bool(args.verbose)
        policy = resolve_policy(args)
        run(policy, sink=sink)
    except Exception as exc:
        sink.error(str(exc))
        print(f"::error::{exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
