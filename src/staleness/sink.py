"""Diagnostic output for the stale run.

The engine only ever talks to a sink, so tests can assert on the decision trace
without capturing stdout.
"""

from __future__ import annotations

import os
from typing import List, Mapping, Optional, Tuple


def debug_enabled(env: Optional[Mapping[str, str]] = None) -> bool:
    """Whether the Actions runner was asked for step debug logging."""
    env = os.environ if env is None else env
    return env.get("RUNNER_DEBUG") == "1" or env.get("ACTIONS_STEP_DEBUG", "").lower() == "true"


class ConsoleSink:
    """Print bracket-tagged diagnostics; debug lines only when verbose."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose

    def debug(self, message: str) -> None:
        if self.verbose:
            print(f"[debug] {message}")

    def info(self, message: str) -> None:
        print(message)

    def warning(self, message: str) -> None:
        print(f"[warn] {message}")

    def error(self, message: str) -> None:
        print(f"[error] {message}")


class RecordingSink:
    """Keep every diagnostic as a ``(level, message)`` tuple."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def debug(self, message: str) -> None:
        self.records.append(("debug", message))

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [msg for lvl, msg in self.records if level is None or lvl == level]


__all__ = ["ConsoleSink", "RecordingSink", "debug_enabled"]
