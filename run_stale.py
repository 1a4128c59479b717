"""Convenience shim to run the stale triage workflow."""

from __future__ import annotations

import sys

from src.staleness.runner import main as stale_main


if __name__ == "__main__":
    stale_main(sys.argv[1:])
