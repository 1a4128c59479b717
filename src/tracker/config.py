"""Central HTTP constants for talking to the GitHub issues REST API."""

from __future__ import annotations

import os

USER_AGENT = "stale-triage-bot/1.0"
BASE_URL = os.getenv("GITHUB_API_URL", "https://api.github.com")
PER_PAGE = 100
REQUEST_TIMEOUT = int(os.getenv("STALE_REQUEST_TIMEOUT", "90"))

__all__ = [
    "USER_AGENT",
    "BASE_URL",
    "PER_PAGE",
    "REQUEST_TIMEOUT",
]
