"""Thin GitHub issues REST client used as the stale engine's issue source."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from src.staleness.models import Item

from .config import BASE_URL, PER_PAGE, REQUEST_TIMEOUT, USER_AGENT


class TrackerError(RuntimeError):
    """A request to the issue tracker failed (transport, auth, or HTTP status)."""

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def log_http_error(resp: requests.Response, url: str) -> str:
    """Print a short, human-readable message when GitHub returns an error."""
    try:
        body = resp.json()
    except ValueError:
        body = {"text": (resp.text or "")[:300]}
    if not isinstance(body, dict):
        body = {"text": str(body)[:300]}
    msg = body.get("message") or body.get("error") or body.get("text")
    print(f"[error] HTTP {resp.status_code} for {url}\n  -> {msg}")
    return str(msg or "")


class IssueTracker:
    """Issue listing and mutation calls for a single ``owner/name`` repository.

    Calls are made one at a time and never retried; any failure surfaces as a
    :class:`TrackerError` so the run stops where it is.
    """

    def __init__(
        self,
        token: str,
        repository: str,
        base_url: str = BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.repository = repository
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github.v3+json",
                "User-Agent": USER_AGENT,
            }
        )
        if token:
            self.session.headers["Authorization"] = f"token {token}"

    def _url(self, path: str) -> str:
        path = path if path.startswith("/") else f"/{path}"
        return f"{self.base_url}/repos/{self.repository}{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self._url(path)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise TrackerError(f"{method} {url} failed: {exc}", url=url) from exc

        if not 200 <= resp.status_code < 300:
            msg = log_http_error(resp, url)
            raise TrackerError(
                f"{method} {url} returned HTTP {resp.status_code}: {msg}",
                status_code=resp.status_code,
                url=url,
            )
        return resp

    def list_open_items(self, page: int, labels: str = "", per_page: int = PER_PAGE) -> List[Item]:
        """Return one page of open issues and pull requests; empty means no more."""
        params: Dict[str, Any] = {"state": "open", "per_page": per_page, "page": page}
        if labels:
            params["labels"] = labels
        resp = self._request("GET", "/issues", params=params)
        try:
            batch = resp.json()
        except ValueError as exc:
            raise TrackerError(f"Issue listing page {page} is not JSON", url=self._url("/issues")) from exc
        if not isinstance(batch, list):
            raise TrackerError(f"Issue listing page {page} is not a list", url=self._url("/issues"))
        return [Item.from_api(entry) for entry in batch]

    def add_comment(self, number: int, body: str) -> None:
        self._request("POST", f"/issues/{number}/comments", json={"body": body})

    def add_label(self, number: int, label: str) -> None:
        self._request("POST", f"/issues/{number}/labels", json={"labels": [label]})

    def close_item(self, number: int) -> None:
        self._request("PATCH", f"/issues/{number}", json={"state": "closed"})


__all__ = ["IssueTracker", "TrackerError", "log_http_error"]
