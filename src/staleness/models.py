"""Item snapshots, label matching, and the actions the engine can take."""

from __future__ import annotations

import datetime as dt
import enum
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

MILLIS_PER_DAY = 1000 * 60 * 60 * 24


class ItemKind(enum.Enum):
    ISSUE = "issue"
    PULL_REQUEST = "pr"


class Action(enum.Enum):
    """What the engine decided to do with one item."""

    SKIP = "skip"
    MARK_STALE = "mark-stale"
    CLOSE = "close"

    @property
    def cost(self) -> int:
        """Operation-budget units billed when the action is attempted."""
        return _ACTION_COSTS[self]


_ACTION_COSTS = {Action.SKIP: 0, Action.MARK_STALE: 2, Action.CLOSE: 1}


def normalize_label(name: Optional[str]) -> str:
    """Fold case but keep accents; composed and decomposed forms compare equal."""
    return unicodedata.normalize("NFC", name or "").casefold()


def labels_match(left: Optional[str], right: Optional[str]) -> bool:
    """Return True when two label names are the same ignoring case only."""
    if not left or not right:
        return False
    return normalize_label(left) == normalize_label(right)


def parse_timestamp(raw: Any) -> dt.datetime:
    """Parse a GitHub timestamp into an aware UTC datetime.

    Accepts the API's ``2020-01-01T00:00:00Z`` form as well as general ISO-8601
    strings with an offset. Naive values are taken to be UTC. Raises
    ``ValueError`` for anything else so the run aborts instead of guessing.
    """
    if isinstance(raw, dt.datetime):
        value = raw
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = dt.datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"Unparseable timestamp: {raw!r}") from exc
    else:
        raise ValueError(f"Missing timestamp: {raw!r}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return value.astimezone(dt.timezone.utc)


def _label_names(raw_labels: Optional[Iterable[Any]]) -> Tuple[str, ...]:
    names = []
    for label in raw_labels or []:
        if isinstance(label, dict):
            name = label.get("name")
        else:
            name = label
        if isinstance(name, str) and name:
            names.append(name)
    return tuple(names)


@dataclass(frozen=True)
class Item:
    """Immutable snapshot of one open issue or pull request."""

    number: int
    title: str
    kind: ItemKind
    updated_at: dt.datetime
    labels: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_pull_request(self) -> bool:
        return self.kind is ItemKind.PULL_REQUEST

    def has_label(self, name: Optional[str]) -> bool:
        return any(labels_match(label, name) for label in self.labels)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Item":
        """Build an item from one entry of the repository issues listing."""
        kind = ItemKind.PULL_REQUEST if payload.get("pull_request") else ItemKind.ISSUE
        return cls(
            number=int(payload["number"]),
            title=payload.get("title") or "",
            kind=kind,
            updated_at=parse_timestamp(payload.get("updated_at")),
            labels=_label_names(payload.get("labels")),
        )


def was_last_updated_before(item: Item, days: int, reference: dt.datetime) -> bool:
    """True when ``item`` has been inactive for at least ``days`` days at ``reference``."""
    elapsed = reference - item.updated_at
    elapsed_millis = elapsed // dt.timedelta(milliseconds=1)
    return elapsed_millis >= MILLIS_PER_DAY * days


__all__ = [
    "MILLIS_PER_DAY",
    "ItemKind",
    "Action",
    "Item",
    "normalize_label",
    "labels_match",
    "parse_timestamp",
    "was_last_updated_before",
]
