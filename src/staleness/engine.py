"""Staleness decision engine with page walking and an operation budget."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from src.tracker.config import PER_PAGE

from .config import PolicyMode, StalePolicy
from .models import Action, Item, was_last_updated_before
from .sink import ConsoleSink


class IssueSource(Protocol):
    """Operations the engine needs from the issue tracker."""

    def list_open_items(self, page: int, labels: str = "", per_page: int = PER_PAGE) -> List[Item]:
        ...

    def add_comment(self, number: int, body: str) -> None:
        ...

    def add_label(self, number: int, label: str) -> None:
        ...

    def close_item(self, number: int) -> None:
        ...


class DiagnosticSink(Protocol):
    """Where the engine sends its decision trace and warnings."""

    def debug(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


@dataclass
class RunStats:
    """Tally of what one run looked at and did."""

    pages: int = 0
    seen: int = 0
    skipped: int = 0
    marked_stale: int = 0
    closed: int = 0


class StaleEngine:
    """Walk every open item once and apply the stale policy within the budget."""

    def __init__(
        self,
        policy: StalePolicy,
        tracker: IssueSource,
        sink: Optional[DiagnosticSink] = None,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ) -> None:
        self.policy = policy
        self.tracker = tracker
        self.sink = sink or ConsoleSink()
        self.clock = clock or utc_now
        self.operations_left = policy.operations_per_run
        self.stats = RunStats()

    def reference_time(self) -> dt.datetime:
        """Instant that item activity is measured against."""
        if self.policy.mode is PolicyMode.COMMIT_DATE and self.policy.commit_date is not None:
            return self.policy.commit_date
        return self.clock()

    def decide(self, item: Item, reference: Optional[dt.datetime] = None) -> Action:
        """Pick skip / mark-stale / close for one item without touching the tracker or budget."""
        reference = reference or self.reference_time()
        policy = self.policy
        item_type = "pr" if item.is_pull_request else "issue"
        stale_label = policy.stale_label_for(item.kind)
        exempt_label = policy.exempt_label_for(item.kind)

        if not policy.message_for(item.kind):
            self.sink.debug(f"Skipping {item_type} #{item.number} due to empty stale message")
            return Action.SKIP

        if exempt_label and item.has_label(exempt_label):
            self.sink.debug(f"Skipping {item_type} #{item.number} because it has an exempt label")
            return Action.SKIP

        if not item.has_label(stale_label):
            if policy.days_before_close >= 0 and was_last_updated_before(
                item, policy.days_before_close, reference
            ):
                self.sink.debug(
                    f"Closing {item_type} #{item.number} because it was last updated on {item.updated_at.isoformat()}"
                )
                return Action.CLOSE
            self.sink.debug(f"Ignoring {item_type} #{item.number} because it was updated recently")
            return Action.SKIP

        if was_last_updated_before(item, policy.days_before_stale, reference):
            self.sink.debug(
                f"Marking {item_type} #{item.number} stale because it was last updated on {item.updated_at.isoformat()}"
            )
            return Action.MARK_STALE
        return Action.SKIP

    def process_issues(self) -> int:
        """Run the policy over every page; return the budget left (may be <= 0)."""
        if self.policy.debug_only:
            self.sink.warning(
                "Executing in debug mode. Debug output will be written but no issues will be processed."
            )

        reference = self.reference_time()
        page = 1
        while True:
            if self.operations_left <= 0:
                self.sink.warning("Reached max number of operations to process. Exiting.")
                return self.operations_left

            items = self.tracker.list_open_items(page, labels=self.policy.only_labels, per_page=PER_PAGE)
            if not items:
                self.sink.debug("No more issues found to process. Exiting.")
                return self.operations_left
            self.stats.pages += 1

            for item in items:
                self.stats.seen += 1
                self.sink.debug(
                    f"Found issue: #{item.number} - {item.title} last updated "
                    f"{item.updated_at.isoformat()} (is pr? {item.is_pull_request})"
                )
                action = self.decide(item, reference)
                if action is Action.SKIP:
                    self.stats.skipped += 1
                    continue

                if action is Action.CLOSE:
                    self.close_issue(item)
                    self.stats.closed += 1
                else:
                    self.mark_stale(
                        item,
                        self.policy.message_for(item.kind),
                        self.policy.stale_label_for(item.kind),
                    )
                    self.stats.marked_stale += 1
                self.operations_left -= action.cost

                if self.operations_left <= 0:
                    self.sink.warning("Reached max number of operations to process. Exiting.")
                    return self.operations_left

            page += 1

    def mark_stale(self, item: Item, message: str, label: str) -> None:
        """Comment on the item and apply the stale label."""
        self.sink.debug(f"Marking issue #{item.number} - {item.title} as stale")
        if self.policy.debug_only:
            return
        self.tracker.add_comment(item.number, message)
        self.tracker.add_label(item.number, label)

    def close_issue(self, item: Item) -> None:
        self.sink.debug(f"Closing issue #{item.number} - {item.title} for being stale")
        if self.policy.debug_only:
            return
        self.tracker.close_item(item.number)


__all__ = ["DiagnosticSink", "IssueSource", "RunStats", "StaleEngine", "utc_now"]
