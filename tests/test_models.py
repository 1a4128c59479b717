"""Tests for src.staleness.models covering label matching, parsing, and age checks.

Run with coverage:
    pytest tests/test_models.py --maxfail=1 -v --cov=src.staleness.models --cov-report=term-missing
"""

import datetime as dt
import unicodedata

import pytest

from src.staleness import models
from src.staleness.models import Action, Item, ItemKind


def test_label_matching_ignores_case():
    assert models.labels_match("STALE", "stale")
    assert models.labels_match("Stale", "sTaLe")
    assert models.labels_match("Stalé", "STALÉ")


def test_label_matching_keeps_accents():
    assert not models.labels_match("stalé", "stale")
    assert not models.labels_match("Wontfix", "wöntfix")


def test_label_matching_treats_composed_and_decomposed_forms_alike():
    decomposed = unicodedata.normalize("NFD", "stalé")
    assert decomposed != "stalé"
    assert models.labels_match(decomposed, "STALÉ")


def test_empty_label_never_matches():
    assert not models.labels_match("", "")
    assert not models.labels_match(None, "stale")


def test_action_costs():
    assert Action.SKIP.cost == 0
    assert Action.CLOSE.cost == 1
    assert Action.MARK_STALE.cost == 2


def test_parse_timestamp_variants():
    expected = dt.datetime(2020, 1, 2, 3, 4, 5, tzinfo=dt.timezone.utc)
    assert models.parse_timestamp("2020-01-02T03:04:05Z") == expected
    assert models.parse_timestamp("2020-01-02T05:04:05+02:00") == expected
    assert models.parse_timestamp("2020-01-02T03:04:05") == expected
    assert models.parse_timestamp(expected) == expected


@pytest.mark.parametrize("raw", [None, "", "yesterday", 12])
def test_parse_timestamp_rejects_garbage(raw):
    with pytest.raises(ValueError):
        models.parse_timestamp(raw)


def test_item_from_api_detects_pull_requests_and_labels():
    issue = Item.from_api({
        "number": 4,
        "title": "Bug",
        "updated_at": "2024-01-01T00:00:00Z",
        "labels": [{"name": "Stale"}, {"name": "bug"}, "raw"],
    })
    pr = Item.from_api({
        "number": 5,
        "title": None,
        "updated_at": "2024-01-01T00:00:00Z",
        "labels": [],
        "pull_request": {"url": "https://api.github.com/repos/o/r/pulls/5"},
    })
    assert issue.kind is ItemKind.ISSUE and not issue.is_pull_request
    assert issue.labels == ("Stale", "bug", "raw")
    assert issue.has_label("stale")
    assert pr.kind is ItemKind.PULL_REQUEST and pr.title == ""


def test_item_from_api_null_pull_request_is_an_issue():
    item = Item.from_api({"number": 1, "updated_at": "2024-01-01T00:00:00Z", "pull_request": None})
    assert item.kind is ItemKind.ISSUE


def test_item_from_api_rejects_missing_timestamp():
    with pytest.raises(ValueError):
        Item.from_api({"number": 1, "title": "x"})


def test_was_last_updated_before_is_inclusive():
    now = dt.datetime(2024, 1, 10, tzinfo=dt.timezone.utc)
    item = Item(1, "t", ItemKind.ISSUE, now - dt.timedelta(days=3))
    assert models.was_last_updated_before(item, 3, now)
    assert not models.was_last_updated_before(item, 3, now - dt.timedelta(milliseconds=1))
    assert models.was_last_updated_before(item, 0, now)
