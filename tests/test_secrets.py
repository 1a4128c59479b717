"""Tests for src.secrets covering the local credential fallback.

Run with:
    pytest tests/test_secrets.py --maxfail=1 -v --cov=src.secrets --cov-report=term-missing
"""

import json

from src import secrets


def test_missing_file_yields_empty(tmp_path):
    assert secrets.load_local_secrets(tmp_path / "nope.json") == {}
    assert secrets.local_repo_token(tmp_path / "nope.json") is None


def test_invalid_json_yields_empty(tmp_path):
    path = tmp_path / "local_secrets.json"
    path.write_text("{not json", encoding="utf-8")
    assert secrets.load_local_secrets(path) == {}


def test_first_non_blank_token_is_used(tmp_path):
    path = tmp_path / "local_secrets.json"
    path.write_text(json.dumps({"github_tokens": ["", "  tok2 ", "tok3"]}), encoding="utf-8")
    assert secrets.local_repo_token(path) == "tok2"


def test_env_variable_points_at_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"github_tokens": "solo"}), encoding="utf-8")
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(path))
    assert secrets.local_repo_token() == "solo"
