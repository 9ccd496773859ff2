"""Tests for server/config.py -- environment overrides."""

import logging
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from server.config import Settings


def _settings(tmp_dir: str) -> Settings:
    return Settings(data_dir=Path(tmp_dir), database_url="sqlite:///:memory:")


def test_review_queue_limit_from_env(monkeypatch):
    monkeypatch.setenv("REVIEW_QUEUE_LIMIT", "35")
    with tempfile.TemporaryDirectory() as tmp:
        assert _settings(tmp).review_queue_limit == 35


@pytest.mark.parametrize("raw", ["lots", "2.5", "0", "-4"])
def test_bad_review_queue_limit_warns_and_keeps_default(monkeypatch, caplog, raw):
    monkeypatch.setenv("REVIEW_QUEUE_LIMIT", raw)
    with tempfile.TemporaryDirectory() as tmp:
        with caplog.at_level(logging.WARNING, logger="wortschatz.api"):
            settings = _settings(tmp)

    assert settings.review_queue_limit == 20
    warnings = [r for r in caplog.records if "REVIEW_QUEUE_LIMIT" in r.getMessage()]
    assert len(warnings) == 1
    assert warnings[0].levelno == logging.WARNING
    assert repr(raw) in warnings[0].getMessage()


def test_unknown_log_level_warns(monkeypatch, caplog):
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with tempfile.TemporaryDirectory() as tmp:
        with caplog.at_level(logging.WARNING, logger="wortschatz.api"):
            settings = _settings(tmp)

    assert settings.log_level == "INFO"
    assert any("CHATTY" in r.getMessage() for r in caplog.records)
