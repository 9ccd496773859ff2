"""Tests for srs/history.py -- review history log and per-day sessions."""

import sys
import tempfile
from pathlib import Path
from datetime import date, datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from srs.history import (
    append_review,
    drop_word_history,
    read_history,
    review_dates,
    summarize_sessions,
)
from srs.models import ReviewRecord


DAY = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def _record(word_id='w1', quality=4, at=DAY, seconds=None):
    return ReviewRecord(
        word_id=word_id,
        quality_rating=quality,
        ease_factor_before=2.5,
        ease_factor_after=2.5,
        interval_before=1,
        interval_after=1,
        repetitions_before=0,
        repetitions_after=0 if quality < 3 else 1,
        reviewed_at=at,
        review_duration_seconds=seconds,
    )


def test_append_and_read_sorted():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / 'hist' / 'review_history.jsonl'
        append_review(path, _record(at=DAY + timedelta(hours=2)))
        append_review(path, _record(word_id='w2', at=DAY))
        records = read_history(path)
        assert [r.word_id for r in records] == ['w2', 'w1']
        assert [r.word_id for r in read_history(path, word_id='w1')] == ['w1']


def test_read_missing_file():
    with tempfile.TemporaryDirectory() as tmp:
        assert read_history(Path(tmp) / 'none.jsonl') == []


def test_drop_word_history_counts():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / 'review_history.jsonl'
        for i in range(3):
            append_review(path, _record(at=DAY + timedelta(minutes=i)))
        append_review(path, _record(word_id='w2'))
        assert drop_word_history(path, 'w1') == 3
        assert [r.word_id for r in read_history(path)] == ['w2']
        assert drop_word_history(Path(tmp) / 'missing.jsonl', 'w1') == 0


def test_review_dates_distinct():
    records = [
        _record(at=DAY),
        _record(at=DAY + timedelta(hours=5)),
        _record(at=DAY - timedelta(days=2)),
    ]
    assert review_dates(records) == [date(2026, 3, 8), date(2026, 3, 10)]


def test_summarize_sessions_per_day():
    records = [
        _record(quality=5, at=DAY, seconds=60),
        _record(quality=2, at=DAY + timedelta(hours=1), seconds=90),
        _record(quality=4, at=DAY - timedelta(days=1), seconds=30),
    ]
    sessions = summarize_sessions(records)
    assert [s['date'] for s in sessions] == ['2026-03-10', '2026-03-09']

    today = sessions[0]
    assert today['session_type'] == 'vocabulary'
    assert today['words_reviewed'] == 2
    assert today['words_correct'] == 1
    assert today['accuracy_rate'] == 50.0
    assert today['duration_minutes'] == 2  # 150 s

    assert sessions[1]['accuracy_rate'] == 100.0


def test_summarize_sessions_empty():
    assert summarize_sessions([]) == []
