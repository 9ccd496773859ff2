"""Tests for srs/stats.py -- vocabulary statistics and study streak."""

import sys
from pathlib import Path
from datetime import date, datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from srs.models import ReviewRecord, new_word
from srs.review import apply_review
from srs.stats import compute_review_stats, study_streak


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def test_streak_counts_back_from_today():
    dates = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert study_streak(dates, TODAY) == 3


def test_streak_alive_from_yesterday():
    dates = [TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert study_streak(dates, TODAY) == 2


def test_streak_broken():
    dates = [TODAY - timedelta(days=2), TODAY - timedelta(days=3)]
    assert study_streak(dates, TODAY) == 0


def test_streak_gap_stops_count():
    dates = [TODAY, TODAY - timedelta(days=2)]
    assert study_streak(dates, TODAY) == 1


def test_streak_empty():
    assert study_streak([], date(2026, 1, 1)) == 0


def test_stats_empty_collection():
    stats = compute_review_stats([], [], NOW)
    assert stats['total'] == 0
    assert stats['average_ease_factor'] == 0.0
    assert stats['average_retention'] == 0.0
    assert stats['study_streak'] == 0


def test_stats_counts():
    fresh = new_word('eins', 'one', now=NOW - timedelta(days=1))

    overdue = new_word('zwei', 'two', now=NOW - timedelta(days=20))
    overdue = apply_review(overdue, 5, now=NOW - timedelta(days=5)).word  # due 4 days ago

    today = new_word('drei', 'three', now=NOW - timedelta(days=2))
    outcome = apply_review(today, 4, now=NOW - timedelta(hours=2))
    today = outcome.word  # learning -> familiar, due tomorrow

    words = [fresh, overdue, today]
    history = [outcome.record]
    stats = compute_review_stats(words, history, NOW)

    assert stats['total'] == 3
    assert stats['learning'] == 1
    assert stats['familiar'] == 2
    assert stats['mastered'] == 0
    assert stats['due_for_review'] == 2
    assert stats['overdue'] == 1
    assert stats['due_today'] == 1
    assert stats['reviewed_today'] == 1
    assert stats['total_repetitions'] == 2
    assert stats['average_ease_factor'] == pytest.approx(round((2.5 + 2.6 + 2.5) / 3, 2))
    assert stats['study_streak'] == 1
    assert 0.0 < stats['average_retention'] <= 0.98


def test_stats_streak_from_history():
    word = new_word('vier', 'four', now=NOW - timedelta(days=5))
    history = []
    for days_ago in (3, 2, 1):
        outcome = apply_review(word, 4, now=NOW - timedelta(days=days_ago))
        word = outcome.word
        history.append(outcome.record)
    assert isinstance(history[0], ReviewRecord)
    stats = compute_review_stats([word], history, NOW)
    assert stats['study_streak'] == 3
