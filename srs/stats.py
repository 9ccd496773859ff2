"""Vocabulary statistics: status counts, due/overdue, ease, streak."""

from datetime import date, timedelta
from typing import Dict, Iterable, List

from srs.history import review_dates
from srs.models import ReviewRecord, VocabularyWord
from srs.scheduler import (
    Timestamp,
    calculate_retention_rate,
    is_due_for_review,
    review_status,
    to_utc,
)
from srs.word_types import ReviewStatus, WordStatus


def study_streak(dates: Iterable[date], today: date) -> int:
    """
    Consecutive days with at least one review, counting back from today.

    A streak is still alive if the last review was yesterday and today has
    none yet.
    """
    days = set(dates)
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def compute_review_stats(
    words: List[VocabularyWord],
    history: Iterable[ReviewRecord],
    now: Timestamp,
) -> Dict:
    """
    Aggregate statistics over a word collection.

    Returns:
        {
            learning, familiar, mastered, total,
            due_for_review, due_today, overdue, reviewed_today,
            average_ease_factor,   # 2 dp, 0.0 when empty
            total_repetitions,
            study_streak,          # days
            average_retention,     # heuristic, 0..0.98
        }
    """
    now = to_utc(now, 'now')
    today = now.date()

    by_status = {s.value: 0 for s in WordStatus}
    for w in words:
        by_status[w.status] = by_status.get(w.status, 0) + 1

    due_for_review = 0
    due_today = 0
    overdue = 0
    for w in words:
        if not is_due_for_review(w.last_reviewed, w.interval_days, now):
            continue
        due_for_review += 1
        status = review_status(w.last_reviewed, w.interval_days, now)
        if status is ReviewStatus.OVERDUE:
            overdue += 1
        else:
            due_today += 1

    reviewed_today = sum(
        1 for w in words
        if w.last_reviewed is not None and w.last_reviewed.date() == today
    )

    if words:
        average_ease = sum(w.ease_factor for w in words) / len(words)
        average_retention = sum(
            calculate_retention_rate(w.ease_factor, w.interval_days) for w in words
        ) / len(words)
    else:
        average_ease = 0.0
        average_retention = 0.0

    return {
        'learning': by_status[WordStatus.LEARNING.value],
        'familiar': by_status[WordStatus.FAMILIAR.value],
        'mastered': by_status[WordStatus.MASTERED.value],
        'total': len(words),
        'due_for_review': due_for_review,
        'due_today': due_today,
        'overdue': overdue,
        'reviewed_today': reviewed_today,
        'average_ease_factor': round(average_ease, 2),
        'total_repetitions': sum(w.repetitions for w in words),
        'study_streak': study_streak(review_dates(history), today),
        'average_retention': round(average_retention, 4),
    }
