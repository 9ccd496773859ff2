"""Review queue building: which words are due, and in what order."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from srs.models import VocabularyWord
from srs.scheduler import (
    Timestamp,
    calculate_retention_rate,
    days_until_review,
    get_review_priority,
    is_due_for_review,
    review_status,
    to_utc,
)
from srs.word_types import SessionType, WordStatus

# Flashcard session sizes
REVIEW_SESSION_SIZE = 20
LEARNING_SESSION_SIZE = 10
MIXED_REVIEW_SIZE = 15
MIXED_LEARNING_SIZE = 5


@dataclass
class DueWord:
    """A word annotated with its queue metadata at a given instant."""
    word: VocabularyWord
    priority: int
    days_until: int
    next_review: datetime
    review_status: str
    retention: float

    @property
    def days_overdue(self) -> int:
        return max(0, -self.days_until)

    def to_dict(self) -> Dict:
        d = self.word.to_dict()
        d.update({
            'priority': self.priority,
            'days_until': self.days_until,
            'days_overdue': self.days_overdue,
            'next_review': self.next_review.isoformat(),
            'review_status': self.review_status,
            'retention': round(self.retention, 4),
        })
        return d


def annotate(word: VocabularyWord, now: datetime) -> DueWord:
    return DueWord(
        word=word,
        priority=get_review_priority(
            word.last_reviewed, word.interval_days, word.ease_factor, now,
        ),
        days_until=days_until_review(word.last_reviewed, word.interval_days, now),
        next_review=word.next_review_at(now),
        review_status=review_status(word.last_reviewed, word.interval_days, now).value,
        retention=calculate_retention_rate(word.ease_factor, word.interval_days),
    )


def _queue_key(dw: DueWord):
    return (-dw.priority, dw.next_review, dw.word.word_id)


def build_review_queue(
    words: Iterable[VocabularyWord],
    now: Timestamp,
    limit: Optional[int] = None,
) -> List[DueWord]:
    """
    Due words, most urgent first.

    Order: priority descending, then earliest next_review, then word_id so
    the queue is stable across calls.
    """
    now = to_utc(now, 'now')
    due = [
        annotate(w, now) for w in words
        if is_due_for_review(w.last_reviewed, w.interval_days, now)
    ]
    due.sort(key=_queue_key)
    return due[:limit] if limit is not None else due


def learning_words(
    words: Iterable[VocabularyWord],
    limit: Optional[int] = None,
) -> List[VocabularyWord]:
    """Words never successfully reviewed yet (status learning, 0 reps), oldest first."""
    new = [
        w for w in words
        if w.status == WordStatus.LEARNING.value and w.repetitions == 0
    ]
    new.sort(key=lambda w: (w.created_at, w.word_id))
    return new[:limit] if limit is not None else new


def build_session_words(
    words: Iterable[VocabularyWord],
    session_type: str,
    now: Timestamp,
) -> List[VocabularyWord]:
    """
    Pick the words for one flashcard session.

        review:   up to 20 due words
        learning: up to 10 new words
        mixed:    up to 15 due words, then up to 5 new words not already picked
    """
    session_type = SessionType(session_type)
    words = list(words)

    if session_type is SessionType.REVIEW:
        return [dw.word for dw in build_review_queue(words, now, REVIEW_SESSION_SIZE)]
    if session_type is SessionType.LEARNING:
        return learning_words(words, LEARNING_SESSION_SIZE)

    picked = [dw.word for dw in build_review_queue(words, now, MIXED_REVIEW_SIZE)]
    seen = {w.word_id for w in picked}
    fresh = [w for w in learning_words(words) if w.word_id not in seen]
    return picked + fresh[:MIXED_LEARNING_SIZE]
