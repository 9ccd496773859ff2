"""Vocabulary service wrappers -- all return JSON-serializable dicts."""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session as DBSession

from server.db.models import LearningSessionRow, ReviewHistoryRow, VocabularyWordRow
from srs.models import CONTENT_FIELDS, ReviewRecord, VocabularyWord, new_word
from srs.review import QUALITY_MESSAGES, apply_review
from srs.review_queue import build_review_queue, learning_words
from srs.scheduler import calculate_retention_rate, to_utc
from srs.stats import compute_review_stats
from srs.word_types import DifficultyLevel, WordStatus

logger = logging.getLogger("wortschatz.api")


class WordNotFoundError(KeyError):
    """No vocabulary word with the given id."""

    def __init__(self, word_id: str):
        self.word_id = word_id
        super().__init__(f"Word not found: {word_id}")


def _iso(value: Optional[datetime]) -> Optional[str]:
    value = to_utc(value, allow_none=True)
    return value.isoformat() if value is not None else None


def _row_to_word(row: VocabularyWordRow) -> VocabularyWord:
    return VocabularyWord(
        word_id=row.id,
        german=row.german,
        english=row.english,
        example=row.example,
        status=row.status,
        difficulty_level=row.difficulty_level,
        notes=row.notes,
        tags=list(row.tags or []),
        ease_factor=row.ease_factor,
        interval_days=row.interval_days,
        repetitions=row.repetitions,
        last_reviewed=row.last_reviewed,
        last_quality_rating=row.last_quality_rating,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _write_schedule(row: VocabularyWordRow, word: VocabularyWord) -> None:
    """Copy the scheduling fields of word onto row. next_review is derived."""
    row.status = word.status
    row.ease_factor = word.ease_factor
    row.interval_days = word.interval_days
    row.repetitions = word.repetitions
    row.last_reviewed = word.last_reviewed
    row.next_review = word.next_review_at(word.created_at)
    row.last_quality_rating = word.last_quality_rating
    row.updated_at = word.updated_at


def _word_to_dict(word: VocabularyWord, now: datetime) -> Dict[str, Any]:
    d = word.to_dict()
    d['id'] = d.pop('word_id')
    d['next_review'] = word.next_review_at(now).isoformat()
    d['retention'] = round(calculate_retention_rate(word.ease_factor, word.interval_days), 4)
    return d


def _record_to_dict(row: ReviewHistoryRow) -> Dict[str, Any]:
    return {
        'id': row.id,
        'word_id': row.word_id,
        'session_id': row.session_id,
        'quality_rating': row.quality_rating,
        'ease_factor_before': row.ease_factor_before,
        'ease_factor_after': row.ease_factor_after,
        'interval_before': row.interval_before,
        'interval_after': row.interval_after,
        'repetitions_before': row.repetitions_before,
        'repetitions_after': row.repetitions_after,
        'review_duration_seconds': row.review_duration_seconds,
        'created_at': _iso(row.created_at),
    }


def _row_to_record(row: ReviewHistoryRow) -> ReviewRecord:
    return ReviewRecord(
        record_id=row.id,
        word_id=row.word_id,
        quality_rating=row.quality_rating,
        ease_factor_before=row.ease_factor_before,
        ease_factor_after=row.ease_factor_after,
        interval_before=row.interval_before,
        interval_after=row.interval_after,
        repetitions_before=row.repetitions_before,
        repetitions_after=row.repetitions_after,
        reviewed_at=row.created_at,
        review_duration_seconds=row.review_duration_seconds,
        session_id=row.session_id,
    )


def _get_row(db: DBSession, word_id: str) -> VocabularyWordRow:
    row = db.get(VocabularyWordRow, word_id)
    if row is None:
        raise WordNotFoundError(word_id)
    return row


def _all_words(db: DBSession) -> List[VocabularyWord]:
    rows = db.scalars(select(VocabularyWordRow)).all()
    return [_row_to_word(r) for r in rows]


def create_word(db: DBSession, data: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """
    Insert a new word with the initial scheduling state.

    Raises:
        ValueError if german or english is empty, or a level is unknown.
    """
    word = new_word(
        data.get('german', ''),
        data.get('english', ''),
        example=data.get('example'),
        difficulty_level=data.get('difficulty_level') or DifficultyLevel.A1.value,
        notes=data.get('notes'),
        tags=data.get('tags'),
        now=now,
    )
    row = VocabularyWordRow(
        german=word.german,
        english=word.english,
        example=word.example,
        difficulty_level=word.difficulty_level,
        notes=word.notes,
        tags=list(word.tags),
        created_at=word.created_at,
    )
    _write_schedule(row, word)
    db.add(row)
    db.flush()
    logger.info("Created word %s (%s = %s)", row.id, row.german, row.english)
    return _word_to_dict(_row_to_word(row), now)


def list_words(
    db: DBSession,
    now: datetime,
    status: str = 'all',
    difficulty: str = 'all',
    query: str = '',
) -> Dict[str, Any]:
    """Words filtered by status, difficulty and text search, oldest first."""
    stmt = select(VocabularyWordRow)
    if status != 'all':
        stmt = stmt.where(VocabularyWordRow.status == WordStatus(status).value)
    if difficulty != 'all':
        stmt = stmt.where(VocabularyWordRow.difficulty_level == DifficultyLevel(difficulty).value)
    q = query.strip()
    if q:
        pattern = f"%{q}%"
        stmt = stmt.where(or_(
            VocabularyWordRow.german.ilike(pattern),
            VocabularyWordRow.english.ilike(pattern),
            VocabularyWordRow.example.ilike(pattern),
            VocabularyWordRow.notes.ilike(pattern),
        ))
    stmt = stmt.order_by(VocabularyWordRow.created_at, VocabularyWordRow.id)
    words = [_row_to_word(r) for r in db.scalars(stmt).all()]
    return {
        'count': len(words),
        'words': [_word_to_dict(w, now) for w in words],
    }


def get_word(db: DBSession, word_id: str, now: datetime) -> Dict[str, Any]:
    return _word_to_dict(_row_to_word(_get_row(db, word_id)), now)


def update_word(
    db: DBSession,
    word_id: str,
    fields: Dict[str, Any],
    now: datetime,
) -> Dict[str, Any]:
    """
    Edit content fields. Scheduling columns are written only by review_word.

    Raises:
        WordNotFoundError, ValueError on empty german/english or unknown enums.
    """
    row = _get_row(db, word_id)
    unknown = sorted(set(fields) - set(CONTENT_FIELDS))
    if unknown:
        raise ValueError(f"Fields not editable: {', '.join(unknown)}")
    for side in ('german', 'english'):
        if side in fields:
            value = (fields[side] or '').strip()
            if not value:
                raise ValueError(f"{side} must be non-empty")
            fields[side] = value
    if 'status' in fields:
        fields['status'] = WordStatus(fields['status']).value
    if 'difficulty_level' in fields:
        fields['difficulty_level'] = DifficultyLevel(fields['difficulty_level']).value
    if 'tags' in fields:
        fields['tags'] = list(fields['tags'] or [])

    for name, value in fields.items():
        setattr(row, name, value)
    row.updated_at = now
    db.flush()
    return _word_to_dict(_row_to_word(row), now)


def delete_word(db: DBSession, word_id: str) -> None:
    """Delete a word; its review history goes with it."""
    row = _get_row(db, word_id)
    db.delete(row)
    db.flush()
    logger.info("Deleted word %s", word_id)


def _find_session(db: DBSession, day) -> Optional[LearningSessionRow]:
    return db.scalars(
        select(LearningSessionRow).where(
            LearningSessionRow.session_type == 'vocabulary',
            LearningSessionRow.session_date == day,
        )
    ).first()


def _session_for_day(db: DBSession, now: datetime) -> LearningSessionRow:
    """The day's session row, created on first review; called before any other write."""
    day = now.date()
    session = _find_session(db, day)
    if session is not None:
        return session
    session = LearningSessionRow(
        session_type='vocabulary',
        session_date=day,
        duration_minutes=0,
        duration_seconds=0,
        words_reviewed=0,
        words_correct=0,
        accuracy_rate=0.0,
        created_at=now,
    )
    db.add(session)
    try:
        db.flush()
    except IntegrityError:
        # another request created the day's session first
        db.rollback()
        logger.info("Session for %s created concurrently, reusing it", day)
        session = _find_session(db, day)
        if session is None:
            raise
    return session


def review_word(
    db: DBSession,
    word_id: str,
    quality: int,
    now: datetime,
    review_duration_seconds: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Record a review: reschedule the word, update today's session, log history.

    Returns:
        {word, result: {ease_factor, interval_days, repetitions, next_review, is_due},
         feedback, history_entry}

    Raises:
        WordNotFoundError; InvalidQualityError for a rating outside 0-5.
    """
    row = _get_row(db, word_id)
    word = _row_to_word(row)
    session = _session_for_day(db, to_utc(now, 'now'))

    outcome = apply_review(
        word, quality, now=now,
        review_duration_seconds=review_duration_seconds,
        session_id=session.id,
    )
    _write_schedule(row, outcome.word)

    session.words_reviewed += 1
    if outcome.record.correct:
        session.words_correct += 1
    session.accuracy_rate = round(session.words_correct / session.words_reviewed * 100, 2)
    session.duration_seconds += review_duration_seconds or 0
    session.duration_minutes = round(session.duration_seconds / 60)

    rec = outcome.record
    history_row = ReviewHistoryRow(
        word_id=row.id,
        session_id=session.id,
        quality_rating=rec.quality_rating,
        ease_factor_before=rec.ease_factor_before,
        ease_factor_after=rec.ease_factor_after,
        interval_before=rec.interval_before,
        interval_after=rec.interval_after,
        repetitions_before=rec.repetitions_before,
        repetitions_after=rec.repetitions_after,
        review_duration_seconds=rec.review_duration_seconds,
        created_at=rec.reviewed_at,
    )
    db.add(history_row)
    db.flush()

    result = outcome.result
    logger.info(
        "Reviewed %s q=%d -> interval %dd, ease %.2f, status %s",
        word_id, quality, result.interval_days, result.ease_factor, outcome.word.status,
    )
    return {
        'word': _word_to_dict(outcome.word, now),
        'result': {
            'ease_factor': result.ease_factor,
            'interval_days': result.interval_days,
            'repetitions': result.repetitions,
            'next_review': result.next_review.isoformat(),
            'is_due': result.is_due,
        },
        'feedback': QUALITY_MESSAGES[quality],
        'history_entry': _record_to_dict(history_row),
    }


def get_word_history(db: DBSession, word_id: str) -> Dict[str, Any]:
    _get_row(db, word_id)
    rows = db.scalars(
        select(ReviewHistoryRow)
        .where(ReviewHistoryRow.word_id == word_id)
        .order_by(ReviewHistoryRow.created_at)
    ).all()
    return {
        'word_id': word_id,
        'entries': [_record_to_dict(r) for r in rows],
    }


def get_review_queue(db: DBSession, now: datetime, limit: Optional[int] = None) -> Dict[str, Any]:
    """Due words, most urgent first. due_count is the total before limiting."""
    queue = build_review_queue(_all_words(db), now)
    limited = queue[:limit] if limit is not None else queue
    words = []
    for dw in limited:
        d = dw.to_dict()
        d['id'] = d.pop('word_id')
        words.append(d)
    return {'due_count': len(queue), 'words': words}


def get_learning_words(db: DBSession, now: datetime, limit: Optional[int] = None) -> Dict[str, Any]:
    new = learning_words(_all_words(db), limit)
    return {
        'count': len(new),
        'words': [_word_to_dict(w, now) for w in new],
    }


def get_stats(db: DBSession, now: datetime) -> Dict[str, Any]:
    history = [_row_to_record(r) for r in db.scalars(select(ReviewHistoryRow)).all()]
    return compute_review_stats(_all_words(db), history, now)


def get_sessions(db: DBSession, now: datetime, window_days: int = 30) -> Dict[str, Any]:
    """Per-day vocabulary sessions within the window, newest first."""
    since = (to_utc(now, 'now') - timedelta(days=window_days)).date()
    rows = db.scalars(
        select(LearningSessionRow)
        .where(LearningSessionRow.session_date >= since)
        .order_by(LearningSessionRow.session_date.desc())
    ).all()
    sessions = [{
        'id': r.id,
        'date': r.session_date.isoformat(),
        'session_type': r.session_type,
        'words_reviewed': r.words_reviewed,
        'words_correct': r.words_correct,
        'accuracy_rate': r.accuracy_rate,
        'duration_minutes': r.duration_minutes,
    } for r in rows]

    total_reviews = sum(s['words_reviewed'] for s in sessions)
    average_accuracy = (
        round(sum(s['accuracy_rate'] for s in sessions) / len(sessions), 2)
        if sessions else 0.0
    )
    return {
        'sessions': sessions,
        'total_reviews': total_reviews,
        'average_accuracy': average_accuracy,
        'total_study_minutes': sum(s['duration_minutes'] for s in sessions),
    }
