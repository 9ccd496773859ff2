"""Apply one review to a word: schedule, status, history record."""

from dataclasses import dataclass, replace
from typing import Optional

from srs.models import ReviewRecord, VocabularyWord
from srs.scheduler import ReviewResult, Timestamp, calculate_next_review, to_utc
from srs.status import next_status

QUALITY_MESSAGES = {
    0: "Complete blackout - let's review this again soon!",
    1: "Incorrect but remembered - keep practicing!",
    2: "Incorrect response - needs more review",
    3: "Correct with difficulty - getting there!",
    4: "Correct after hesitation - good progress!",
    5: "Perfect response - excellent!",
}


@dataclass
class ReviewOutcome:
    word: VocabularyWord
    result: ReviewResult
    record: ReviewRecord


def apply_review(
    word: VocabularyWord,
    quality: int,
    now: Optional[Timestamp] = None,
    review_duration_seconds: Optional[int] = None,
    session_id: Optional[str] = None,
) -> ReviewOutcome:
    """
    Compute the post-review word without mutating the input.

    The scheduler validates quality; an invalid rating raises before anything
    is built.
    """
    before = word.state
    result = calculate_next_review(before, quality, now=to_utc(now, 'now', allow_none=True))

    updated = replace(
        word,
        status=next_status(word.status, quality),
        ease_factor=result.ease_factor,
        interval_days=result.interval_days,
        repetitions=result.repetitions,
        last_reviewed=result.reviewed_at,
        last_quality_rating=quality,
        updated_at=result.reviewed_at,
        tags=list(word.tags),
    )
    record = ReviewRecord(
        word_id=word.word_id,
        quality_rating=quality,
        ease_factor_before=before.ease_factor,
        ease_factor_after=result.ease_factor,
        interval_before=before.interval_days,
        interval_after=result.interval_days,
        repetitions_before=before.repetitions,
        repetitions_after=result.repetitions,
        reviewed_at=result.reviewed_at,
        review_duration_seconds=review_duration_seconds,
        session_id=session_id,
    )
    return ReviewOutcome(word=updated, result=result, record=record)
