"""
SM-2 spaced repetition scheduler.

Pure functions over a small per-word SchedulingState. The only impure input
is "now"; every function takes it as an optional argument and falls back to
the system clock. Use Scheduler to bind an injected Clock instead.

Quality ratings (SuperMemo-2 scale):
    5: perfect response
    4: correct response after a hesitation
    3: correct response with difficulty
    2: incorrect response; the correct one seemed easy to recall
    1: incorrect response; the correct one remembered
    0: complete blackout
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from srs.clock import Clock, SYSTEM_CLOCK
from srs.errors import InvalidQualityError, InvalidStateError, InvalidTimestampError
from srs.word_types import ReviewStatus

logger = logging.getLogger("wortschatz.srs")

MIN_EASE_FACTOR = 1.3
INITIAL_EASE_FACTOR = 2.5
INITIAL_INTERVAL_DAYS = 1
PASSING_QUALITY = 3

SECONDS_PER_DAY = 24 * 60 * 60

Timestamp = Union[datetime, str]


def to_utc(value: Optional[Timestamp], field: str = 'timestamp',
           allow_none: bool = False) -> Optional[datetime]:
    """
    Normalize a timestamp to an aware UTC datetime.

    Accepts aware datetimes, naive datetimes (taken as UTC) and ISO-8601
    strings. None passes through only when allow_none is set.
    """
    if value is None:
        if allow_none:
            return None
        raise InvalidTimestampError(value, field)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise InvalidTimestampError(value, field) from None
    if not isinstance(value, datetime):
        raise InvalidTimestampError(value, field)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def validate_quality(quality) -> int:
    """Return quality unchanged, or raise InvalidQualityError. Never clamps."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidQualityError(quality)
    if not 0 <= quality <= 5:
        raise InvalidQualityError(quality)
    return quality


def _validate_interval(interval_days) -> int:
    if isinstance(interval_days, bool) or not isinstance(interval_days, int):
        raise InvalidStateError(f"interval_days must be an integer, got {interval_days!r}")
    if interval_days < 0:
        raise InvalidStateError(f"interval_days must be >= 0, got {interval_days}")
    return interval_days


def _resolve_now(now: Optional[Timestamp]) -> datetime:
    if now is None:
        return SYSTEM_CLOCK.now()
    return to_utc(now, 'now')


def _round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; schedules use half-up.
    return int(math.floor(value + 0.5))


def _add_days(start: datetime, days: int) -> datetime:
    try:
        return start + timedelta(days=days)
    except OverflowError:
        raise InvalidStateError(
            f"interval of {days} days from {start.isoformat()} is out of range"
        ) from None


@dataclass(frozen=True)
class SchedulingState:
    """
    Scheduling state of one vocabulary word.

    next_review is derived from last_reviewed + interval_days and is never
    stored on its own.
    """
    ease_factor: float = INITIAL_EASE_FACTOR
    interval_days: int = INITIAL_INTERVAL_DAYS
    repetitions: int = 0
    last_reviewed: Optional[datetime] = None

    def __post_init__(self):
        ease = self.ease_factor
        if (isinstance(ease, bool) or not isinstance(ease, (int, float))
                or not math.isfinite(ease)):
            raise InvalidStateError(f"ease_factor must be a finite number, got {ease!r}")
        if ease < MIN_EASE_FACTOR:
            raise InvalidStateError(
                f"ease_factor must be >= {MIN_EASE_FACTOR}, got {ease}"
            )
        _validate_interval(self.interval_days)
        reps = self.repetitions
        if isinstance(reps, bool) or not isinstance(reps, int) or reps < 0:
            raise InvalidStateError(f"repetitions must be an integer >= 0, got {reps!r}")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, 'ease_factor', float(ease))
        object.__setattr__(
            self, 'last_reviewed',
            to_utc(self.last_reviewed, 'last_reviewed', allow_none=True),
        )

    @property
    def next_review(self) -> Optional[datetime]:
        """last_reviewed + interval_days, or None for a never-reviewed word."""
        if self.last_reviewed is None:
            return None
        return _add_days(self.last_reviewed, self.interval_days)

    def next_review_at(self, now: Optional[Timestamp] = None) -> datetime:
        """Like next_review, but a never-reviewed word is due "now"."""
        due = self.next_review
        return due if due is not None else _resolve_now(now)


@dataclass(frozen=True)
class ReviewResult:
    """
    Output of calculate_next_review.

    is_due is always True: it marks this as the authoritative next schedule,
    not a live due check.
    """
    ease_factor: float
    interval_days: int
    repetitions: int
    next_review: datetime
    reviewed_at: datetime
    is_due: bool = True

    def to_state(self) -> SchedulingState:
        """The state a caller should persist after this review."""
        return SchedulingState(
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            repetitions=self.repetitions,
            last_reviewed=self.reviewed_at,
        )


def initial_state() -> SchedulingState:
    """Scheduling state for a newly introduced word."""
    return SchedulingState()


def calculate_next_review(
    state: SchedulingState,
    quality: int,
    now: Optional[Timestamp] = None,
) -> ReviewResult:
    """
    Compute the next schedule after a review of quality 0-5.

    Args:
        state:   Current scheduling state
        quality: Self-assessed recall quality, integer 0-5
        now:     Review time (defaults to the system clock)

    Returns:
        ReviewResult with the new ease, interval, repetitions and next_review.

    Raises:
        InvalidQualityError if quality is not an integer in 0..5.
        InvalidStateError if the new schedule falls outside the datetime range.
    """
    validate_quality(quality)
    reviewed_at = _resolve_now(now)

    if quality >= PASSING_QUALITY:
        delta = 0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)
        new_ease = max(MIN_EASE_FACTOR, state.ease_factor + delta)
    else:
        new_ease = max(MIN_EASE_FACTOR, state.ease_factor - 0.2)

    if quality < PASSING_QUALITY:
        # Lapse: back to the learning phase, review tomorrow
        new_repetitions = 0
        new_interval = 1
    else:
        new_repetitions = state.repetitions + 1
        if new_repetitions == 1:
            new_interval = 1
        elif new_repetitions == 2:
            new_interval = 6
        else:
            try:
                new_interval = _round_half_up(state.interval_days * new_ease)
            except OverflowError:
                raise InvalidStateError(
                    f"interval_days {state.interval_days} is too large to reschedule"
                ) from None
        new_interval = max(1, new_interval)

    result = ReviewResult(
        ease_factor=new_ease,
        interval_days=new_interval,
        repetitions=new_repetitions,
        next_review=_add_days(reviewed_at, new_interval),
        reviewed_at=reviewed_at,
    )
    logger.debug(
        "q=%d ease %.4f->%.4f interval %d->%d reps %d->%d",
        quality, state.ease_factor, new_ease, state.interval_days,
        new_interval, state.repetitions, new_repetitions,
    )
    return result


def _due_at(last_reviewed: Optional[Timestamp], interval_days: int) -> Optional[datetime]:
    last = to_utc(last_reviewed, 'last_reviewed', allow_none=True)
    _validate_interval(interval_days)
    if last is None:
        return None
    return _add_days(last, interval_days)


def is_due_for_review(
    last_reviewed: Optional[Timestamp],
    interval_days: int,
    now: Optional[Timestamp] = None,
) -> bool:
    """True iff now >= last_reviewed + interval_days. Never reviewed is due."""
    due = _due_at(last_reviewed, interval_days)
    if due is None:
        return True
    return _resolve_now(now) >= due


def days_until_review(
    last_reviewed: Optional[Timestamp],
    interval_days: int,
    now: Optional[Timestamp] = None,
) -> int:
    """Whole days until the next review, rounded up. Negative = overdue."""
    due = _due_at(last_reviewed, interval_days)
    if due is None:
        return 0
    diff = (due - _resolve_now(now)).total_seconds() / SECONDS_PER_DAY
    # ceil(-0.3) is -0.0; int() folds it to 0
    return int(math.ceil(diff))


def get_review_priority(
    last_reviewed: Optional[Timestamp],
    interval_days: int,
    ease_factor: float,
    now: Optional[Timestamp] = None,
) -> int:
    """
    Urgency score for ordering a review queue; higher = more urgent.

    ease_factor is accepted but not weighted.
    """
    days = days_until_review(last_reviewed, interval_days, now)
    if days <= 0:
        return abs(days) * 10
    if days <= 1:
        return 5
    return max(1, 5 - days)


def calculate_retention_rate(ease_factor: float, interval_days: int) -> float:
    """
    Heuristic recall probability in [.., 0.98] for display.

    Not measured, and never used by the scheduler.
    """
    _validate_interval(interval_days)
    ease_bonus = min(0.1, (ease_factor - 2.0) * 0.05)
    interval_bonus = min(0.05, math.log(interval_days + 1) * 0.01)
    return min(0.98, 0.85 + ease_bonus + interval_bonus)


def review_status(
    last_reviewed: Optional[Timestamp],
    interval_days: int,
    now: Optional[Timestamp] = None,
) -> ReviewStatus:
    """Display bucket: overdue, due today, due tomorrow or later."""
    days = days_until_review(last_reviewed, interval_days, now)
    if days < 0:
        return ReviewStatus.OVERDUE
    if days == 0:
        return ReviewStatus.DUE_TODAY
    if days == 1:
        return ReviewStatus.DUE_TOMORROW
    return ReviewStatus.FUTURE


class Scheduler:
    """The scheduling functions bound to an injected Clock."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SYSTEM_CLOCK

    def now(self) -> datetime:
        return self.clock.now()

    def calculate_next_review(self, state: SchedulingState, quality: int) -> ReviewResult:
        return calculate_next_review(state, quality, now=self.clock.now())

    def is_due_for_review(self, last_reviewed, interval_days: int) -> bool:
        return is_due_for_review(last_reviewed, interval_days, now=self.clock.now())

    def days_until_review(self, last_reviewed, interval_days: int) -> int:
        return days_until_review(last_reviewed, interval_days, now=self.clock.now())

    def get_review_priority(self, last_reviewed, interval_days: int, ease_factor: float) -> int:
        return get_review_priority(last_reviewed, interval_days, ease_factor,
                                   now=self.clock.now())

    def review_status(self, last_reviewed, interval_days: int) -> ReviewStatus:
        return review_status(last_reviewed, interval_days, now=self.clock.now())