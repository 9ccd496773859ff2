"""Data models: VocabularyWord and ReviewRecord dataclasses."""

import hashlib
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from srs.scheduler import (
    INITIAL_EASE_FACTOR,
    INITIAL_INTERVAL_DAYS,
    SchedulingState,
    Timestamp,
    to_utc,
)
from srs.word_types import DifficultyLevel, WordStatus

# Fields a caller may edit directly. Everything scheduling-related is written
# only by recording a review.
CONTENT_FIELDS = (
    'german', 'english', 'example', 'status', 'difficulty_level', 'notes', 'tags',
)
SCHEDULING_FIELDS = (
    'ease_factor', 'interval_days', 'repetitions', 'last_reviewed',
    'next_review', 'last_quality_rating',
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class VocabularyWord:
    """
    A German/English vocabulary pair with SM-2 scheduling metadata.

    next_review is derived (last_reviewed + interval_days) and is written
    out by to_dict() for consumers, but ignored by from_dict().
    """
    word_id: str
    german: str
    english: str
    example: Optional[str] = None
    status: str = WordStatus.LEARNING.value
    difficulty_level: str = DifficultyLevel.A1.value
    notes: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    # SM-2 scheduling fields
    ease_factor: float = INITIAL_EASE_FACTOR
    interval_days: int = INITIAL_INTERVAL_DAYS
    repetitions: int = 0
    last_reviewed: Optional[datetime] = None
    last_quality_rating: Optional[int] = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        self.status = WordStatus(self.status).value
        self.difficulty_level = DifficultyLevel(self.difficulty_level).value
        self.last_reviewed = to_utc(self.last_reviewed, 'last_reviewed', allow_none=True)
        self.created_at = to_utc(self.created_at, 'created_at')
        self.updated_at = to_utc(self.updated_at, 'updated_at')

    @property
    def state(self) -> SchedulingState:
        """Current scheduling state (validates the scheduling fields)."""
        return SchedulingState(
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            repetitions=self.repetitions,
            last_reviewed=self.last_reviewed,
        )

    @property
    def next_review(self) -> Optional[datetime]:
        return self.state.next_review

    def next_review_at(self, now: Optional[Timestamp] = None) -> datetime:
        return self.state.next_review_at(now)

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['last_reviewed'] = _iso(self.last_reviewed)
        d['created_at'] = _iso(self.created_at)
        d['updated_at'] = _iso(self.updated_at)
        d['next_review'] = _iso(self.next_review)
        return d

    @classmethod
    def from_dict(cls, data: Dict) -> 'VocabularyWord':
        known = cls.__dataclass_fields__
        data = {k: v for k, v in data.items() if k in known}
        if data.get('tags') is None:
            data.pop('tags', None)
        return cls(**data)


@dataclass
class ReviewRecord:
    """One entry of a word's review history: the schedule before and after."""
    word_id: str
    quality_rating: int
    ease_factor_before: float
    ease_factor_after: float
    interval_before: int
    interval_after: int
    repetitions_before: int
    repetitions_after: int
    reviewed_at: datetime
    review_duration_seconds: Optional[int] = None
    session_id: Optional[str] = None
    record_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def __post_init__(self):
        self.reviewed_at = to_utc(self.reviewed_at, 'reviewed_at')

    @property
    def correct(self) -> bool:
        return self.quality_rating >= 3

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['reviewed_at'] = _iso(self.reviewed_at)
        return d

    @classmethod
    def from_dict(cls, data: Dict) -> 'ReviewRecord':
        known = cls.__dataclass_fields__
        return cls(**{k: v for k, v in data.items() if k in known})


def make_word_id(german: str, english: str) -> str:
    """
    Deterministic word ID from the German and English sides.
    SHA-256 truncated to 16 hex chars.
    """
    key = german.strip().lower() + '|' + english.strip().lower()
    return hashlib.sha256(key.encode('utf-8')).hexdigest()[:16]


def new_word(
    german: str,
    english: str,
    example: Optional[str] = None,
    difficulty_level: str = DifficultyLevel.A1.value,
    notes: Optional[str] = None,
    tags: Optional[List[str]] = None,
    now: Optional[Timestamp] = None,
    word_id: Optional[str] = None,
) -> VocabularyWord:
    """A freshly introduced word: initial scheduling state, status learning."""
    german = (german or '').strip()
    english = (english or '').strip()
    if not german or not english:
        raise ValueError("Both german and english must be non-empty")
    created = to_utc(now, 'now') if now is not None else _utcnow()
    return VocabularyWord(
        word_id=word_id or make_word_id(german, english),
        german=german,
        english=english,
        example=example or None,
        difficulty_level=difficulty_level,
        notes=notes,
        tags=list(tags or []),
        created_at=created,
        updated_at=created,
    )
