"""Pydantic request/response schemas for the Wortschatz API."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt


# ---- Health ----

class HealthResponse(BaseModel):
    ok: bool
    version: str


# ---- Words ----

class WordCreateRequest(BaseModel):
    german: str = Field(..., min_length=1, max_length=255)
    english: str = Field(..., min_length=1, max_length=255)
    example: Optional[str] = Field(default=None, max_length=2000)
    difficulty_level: str = "A1"
    notes: Optional[str] = Field(default=None, max_length=5000)
    tags: List[str] = Field(default_factory=list)


class WordUpdateRequest(BaseModel):
    """Content fields only; scheduling fields are rejected as extra input."""
    model_config = ConfigDict(extra="forbid")

    german: Optional[str] = Field(default=None, max_length=255)
    english: Optional[str] = Field(default=None, max_length=255)
    example: Optional[str] = Field(default=None, max_length=2000)
    status: Optional[str] = None
    difficulty_level: Optional[str] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    tags: Optional[List[str]] = None


class WordResponse(BaseModel):
    id: str
    german: str
    english: str
    example: Optional[str] = None
    status: str
    difficulty_level: str
    notes: Optional[str] = None
    tags: List[str]
    ease_factor: float
    interval_days: int
    repetitions: int
    last_reviewed: Optional[str] = None
    next_review: str
    last_quality_rating: Optional[int] = None
    retention: float
    created_at: str
    updated_at: str


class WordsResponse(BaseModel):
    count: int
    words: List[WordResponse]


# ---- Review ----

class ReviewRequest(BaseModel):
    # Range is checked by the scheduler so out-of-range ratings get its message
    quality: StrictInt
    review_duration_seconds: Optional[int] = Field(default=None, ge=0)


class ScheduleResult(BaseModel):
    ease_factor: float
    interval_days: int
    repetitions: int
    next_review: str
    is_due: bool


class HistoryEntry(BaseModel):
    id: str
    word_id: str
    session_id: Optional[str] = None
    quality_rating: int
    ease_factor_before: float
    ease_factor_after: float
    interval_before: int
    interval_after: int
    repetitions_before: int
    repetitions_after: int
    review_duration_seconds: Optional[int] = None
    created_at: str


class ReviewResponse(BaseModel):
    word: WordResponse
    result: ScheduleResult
    feedback: str
    history_entry: HistoryEntry


class HistoryResponse(BaseModel):
    word_id: str
    entries: List[HistoryEntry]


# ---- Queue ----

class DueWordResponse(WordResponse):
    priority: int
    days_until: int
    days_overdue: int
    review_status: str


class ReviewQueueResponse(BaseModel):
    due_count: int
    words: List[DueWordResponse]


# ---- Stats / sessions ----

class StatsResponse(BaseModel):
    learning: int
    familiar: int
    mastered: int
    total: int
    due_for_review: int
    due_today: int
    overdue: int
    reviewed_today: int
    average_ease_factor: float
    total_repetitions: int
    study_streak: int
    average_retention: float


class SessionSummary(BaseModel):
    id: str
    date: str
    session_type: str
    words_reviewed: int
    words_correct: int
    accuracy_rate: float
    duration_minutes: int


class SessionsResponse(BaseModel):
    sessions: List[SessionSummary]
    total_reviews: int
    average_accuracy: float
    total_study_minutes: int
