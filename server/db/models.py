"""SQLAlchemy models for vocabulary words, review history and learning sessions."""

from datetime import date, datetime
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint, Date, DateTime, Float, ForeignKey, Integer, JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class VocabularyWordRow(Base):
    __tablename__ = "vocabulary_words"
    __table_args__ = (CheckConstraint("ease_factor >= 1.3", name="ck_vocabulary_words_ease_floor"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    german: Mapped[str] = mapped_column(String(255), nullable=False)
    english: Mapped[str] = mapped_column(String(255), nullable=False)
    example: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="learning", index=True)
    difficulty_level: Mapped[str] = mapped_column(String(2), default="A1")
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, default=list)

    # SM-2 scheduling columns; next_review is written from last_reviewed + interval_days
    ease_factor: Mapped[float] = mapped_column(Float, default=2.5)
    interval_days: Mapped[int] = mapped_column(Integer, default=1)
    repetitions: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    next_review: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    last_quality_rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    history: Mapped[List["ReviewHistoryRow"]] = relationship(
        back_populates="word", cascade="all, delete-orphan",
    )


class LearningSessionRow(Base):
    """One vocabulary session per UTC day; counters grow with each review."""

    __tablename__ = "learning_sessions"
    __table_args__ = (UniqueConstraint("session_type", "session_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    session_type: Mapped[str] = mapped_column(String(16), default="vocabulary")
    session_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=0)
    duration_seconds: Mapped[int] = mapped_column(Integer, default=0)
    words_reviewed: Mapped[int] = mapped_column(Integer, default=0)
    words_correct: Mapped[int] = mapped_column(Integer, default=0)
    accuracy_rate: Mapped[float] = mapped_column(Float, default=0.0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ReviewHistoryRow(Base):
    __tablename__ = "vocabulary_review_history"
    __table_args__ = (
        CheckConstraint("quality_rating BETWEEN 0 AND 5", name="ck_review_history_quality"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    word_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vocabulary_words.id", ondelete="CASCADE"), index=True, nullable=False,
    )
    session_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("learning_sessions.id", ondelete="SET NULL"), nullable=True,
    )
    quality_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    ease_factor_before: Mapped[float] = mapped_column(Float, nullable=False)
    ease_factor_after: Mapped[float] = mapped_column(Float, nullable=False)
    interval_before: Mapped[int] = mapped_column(Integer, nullable=False)
    interval_after: Mapped[int] = mapped_column(Integer, nullable=False)
    repetitions_before: Mapped[int] = mapped_column(Integer, nullable=False)
    repetitions_after: Mapped[int] = mapped_column(Integer, nullable=False)
    review_duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)

    word: Mapped[VocabularyWordRow] = relationship(back_populates="history")
