"""Enumerations for vocabulary words and review queues."""

from enum import Enum


class WordStatus(str, Enum):
    """Coarse learning bucket shown to the user."""
    LEARNING = "learning"
    FAMILIAR = "familiar"
    MASTERED = "mastered"


class DifficultyLevel(str, Enum):
    """CEFR level of a word."""
    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


class ReviewStatus(str, Enum):
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    DUE_TOMORROW = "due_tomorrow"
    FUTURE = "future"


class SessionType(str, Enum):
    """Flashcard session composition."""
    REVIEW = "review"      # due words only
    LEARNING = "learning"  # never-reviewed words only
    MIXED = "mixed"        # due words topped up with new ones
