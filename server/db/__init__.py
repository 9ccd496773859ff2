"""Database layer: SQLAlchemy models and session."""

from server.db.models import Base, LearningSessionRow, ReviewHistoryRow, VocabularyWordRow
from server.db.session import get_db, init_db

__all__ = [
    "Base",
    "VocabularyWordRow",
    "ReviewHistoryRow",
    "LearningSessionRow",
    "get_db",
    "init_db",
]
