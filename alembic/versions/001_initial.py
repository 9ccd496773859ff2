"""Initial schema: vocabulary_words, learning_sessions, vocabulary_review_history.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "vocabulary_words",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("german", sa.String(255), nullable=False),
        sa.Column("english", sa.String(255), nullable=False),
        sa.Column("example", sa.Text, nullable=True),
        sa.Column("status", sa.String(16), server_default="learning"),
        sa.Column("difficulty_level", sa.String(2), server_default="A1"),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("tags", sa.JSON, nullable=True),
        sa.Column("ease_factor", sa.Float, server_default="2.5"),
        sa.Column("interval_days", sa.Integer, server_default="1"),
        sa.Column("repetitions", sa.Integer, server_default="0"),
        sa.Column("last_reviewed", sa.DateTime(timezone=True), nullable=True),
        sa.Column("next_review", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_quality_rating", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("ease_factor >= 1.3", name="ck_vocabulary_words_ease_floor"),
    )
    op.create_index("ix_vocabulary_words_status", "vocabulary_words", ["status"])
    op.create_index("ix_vocabulary_words_next_review", "vocabulary_words", ["next_review"])

    op.create_table(
        "learning_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("session_type", sa.String(16), server_default="vocabulary"),
        sa.Column("session_date", sa.Date, nullable=False),
        sa.Column("duration_minutes", sa.Integer, server_default="0"),
        sa.Column("duration_seconds", sa.Integer, server_default="0"),
        sa.Column("words_reviewed", sa.Integer, server_default="0"),
        sa.Column("words_correct", sa.Integer, server_default="0"),
        sa.Column("accuracy_rate", sa.Float, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("session_type", "session_date"),
    )
    op.create_index("ix_learning_sessions_session_date", "learning_sessions", ["session_date"])

    op.create_table(
        "vocabulary_review_history",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "word_id", sa.String(36),
            sa.ForeignKey("vocabulary_words.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "session_id", sa.String(36),
            sa.ForeignKey("learning_sessions.id", ondelete="SET NULL"), nullable=True,
        ),
        sa.Column("quality_rating", sa.Integer, nullable=False),
        sa.Column("ease_factor_before", sa.Float, nullable=False),
        sa.Column("ease_factor_after", sa.Float, nullable=False),
        sa.Column("interval_before", sa.Integer, nullable=False),
        sa.Column("interval_after", sa.Integer, nullable=False),
        sa.Column("repetitions_before", sa.Integer, nullable=False),
        sa.Column("repetitions_after", sa.Integer, nullable=False),
        sa.Column("review_duration_seconds", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quality_rating BETWEEN 0 AND 5", name="ck_review_history_quality"),
    )
    op.create_index("ix_vocabulary_review_history_word_id", "vocabulary_review_history", ["word_id"])
    op.create_index("ix_vocabulary_review_history_created_at", "vocabulary_review_history", ["created_at"])


def downgrade() -> None:
    op.drop_table("vocabulary_review_history")
    op.drop_table("learning_sessions")
    op.drop_table("vocabulary_words")
