"""JSONL-backed vocabulary storage with CRUD and review recording."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from srs.clock import SYSTEM_CLOCK
from srs.history import append_review, drop_word_history
from srs.models import CONTENT_FIELDS, SCHEDULING_FIELDS, VocabularyWord
from srs.review import ReviewOutcome, apply_review
from srs.scheduler import Timestamp, is_due_for_review, to_utc
from srs.word_types import DifficultyLevel, WordStatus

logger = logging.getLogger("wortschatz.srs")


class WordStore:
    """
    JSONL-backed word storage.

    Loads entire file into memory on init (fine for <10k words).
    Writes rewrite the entire file on mutation. Review history goes to a
    separate append-only log when history_path is given.
    """

    def __init__(self, db_path, history_path=None):
        self.db_path = Path(db_path)
        self.history_path = Path(history_path) if history_path else None
        self._words: Dict[str, VocabularyWord] = {}
        self._load()

    def _load(self) -> None:
        if not self.db_path.exists():
            return
        with open(self.db_path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                word = VocabularyWord.from_dict(json.loads(line))
                self._words[word.word_id] = word

    def _save(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.db_path, 'w', encoding='utf-8') as f:
            for word in self._words.values():
                f.write(json.dumps(word.to_dict(), ensure_ascii=False) + '\n')

    def _require(self, word_id: str) -> VocabularyWord:
        word = self._words.get(word_id)
        if word is None:
            raise KeyError(f"Word not found: {word_id}")
        return word

    def add_word(self, word: VocabularyWord) -> VocabularyWord:
        """Insert a new word. Raises ValueError if its id already exists."""
        if word.word_id in self._words:
            raise ValueError(f"Word already exists: {word.word_id}")
        self._words[word.word_id] = word
        self._save()
        logger.info("Added word %s (%s = %s)", word.word_id, word.german, word.english)
        return word

    def upsert_word(self, word: VocabularyWord) -> None:
        """Insert or update a word by word_id."""
        self._words[word.word_id] = word
        self._save()

    def upsert_words(self, words: List[VocabularyWord]) -> None:
        """Batch upsert -- single save at the end."""
        for word in words:
            self._words[word.word_id] = word
        self._save()

    def get_word(self, word_id: str) -> Optional[VocabularyWord]:
        return self._words.get(word_id)

    def update_word(self, word_id: str, now: Optional[Timestamp] = None, **fields) -> VocabularyWord:
        """
        Edit content fields of a word.

        Scheduling fields are rejected: they change only through record_review.
        """
        word = self._require(word_id)
        blocked = sorted(set(fields) & set(SCHEDULING_FIELDS))
        if blocked:
            raise ValueError(f"Scheduling fields are set by reviews only: {', '.join(blocked)}")
        unknown = sorted(set(fields) - set(CONTENT_FIELDS))
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(unknown)}")

        for side in ('german', 'english'):
            if side in fields:
                fields[side] = (fields[side] or '').strip()
                if not fields[side]:
                    raise ValueError(f"{side} must be non-empty")
        if 'status' in fields:
            fields['status'] = WordStatus(fields['status']).value
        if 'difficulty_level' in fields:
            fields['difficulty_level'] = DifficultyLevel(fields['difficulty_level']).value
        for name, value in fields.items():
            setattr(word, name, list(value or []) if name == 'tags' else value)
        word.updated_at = to_utc(now, 'now') if now is not None else SYSTEM_CLOCK.now()
        self._save()
        return word

    def delete_word(self, word_id: str) -> None:
        """Delete a word and its review history."""
        self._require(word_id)
        del self._words[word_id]
        self._save()
        if self.history_path is not None:
            dropped = drop_word_history(self.history_path, word_id)
            logger.info("Deleted word %s (%d history records)", word_id, dropped)

    def record_review(
        self,
        word_id: str,
        quality: int,
        now: Optional[Timestamp] = None,
        review_duration_seconds: Optional[int] = None,
        session_id: Optional[str] = None,
    ) -> ReviewOutcome:
        """Apply a review of the given quality, persist it and log it."""
        word = self._require(word_id)
        outcome = apply_review(
            word, quality, now=now,
            review_duration_seconds=review_duration_seconds,
            session_id=session_id,
        )
        self._words[word_id] = outcome.word
        self._save()
        if self.history_path is not None:
            append_review(self.history_path, outcome.record)
        return outcome

    def get_due_words(self, now: Timestamp) -> List[VocabularyWord]:
        """All due words, earliest next_review first."""
        now = to_utc(now, 'now')
        due = [
            w for w in self._words.values()
            if is_due_for_review(w.last_reviewed, w.interval_days, now)
        ]
        due.sort(key=lambda w: (w.next_review_at(now), w.word_id))
        return due

    def filter_words(
        self,
        status: str = 'all',
        difficulty: str = 'all',
        query: str = '',
    ) -> List[VocabularyWord]:
        """Filter by status, difficulty and a case-insensitive text search."""
        words = list(self._words.values())
        if status != 'all':
            words = [w for w in words if w.status == status]
        if difficulty != 'all':
            words = [w for w in words if w.difficulty_level == difficulty]
        q = query.strip().lower()
        if q:
            words = [
                w for w in words
                if q in w.german.lower()
                or q in w.english.lower()
                or (w.example and q in w.example.lower())
                or (w.notes and q in w.notes.lower())
            ]
        return words

    def all_words(self) -> List[VocabularyWord]:
        return list(self._words.values())

    def count(self) -> int:
        return len(self._words)
