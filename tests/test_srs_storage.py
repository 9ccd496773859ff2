"""Tests for srs/storage.py -- JSONL word store."""

import sys
import tempfile
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from srs.errors import InvalidQualityError
from srs.history import read_history
from srs.models import new_word
from srs.storage import WordStore


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _store(tmp, history=True):
    tmp = Path(tmp)
    return WordStore(
        tmp / 'words.jsonl',
        history_path=tmp / 'review_history.jsonl' if history else None,
    )


def test_add_and_reload():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('der Zug', 'the train', tags=['travel'], now=NOW))
        assert store.count() == 1

        reloaded = _store(tmp)
        loaded = reloaded.get_word(word.word_id)
        assert loaded is not None
        assert loaded.german == 'der Zug'
        assert loaded.tags == ['travel']
        assert loaded.created_at == NOW


def test_add_duplicate_rejected():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        store.add_word(new_word('Bahn', 'railway', now=NOW))
        with pytest.raises(ValueError):
            store.add_word(new_word('Bahn', 'railway', now=NOW))


def test_upsert_words_batch():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        store.upsert_words([new_word(f'Wort{i}', f'word{i}', now=NOW) for i in range(4)])
        assert store.count() == 4
        assert _store(tmp).count() == 4


def test_missing_file_is_empty_store():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        assert store.count() == 0
        assert store.all_words() == []


def test_update_content_fields():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('Auto', 'car', now=NOW))
        later = NOW + timedelta(hours=1)
        store.update_word(word.word_id, now=later, example='Das Auto ist rot.',
                          difficulty_level='A2', tags=['vehicles'])
        loaded = _store(tmp).get_word(word.word_id)
        assert loaded.example == 'Das Auto ist rot.'
        assert loaded.difficulty_level == 'A2'
        assert loaded.tags == ['vehicles']
        assert loaded.updated_at == later


def test_update_rejects_scheduling_fields():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('Rad', 'wheel', now=NOW))
        with pytest.raises(ValueError):
            store.update_word(word.word_id, interval_days=30)
        with pytest.raises(ValueError):
            store.update_word(word.word_id, colour='blue')
        assert store.get_word(word.word_id).interval_days == 1


def test_update_invalid_status_leaves_word_untouched():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('Weg', 'path', now=NOW))
        with pytest.raises(ValueError):
            store.update_word(word.word_id, german='Pfad', status='expert')
        assert store.get_word(word.word_id).german == 'Weg'


def test_update_empty_side_rejected():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('Berg', 'mountain', now=NOW))
        with pytest.raises(ValueError):
            store.update_word(word.word_id, english='  ')


def test_update_missing_word():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        with pytest.raises(KeyError):
            store.update_word('nope', notes='x')


def test_record_review_persists_and_logs():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('Meer', 'sea', now=NOW))
        outcome = store.record_review(word.word_id, 4, now=NOW, review_duration_seconds=9)
        assert outcome.word.repetitions == 1
        assert outcome.word.status == 'familiar'

        loaded = _store(tmp).get_word(word.word_id)
        assert loaded.repetitions == 1
        assert loaded.last_reviewed == NOW
        assert loaded.last_quality_rating == 4

        history = read_history(Path(tmp) / 'review_history.jsonl')
        assert len(history) == 1
        assert history[0].quality_rating == 4
        assert history[0].review_duration_seconds == 9


def test_record_review_invalid_quality_changes_nothing():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        word = store.add_word(new_word('See', 'lake', now=NOW))
        with pytest.raises(InvalidQualityError):
            store.record_review(word.word_id, 6, now=NOW)
        assert store.get_word(word.word_id).repetitions == 0
        assert read_history(Path(tmp) / 'review_history.jsonl') == []


def test_delete_drops_history():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        a = store.add_word(new_word('Fluss', 'river', now=NOW))
        b = store.add_word(new_word('Wald', 'forest', now=NOW))
        store.record_review(a.word_id, 5, now=NOW)
        store.record_review(b.word_id, 5, now=NOW)

        store.delete_word(a.word_id)
        assert store.get_word(a.word_id) is None
        remaining = read_history(Path(tmp) / 'review_history.jsonl')
        assert [r.word_id for r in remaining] == [b.word_id]

        with pytest.raises(KeyError):
            store.delete_word(a.word_id)


def test_get_due_words():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        fresh = store.add_word(new_word('neu', 'new', now=NOW))
        reviewed = store.add_word(new_word('alt', 'old', now=NOW - timedelta(days=10)))
        store.record_review(reviewed.word_id, 5, now=NOW - timedelta(days=3))
        later = store.add_word(new_word('bald', 'soon', now=NOW))
        store.record_review(later.word_id, 5, now=NOW)

        due = store.get_due_words(NOW)
        assert [w.word_id for w in due] == [reviewed.word_id, fresh.word_id]


def test_filter_words():
    with tempfile.TemporaryDirectory() as tmp:
        store = _store(tmp)
        store.add_word(new_word('laufen', 'to run', difficulty_level='A1', now=NOW))
        store.add_word(new_word('gehen', 'to walk', difficulty_level='A2',
                                example='Wir gehen nach Hause.', now=NOW))
        w = store.add_word(new_word('rennen', 'to sprint', difficulty_level='B1', now=NOW))
        store.record_review(w.word_id, 5, now=NOW)

        assert len(store.filter_words()) == 3
        assert [x.german for x in store.filter_words(difficulty='A2')] == ['gehen']
        assert [x.german for x in store.filter_words(status='familiar')] == ['rennen']
        assert [x.german for x in store.filter_words(query='HAUSE')] == ['gehen']
        assert [x.german for x in store.filter_words(query='run')] == ['laufen']
