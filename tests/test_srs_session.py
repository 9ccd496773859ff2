"""Tests for srs/session.py -- flashcard session runner."""

import sys
import tempfile
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from srs.clock import FixedClock
from srs.history import read_history
from srs.models import new_word
from srs.session import run_flashcard_session
from srs.session_log import read_session_log
from srs.storage import WordStore


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _make_store_with_words(tmp_dir, n=3):
    store = WordStore(
        Path(tmp_dir) / 'words.jsonl',
        history_path=Path(tmp_dir) / 'review_history.jsonl',
    )
    words = [
        new_word(f'Wort {i}', f'word {i}', example=f'Beispiel {i}',
                 now=NOW - timedelta(days=1))
        for i in range(n)
    ]
    store.upsert_words(words)
    return store, words


class _TickingClock(FixedClock):
    """Advances 10 seconds every time it is read."""

    def now(self):
        at = super().now()
        self.advance(seconds=10)
        return at


def test_full_session():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp)
        answers = iter(['', '5', '', '4', '', '1'])
        output_lines = []

        summary = run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=output_lines.append,
            clock=FixedClock(NOW),
            log_path=Path(tmp) / 'session_log.jsonl',
        )

        assert summary['reviewed'] == 3
        assert summary['correct'] == 2
        assert summary['incorrect'] == 1
        assert summary['skipped'] == 0
        assert summary['accuracy'] == 66.67
        assert summary['session_type'] == 'review'

        assert store.get_word(words[0].word_id).status == 'familiar'
        assert store.get_word(words[2].word_id).repetitions == 0
        history = read_history(Path(tmp) / 'review_history.jsonl')
        assert len(history) == 3
        assert {r.session_id for r in history} == {summary['session_id']}

        text = '\n'.join(output_lines)
        assert 'word 0' in text
        assert 'Beispiel 0' in text
        assert 'Perfect response - excellent!' in text
        assert 'SESSION COMPLETE' in text


def test_session_log_written():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=2)
        answers = iter(['', '2', '', '3'])
        log_path = Path(tmp) / 'session_log.jsonl'

        run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=lambda s: None,
            clock=FixedClock(NOW),
            log_path=log_path,
        )

        records = read_session_log(log_path)
        assert len(records) == 1
        rec = records[0]
        assert rec['words_reviewed'] == 2
        assert rec['quality_histogram']['2'] == 1
        assert rec['quality_histogram']['3'] == 1
        assert rec['avg_quality'] == 2.5
        assert rec['hardest_words'] == [words[0].word_id]
        assert rec['by_difficulty'] == {'A1': {'count': 2, 'avg_quality': 2.5}}
        assert rec['mastered_words'] == []
        assert rec['session_id'] is not None


def test_invalid_rating_reprompts():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=1)
        answers = iter(['', 'great', '7', '-1', '4'])
        output_lines = []

        summary = run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=output_lines.append,
            clock=FixedClock(NOW),
        )

        assert summary['reviewed'] == 1
        reprompts = [l for l in output_lines if 'whole number from 0 to 5' in l]
        assert len(reprompts) == 3
        assert store.get_word(words[0].word_id).last_quality_rating == 4


def test_non_ascii_digit_rating_reprompts():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=1)
        # superscript two and Arabic-Indic three are digits to str.isdigit()
        answers = iter(['', '\u00b2', '\u0663', ' 3 '])
        output_lines = []

        summary = run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=output_lines.append,
            clock=FixedClock(NOW),
        )

        assert summary['reviewed'] == 1
        reprompts = [l for l in output_lines if 'whole number from 0 to 5' in l]
        assert len(reprompts) == 2
        assert store.get_word(words[0].word_id).last_quality_rating == 3


def test_skip_and_quit():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=3)
        answers = iter(['s', '', '4', 'q'])

        summary = run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=lambda s: None,
            clock=FixedClock(NOW),
        )

        assert summary['skipped'] == 1
        assert summary['reviewed'] == 1
        assert store.get_word(words[0].word_id).repetitions == 0
        assert store.get_word(words[1].word_id).repetitions == 1
        assert store.get_word(words[2].word_id).repetitions == 0


def test_skip_at_rating_prompt():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=1)
        answers = iter(['', 's'])
        summary = run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=lambda s: None,
            clock=FixedClock(NOW),
        )
        assert summary['skipped'] == 1
        assert summary['reviewed'] == 0


def test_eof_ends_session():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=2)
        log_path = Path(tmp) / 'session_log.jsonl'

        def _eof(_prompt):
            raise EOFError

        summary = run_flashcard_session(
            store, words,
            input_fn=_eof,
            output_fn=lambda s: None,
            clock=FixedClock(NOW),
            log_path=log_path,
        )
        assert summary['reviewed'] == 0
        assert not log_path.exists()


def test_review_duration_recorded():
    with tempfile.TemporaryDirectory() as tmp:
        store, words = _make_store_with_words(tmp, n=1)
        answers = iter(['', '5'])
        run_flashcard_session(
            store, words,
            input_fn=lambda _: next(answers),
            output_fn=lambda s: None,
            clock=_TickingClock(NOW),
        )
        history = read_history(Path(tmp) / 'review_history.jsonl')
        assert history[0].review_duration_seconds == 10
