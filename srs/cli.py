"""
Vocabulary trainer CLI.

Usage:
    python -m srs.cli --db words.jsonl add "der Hund" "the dog" [--example ...] [--level A1] [--tag animals]
    python -m srs.cli --db words.jsonl list [--status learning] [--difficulty A1] [--search hund]
    python -m srs.cli --db words.jsonl show <word_id>
    python -m srs.cli --db words.jsonl delete <word_id>
    python -m srs.cli --db words.jsonl due [--limit 20]
    python -m srs.cli --db words.jsonl review [--type review|learning|mixed]
    python -m srs.cli --db words.jsonl rate <word_id> <quality>
    python -m srs.cli --db words.jsonl stats
    python -m srs.cli --db words.jsonl sessions
"""

import argparse
import logging
import sys
from pathlib import Path

from srs.clock import SYSTEM_CLOCK
from srs.errors import SchedulingError
from srs.history import read_history, summarize_sessions
from srs.models import new_word
from srs.review_queue import build_review_queue, build_session_words
from srs.scheduler import calculate_retention_rate, days_until_review
from srs.session import run_flashcard_session
from srs.stats import compute_review_stats
from srs.storage import WordStore
from srs.word_types import DifficultyLevel, SessionType, WordStatus

logger = logging.getLogger("wortschatz.cli")


def _history_path(args) -> Path:
    if args.history:
        return Path(args.history)
    return Path(args.db).parent / 'review_history.jsonl'


def _open_store(args) -> WordStore:
    return WordStore(args.db, history_path=_history_path(args))


def cmd_add(args):
    """Add a new word."""
    store = _open_store(args)
    word = new_word(
        args.german, args.english,
        example=args.example,
        difficulty_level=args.level,
        notes=args.notes,
        tags=args.tag,
        now=SYSTEM_CLOCK.now(),
    )
    store.add_word(word)
    print(f"Added {word.word_id}: {word.german} = {word.english}")


def cmd_list(args):
    """List words, optionally filtered."""
    store = _open_store(args)
    words = store.filter_words(status=args.status, difficulty=args.difficulty,
                               query=args.search)
    if not words:
        print("No words match.")
        return
    words.sort(key=lambda w: w.german.lower())
    print(f"\n{len(words)} word(s):\n")
    for w in words:
        print(f"  {w.word_id}  [{w.status:<8}] [{w.difficulty_level}] "
              f"{w.german} = {w.english}")


def cmd_show(args):
    """Show details for a specific word."""
    store = _open_store(args)
    word = store.get_word(args.word_id)
    if word is None:
        print(f"Word not found: {args.word_id}")
        sys.exit(1)

    now = SYSTEM_CLOCK.now()
    print(f"\nWord: {word.word_id}")
    print(f"  German:     {word.german}")
    print(f"  English:    {word.english}")
    if word.example:
        print(f"  Example:    {word.example}")
    if word.notes:
        print(f"  Notes:      {word.notes}")
    print(f"  Level:      {word.difficulty_level}")
    print(f"  Status:     {word.status}")
    print(f"  Tags:       {', '.join(word.tags)}")

    print(f"\n  Schedule:")
    print(f"    Next:       {word.next_review_at(now).isoformat()} "
          f"({days_until_review(word.last_reviewed, word.interval_days, now)}d)")
    print(f"    Interval:   {word.interval_days}d")
    print(f"    Ease:       {word.ease_factor:.2f}")
    print(f"    Reps:       {word.repetitions}")
    print(f"    Reviewed:   {word.last_reviewed.isoformat() if word.last_reviewed else 'never'}")
    print(f"    Retention:  "
          f"{calculate_retention_rate(word.ease_factor, word.interval_days) * 100:.1f}%")

    history = read_history(_history_path(args), word_id=word.word_id)
    if history:
        print(f"\n  History ({len(history)} review(s)):")
        for r in history[-10:]:
            print(f"    {r.reviewed_at.date().isoformat()}  q={r.quality_rating}  "
                  f"interval {r.interval_before}->{r.interval_after}d  "
                  f"ease {r.ease_factor_before:.2f}->{r.ease_factor_after:.2f}")


def cmd_delete(args):
    """Delete a word and its history."""
    store = _open_store(args)
    try:
        store.delete_word(args.word_id)
    except KeyError:
        print(f"Word not found: {args.word_id}")
        sys.exit(1)
    print(f"Deleted {args.word_id}")


def cmd_due(args):
    """Show the review queue."""
    store = _open_store(args)
    queue = build_review_queue(store.all_words(), SYSTEM_CLOCK.now(), limit=args.limit)
    if not queue:
        print("No words due today.")
        return
    print(f"\n{len(queue)} word(s) due for review:\n")
    for i, dw in enumerate(queue, 1):
        w = dw.word
        print(f"  {i}. {w.german} = {w.english}")
        print(f"     {dw.review_status}  overdue={dw.days_overdue}d  "
              f"priority={dw.priority}  ease={w.ease_factor:.2f}  reps={w.repetitions}")


def cmd_review(args):
    """Run an interactive flashcard session."""
    store = _open_store(args)
    words = build_session_words(store.all_words(), args.type, SYSTEM_CLOCK.now())
    if not words:
        print("No words available for review. Come back later!")
        return
    log_path = Path(args.db).parent / 'session_log.jsonl'
    run_flashcard_session(store, words, log_path=log_path, session_type=args.type)


def cmd_rate(args):
    """Record a single review without the interactive session."""
    store = _open_store(args)
    try:
        outcome = store.record_review(args.word_id, args.quality, now=SYSTEM_CLOCK.now())
    except KeyError:
        print(f"Word not found: {args.word_id}")
        sys.exit(1)
    r = outcome.result
    print(f"{outcome.word.german}: next review {r.next_review.date().isoformat()} "
          f"(interval {r.interval_days}d, ease {r.ease_factor:.2f}, "
          f"reps {r.repetitions}, status {outcome.word.status})")


def cmd_stats(args):
    """Show vocabulary statistics."""
    store = _open_store(args)
    stats = compute_review_stats(
        store.all_words(), read_history(_history_path(args)), SYSTEM_CLOCK.now(),
    )
    print(f"\nVocabulary: {args.db}")
    print(f"  Total words:     {stats['total']}")
    print(f"  Learning:        {stats['learning']}")
    print(f"  Familiar:        {stats['familiar']}")
    print(f"  Mastered:        {stats['mastered']}")
    print(f"  Due for review:  {stats['due_for_review']} "
          f"({stats['overdue']} overdue)")
    print(f"  Reviewed today:  {stats['reviewed_today']}")
    print(f"  Average ease:    {stats['average_ease_factor']:.2f}")
    print(f"  Repetitions:     {stats['total_repetitions']}")
    print(f"  Study streak:    {stats['study_streak']} day(s)")
    print(f"  Est. retention:  {stats['average_retention'] * 100:.1f}%")


def cmd_sessions(args):
    """Show per-day learning sessions."""
    sessions = summarize_sessions(read_history(_history_path(args)))
    if not sessions:
        print("No reviews recorded yet.")
        return
    for s in sessions[:30]:
        print(f"  {s['date']}  reviewed={s['words_reviewed']}  "
              f"correct={s['words_correct']}  accuracy={s['accuracy_rate']:.1f}%  "
              f"time={s['duration_minutes']}m")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Vocabulary trainer -- SM-2 spaced repetition",
        prog="python -m srs.cli",
    )
    parser.add_argument(
        '--db', default='words.jsonl',
        help="Path to word storage JSONL file (default: words.jsonl)",
    )
    parser.add_argument(
        '--history', default=None,
        help="Path to review history JSONL (default: <db_dir>/review_history.jsonl)",
    )
    parser.add_argument(
        '--log-level', default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help="Logging level (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    add_parser = subparsers.add_parser('add', help='Add a word')
    add_parser.add_argument('german')
    add_parser.add_argument('english')
    add_parser.add_argument('--example', default=None)
    add_parser.add_argument('--notes', default=None)
    add_parser.add_argument('--level', default=DifficultyLevel.A1.value,
                            choices=[d.value for d in DifficultyLevel])
    add_parser.add_argument('--tag', action='append', default=[],
                            help='Tag (repeatable)')

    list_parser = subparsers.add_parser('list', help='List words')
    list_parser.add_argument('--status', default='all',
                             choices=['all'] + [s.value for s in WordStatus])
    list_parser.add_argument('--difficulty', default='all',
                             choices=['all'] + [d.value for d in DifficultyLevel])
    list_parser.add_argument('--search', default='', help='Text search')

    show_parser = subparsers.add_parser('show', help='Show word details')
    show_parser.add_argument('word_id')

    delete_parser = subparsers.add_parser('delete', help='Delete a word')
    delete_parser.add_argument('word_id')

    due_parser = subparsers.add_parser('due', help='Show words due for review')
    due_parser.add_argument('--limit', type=int, default=None)

    review_parser = subparsers.add_parser('review', help='Run a flashcard session')
    review_parser.add_argument('--type', default=SessionType.REVIEW.value,
                               choices=[t.value for t in SessionType])

    rate_parser = subparsers.add_parser('rate', help='Record one review')
    rate_parser.add_argument('word_id')
    rate_parser.add_argument('quality', type=int, help='Recall quality 0-5')

    subparsers.add_parser('stats', help='Show vocabulary statistics')
    subparsers.add_parser('sessions', help='Show per-day learning sessions')
    return parser


COMMANDS = {
    'add': cmd_add,
    'list': cmd_list,
    'show': cmd_show,
    'delete': cmd_delete,
    'due': cmd_due,
    'review': cmd_review,
    'rate': cmd_rate,
    'stats': cmd_stats,
    'sessions': cmd_sessions,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return
    try:
        handler(args)
    except SchedulingError as e:
        print(f"Invalid input: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.debug("Command %s rejected", args.command, exc_info=True)
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
