"""Interactive flashcard session runner with injectable IO and clock."""

import uuid
from pathlib import Path
from typing import Callable, Dict, List, Optional

from srs.clock import Clock, SYSTEM_CLOCK
from srs.models import VocabularyWord
from srs.review import QUALITY_MESSAGES
from srs.session_log import log_session
from srs.storage import WordStore

QUIT = 'q'
SKIP = 's'
VALID_RATINGS = {str(q): q for q in range(6)}


def _parse_quality(raw: str) -> Optional[int]:
    # str.isdigit() also accepts digits such as "\u00b2" that int() rejects
    raw = raw.strip()
    return VALID_RATINGS.get(raw)


def run_flashcard_session(
    store: WordStore,
    words: List[VocabularyWord],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    clock: Optional[Clock] = None,
    log_path: Optional[Path] = None,
    session_type: str = 'review',
) -> Dict:
    """
    Run a flashcard session over the given words.

    IO and time are injectable for testability.

    Flow per word:
        1. Show the German side
        2. Wait for reveal ('s' skips, 'q' quits)
        3. Show English side and example
        4. Collect a 0-5 self-rating (re-prompts until valid)
        5. Record the review (schedule, status, history)
        6. Show feedback and the next review date

    Returns:
        Summary dict: {session_id, session_type, reviewed, correct, incorrect,
                       skipped, accuracy, duration_minutes}
    """
    clock = clock or SYSTEM_CLOCK
    session_id = uuid.uuid4().hex
    started = clock.now()

    reviewed = 0
    correct = 0
    incorrect = 0
    skipped = 0
    words_log: List[Dict] = []

    output_fn(f"\n{'='*60}")
    output_fn(f"FLASHCARDS ({session_type}) -- {len(words)} word(s)")
    output_fn(f"{'='*60}")
    output_fn("Press Enter to reveal. Type 'q' to quit early, 's' to skip a word.\n")

    quit_requested = False
    for idx, word in enumerate(words, 1):
        output_fn(f"\n--- Word {idx}/{len(words)} [{word.difficulty_level}] ---")
        output_fn(f"  {word.german}")

        try:
            action = input_fn("\n(reveal) ").strip().lower()
        except (EOFError, KeyboardInterrupt):
            output_fn("\nSession ended.")
            break

        if action == QUIT:
            output_fn("Ending session early.")
            break
        if action == SKIP:
            skipped += 1
            output_fn("  (skipped)")
            continue

        shown_at = clock.now()
        output_fn(f"  = {word.english}")
        if word.example:
            output_fn(f"  e.g. {word.example}")

        quality = None
        while quality is None:
            try:
                raw = input_fn("Rate your recall 0-5: ")
            except (EOFError, KeyboardInterrupt):
                quit_requested = True
                break
            if raw.strip().lower() == QUIT:
                quit_requested = True
                break
            if raw.strip().lower() == SKIP:
                break
            quality = _parse_quality(raw)
            if quality is None:
                output_fn("  Please enter a whole number from 0 to 5.")

        if quit_requested:
            output_fn("Ending session early.")
            break
        if quality is None:
            skipped += 1
            output_fn("  (skipped)")
            continue

        now = clock.now()
        outcome = store.record_review(
            word.word_id, quality, now=now,
            review_duration_seconds=int((now - shown_at).total_seconds()),
            session_id=session_id,
        )
        result = outcome.result

        output_fn(f"  {QUALITY_MESSAGES[quality]}")
        output_fn(f"  Next review: {result.next_review.date().isoformat()} "
                  f"(interval: {result.interval_days}d, "
                  f"status: {outcome.word.status})")

        words_log.append({
            'word_id': word.word_id,
            'german': word.german,
            'quality': quality,
            'status': outcome.word.status,
            'difficulty_level': word.difficulty_level,
        })
        reviewed += 1
        if quality >= 3:
            correct += 1
        else:
            incorrect += 1

    finished = clock.now()
    summary = {
        'session_id': session_id,
        'session_type': session_type,
        'reviewed': reviewed,
        'correct': correct,
        'incorrect': incorrect,
        'skipped': skipped,
        'accuracy': round(correct / reviewed * 100, 2) if reviewed else 0.0,
        'duration_minutes': round((finished - started).total_seconds() / 60),
    }

    output_fn(f"\n{'='*60}")
    output_fn("SESSION COMPLETE")
    output_fn(f"  Reviewed: {reviewed}  Correct: {correct}  "
              f"Incorrect: {incorrect}  Skipped: {skipped}")
    if reviewed:
        output_fn(f"  Accuracy: {summary['accuracy']:.1f}%")
    output_fn(f"{'='*60}")

    if log_path and words_log:
        log_session(log_path, summary, words_log, finished_at=finished)

    return summary
