"""Session logging -- one JSONL line per finished flashcard session."""

import json
from datetime import datetime
from pathlib import Path
from typing import Dict, List

HARDEST_WORDS_SHOWN = 5


def _difficulty_breakdown(words_reviewed: List[Dict]) -> Dict[str, Dict]:
    """Per CEFR level: how many words were rated and their mean quality."""
    by_level: Dict[str, List[int]] = {}
    for wr in words_reviewed:
        by_level.setdefault(wr.get('difficulty_level', '?'), []).append(wr.get('quality', 0))
    return {
        level: {'count': len(qs), 'avg_quality': round(sum(qs) / len(qs), 2)}
        for level, qs in sorted(by_level.items())
    }


def log_session(
    log_path: Path,
    summary: Dict,
    words_reviewed: List[Dict],
    finished_at: datetime,
) -> Dict:
    """
    Append a session record to the log.

    Args:
        log_path:       Path to the session log file
        summary:        Summary dict from run_flashcard_session
        words_reviewed: Per-word dicts with word_id, quality, status, difficulty_level
        finished_at:    Session end time

    Returns:
        The record that was written.
    """
    histogram = {str(q): 0 for q in range(6)}
    promoted = []
    for wr in words_reviewed:
        q = wr.get('quality', 0)
        if str(q) in histogram:
            histogram[str(q)] += 1
        if wr.get('status') == 'mastered':
            promoted.append(wr.get('word_id'))

    # Failed words, worst first
    failed = sorted(
        (wr for wr in words_reviewed if wr.get('quality', 0) < 3),
        key=lambda wr: wr.get('quality', 0),
    )

    avg_quality = 0.0
    if words_reviewed:
        avg_quality = round(
            sum(wr.get('quality', 0) for wr in words_reviewed) / len(words_reviewed), 2,
        )

    record = {
        'session_id': summary.get('session_id'),
        'timestamp': finished_at.isoformat(),
        'session_type': summary.get('session_type', 'review'),
        'words_reviewed': summary.get('reviewed', 0),
        'correct': summary.get('correct', 0),
        'incorrect': summary.get('incorrect', 0),
        'skipped': summary.get('skipped', 0),
        'accuracy': summary.get('accuracy', 0.0),
        'duration_minutes': summary.get('duration_minutes', 0),
        'avg_quality': avg_quality,
        'quality_histogram': histogram,
        'by_difficulty': _difficulty_breakdown(words_reviewed),
        'hardest_words': [wr.get('word_id') for wr in failed[:HARDEST_WORDS_SHOWN]],
        'mastered_words': promoted,
        'word_details': words_reviewed,
    }

    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'a', encoding='utf-8') as f:
        f.write(json.dumps(record, ensure_ascii=False) + '\n')

    return record


def read_session_log(log_path: Path) -> List[Dict]:
    """All session records, oldest first."""
    log_path = Path(log_path)
    if not log_path.exists():
        return []
    with open(log_path, 'r', encoding='utf-8') as f:
        return [json.loads(line) for line in f if line.strip()]
