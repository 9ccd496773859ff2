"""Review history -- append-only JSONL log of ReviewRecords."""

import json
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from srs.models import ReviewRecord


def append_review(log_path: Path, record: ReviewRecord) -> None:
    """Append one review record to the history file."""
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'a', encoding='utf-8') as f:
        f.write(json.dumps(record.to_dict(), ensure_ascii=False) + '\n')


def read_history(log_path: Path, word_id: Optional[str] = None) -> List[ReviewRecord]:
    """All records, oldest first; optionally only those for one word."""
    log_path = Path(log_path)
    records: List[ReviewRecord] = []
    if not log_path.exists():
        return records
    with open(log_path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            record = ReviewRecord.from_dict(json.loads(line))
            if word_id is None or record.word_id == word_id:
                records.append(record)
    records.sort(key=lambda r: r.reviewed_at)
    return records


def drop_word_history(log_path: Path, word_id: str) -> int:
    """Rewrite the log without the given word's records. Returns how many were dropped."""
    log_path = Path(log_path)
    if not log_path.exists():
        return 0
    kept = [r for r in read_history(log_path) if r.word_id != word_id]
    with open(log_path, 'r', encoding='utf-8') as f:
        total = sum(1 for line in f if line.strip())
    with open(log_path, 'w', encoding='utf-8') as f:
        for r in kept:
            f.write(json.dumps(r.to_dict(), ensure_ascii=False) + '\n')
    return total - len(kept)


def review_dates(records: Iterable[ReviewRecord]) -> List[date]:
    """Distinct UTC calendar days with at least one review, ascending."""
    return sorted({r.reviewed_at.date() for r in records})


def summarize_sessions(records: Iterable[ReviewRecord]) -> List[Dict]:
    """
    Group reviews into one vocabulary learning session per UTC day.

    Returns newest first:
        [{date, words_reviewed, words_correct, accuracy_rate, duration_minutes}, ...]
    accuracy_rate is a percentage.
    """
    by_day: Dict[date, List[ReviewRecord]] = {}
    for r in records:
        by_day.setdefault(r.reviewed_at.date(), []).append(r)

    sessions = []
    for day in sorted(by_day, reverse=True):
        day_records = by_day[day]
        reviewed = len(day_records)
        correct = sum(1 for r in day_records if r.correct)
        seconds = sum(r.review_duration_seconds or 0 for r in day_records)
        sessions.append({
            'date': day.isoformat(),
            'session_type': 'vocabulary',
            'words_reviewed': reviewed,
            'words_correct': correct,
            'accuracy_rate': round(correct / reviewed * 100, 2),
            'duration_minutes': round(seconds / 60),
        })
    return sessions
