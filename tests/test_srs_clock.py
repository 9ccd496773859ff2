"""Tests for srs/clock.py -- injectable time sources."""

import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from srs.clock import Clock, FixedClock, SystemClock, SYSTEM_CLOCK


def test_fixed_clock_returns_same_instant():
    at = datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)
    clock = FixedClock(at)
    assert clock.now() == at
    assert clock.now() == at


def test_fixed_clock_naive_is_utc():
    clock = FixedClock(datetime(2026, 1, 5, 9, 30))
    assert clock.now().tzinfo == timezone.utc
    assert clock.now().hour == 9


def test_fixed_clock_converts_offsets():
    berlin = timezone(timedelta(hours=1))
    clock = FixedClock(datetime(2026, 1, 5, 10, 30, tzinfo=berlin))
    assert clock.now() == datetime(2026, 1, 5, 9, 30, tzinfo=timezone.utc)
    assert clock.now().tzinfo == timezone.utc


def test_fixed_clock_advance():
    clock = FixedClock(datetime(2026, 1, 5, tzinfo=timezone.utc))
    clock.advance(days=2)
    assert clock.now() == datetime(2026, 1, 7, tzinfo=timezone.utc)
    clock.advance(hours=6)
    assert clock.now() == datetime(2026, 1, 7, 6, tzinfo=timezone.utc)


def test_fixed_clock_set():
    clock = FixedClock(datetime(2026, 1, 5, tzinfo=timezone.utc))
    clock.set(datetime(2025, 12, 31))
    assert clock.now() == datetime(2025, 12, 31, tzinfo=timezone.utc)


def test_system_clock_is_aware():
    now = SystemClock().now()
    assert now.tzinfo is not None
    assert isinstance(SYSTEM_CLOCK, Clock)


def test_clock_is_abstract():
    with pytest.raises(TypeError):
        Clock()
