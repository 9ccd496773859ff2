"""FastAPI dependency factories."""

import sys
from functools import lru_cache
from pathlib import Path

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends

from server.config import Settings
from server.db.session import get_session_factory
from srs.clock import Clock, SYSTEM_CLOCK


@lru_cache()
def get_settings() -> Settings:
    """Singleton Settings -- override via app.dependency_overrides in tests."""
    return Settings()


def get_clock() -> Clock:
    """Time source for scheduling. Tests override with a FixedClock."""
    return SYSTEM_CLOCK


def get_db_session(settings: Settings = Depends(get_settings)):
    """One session per request. Write routes commit; errors roll back."""
    factory = get_session_factory(settings)
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
