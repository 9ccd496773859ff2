"""Configuration for the Wortschatz API server."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger("wortschatz.api")


@dataclass
class Settings:
    """
    Server settings.

    Defaults resolve relative to the project root.
    Every field is overridable at construction for testing.
    """
    data_dir: Optional[Path] = None
    database_url: Optional[str] = None
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    review_queue_limit: int = 20
    learning_queue_limit: int = 10
    sessions_window_days: int = 30

    def __post_init__(self):
        project_root = Path(__file__).resolve().parent.parent

        if self.data_dir is None:
            env_dir = os.environ.get("WORTSCHATZ_DATA_DIR")
            self.data_dir = Path(env_dir) if env_dir else project_root / "data"
        self.data_dir = Path(self.data_dir)

        if self.database_url is None:
            self.database_url = os.environ.get(
                "DATABASE_URL", f"sqlite:///{self.data_dir / 'wortschatz.db'}",
            )

        env_level = os.environ.get("LOG_LEVEL")
        if env_level:
            self.log_level = env_level
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            logger.warning("Unknown log level %r, using INFO", self.log_level)
            self.log_level = "INFO"

        env_origins = os.environ.get("CORS_ORIGINS")
        if env_origins:
            self.cors_origins = [o.strip() for o in env_origins.split(",") if o.strip()]

        env_limit = os.environ.get("REVIEW_QUEUE_LIMIT")
        if env_limit is not None:
            try:
                limit = int(env_limit)
            except ValueError:
                limit = 0
            if limit >= 1:
                self.review_queue_limit = limit
            else:
                logger.warning(
                    "Ignoring REVIEW_QUEUE_LIMIT=%r, expected a positive integer; using %d",
                    env_limit, self.review_queue_limit,
                )
