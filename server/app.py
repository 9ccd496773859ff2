"""FastAPI application -- routes for the Wortschatz vocabulary trainer."""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session as DBSession

from server.__version__ import __version__
from server.config import Settings
from server.dependencies import get_clock, get_db_session, get_settings
from server.schemas import (
    HealthResponse,
    HistoryResponse,
    ReviewQueueResponse,
    ReviewRequest,
    ReviewResponse,
    SessionsResponse,
    StatsResponse,
    WordCreateRequest,
    WordResponse,
    WordsResponse,
    WordUpdateRequest,
)
from server.services import vocabulary_service
from server.services.vocabulary_service import WordNotFoundError
from srs.clock import Clock
from srs.errors import SchedulingError

logger = logging.getLogger("wortschatz.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan: configure logging and create tables."""
    from server.db.session import init_db
    settings = Settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    init_db(settings)
    logger.info("Startup: database ready at %s", settings.database_url)
    yield
    logger.info("Shutdown: complete")


app = FastAPI(title="Wortschatz", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Invalid quality ratings and timestamps are client errors."""
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# ---- Health (no dependencies, always fast) ----

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True, "version": __version__}


# ---- Words ----

@app.post("/words", response_model=WordResponse, status_code=201)
def create_word(
    body: WordCreateRequest,
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    try:
        word = vocabulary_service.create_word(db, body.model_dump(), clock.now())
    except SchedulingError:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return word


@app.get("/words", response_model=WordsResponse)
def list_words(
    status: str = Query("all"),
    difficulty: str = Query("all"),
    q: str = Query(""),
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    try:
        return vocabulary_service.list_words(
            db, clock.now(), status=status, difficulty=difficulty, query=q,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/words/{word_id}", response_model=WordResponse)
def get_word(
    word_id: str,
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    try:
        return vocabulary_service.get_word(db, word_id, clock.now())
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Word not found: {e.word_id}")


@app.patch("/words/{word_id}", response_model=WordResponse)
def update_word(
    word_id: str,
    body: WordUpdateRequest,
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    fields = body.model_dump(exclude_unset=True)
    try:
        word = vocabulary_service.update_word(db, word_id, fields, clock.now())
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Word not found: {e.word_id}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    db.commit()
    return word


@app.delete("/words/{word_id}")
def delete_word(word_id: str, db: DBSession = Depends(get_db_session)):
    try:
        vocabulary_service.delete_word(db, word_id)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Word not found: {e.word_id}")
    db.commit()
    return {"ok": True, "id": word_id}


# ---- Review ----

@app.post("/words/{word_id}/review", response_model=ReviewResponse)
def review_word(
    word_id: str,
    body: ReviewRequest,
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
):
    """Rate recall 0-5 and reschedule the word."""
    try:
        result = vocabulary_service.review_word(
            db, word_id, body.quality, clock.now(),
            review_duration_seconds=body.review_duration_seconds,
        )
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Word not found: {e.word_id}")
    except SchedulingError:
        raise
    except Exception:
        logger.exception("Review failed for %s", word_id)
        raise
    db.commit()
    return result


@app.get("/words/{word_id}/history", response_model=HistoryResponse)
def word_history(word_id: str, db: DBSession = Depends(get_db_session)):
    try:
        return vocabulary_service.get_word_history(db, word_id)
    except WordNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Word not found: {e.word_id}")


@app.get("/review/queue", response_model=ReviewQueueResponse)
def review_queue(
    limit: Optional[int] = Query(None, ge=1),
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    """Due words, most urgent first."""
    return vocabulary_service.get_review_queue(
        db, clock.now(), limit or settings.review_queue_limit,
    )


@app.get("/review/learning", response_model=WordsResponse)
def review_learning(
    limit: Optional[int] = Query(None, ge=1),
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    """New words that have never been reviewed successfully."""
    return vocabulary_service.get_learning_words(
        db, clock.now(), limit or settings.learning_queue_limit,
    )


# ---- Stats / sessions ----

@app.get("/stats", response_model=StatsResponse)
def stats(db: DBSession = Depends(get_db_session), clock: Clock = Depends(get_clock)):
    return vocabulary_service.get_stats(db, clock.now())


@app.get("/sessions", response_model=SessionsResponse)
def sessions(
    db: DBSession = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
    settings: Settings = Depends(get_settings),
):
    return vocabulary_service.get_sessions(db, clock.now(), settings.sessions_window_days)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=True)
