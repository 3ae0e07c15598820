"""FastAPI server for jargon application."""

import logging
import os
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from core.catalog import PatternCatalog
from core.config import SIDE_ALL, MODE_FIND, MODE_REPEAT, PAGE_SIZE
from core.errors import EmptySelection, LoadFailure
from core.interfaces import WordSource
from core.patterns import PatternBrowser, RARITY_TIERS, RARITY_LABELS, find_pattern
from core.session import LearningSession

from server.file_storage import FileStorage

logger = logging.getLogger(__name__)


# Pydantic models for API
class UserRequest(BaseModel):
    user_id: str = "default"


class SelectRequest(BaseModel):
    key: str
    user_id: str = "default"


class ExpandRequest(BaseModel):
    pattern: str
    user_id: str = "default"


class DrillFilterRequest(BaseModel):
    side: str = SIDE_ALL
    query: Optional[str] = None
    user_id: str = "default"


class StartRequest(BaseModel):
    mode: str = MODE_FIND
    user_id: str = "default"


class AnswerRequest(BaseModel):
    answer: str
    user_id: str = "default"


class StatusResponse(BaseModel):
    loaded: bool
    error: Optional[str] = None
    word_count: int = 0
    vocabulary_size: int = 0
    record_count: int = 0
    length_mismatches: int = 0
    loaded_at: Optional[str] = None
    load_ms: int = 0


class PatternPageResponse(BaseModel):
    items: list[dict]
    page: int
    page_size: int
    total: int
    total_pages: int
    first: int
    last: int
    has_previous: bool
    has_next: bool
    query: Optional[str]
    length: Optional[int]
    rarity: Optional[str]
    expanded: Optional[dict] = None


class DrillSetResponse(BaseModel):
    side: str
    query: Optional[str]
    patterns: list[dict]
    selected: list[str]


class SessionResponse(BaseModel):
    state: str
    mode: Optional[str]
    side: str
    affix_query: Optional[str]
    selected: list[str]
    challenge_index: int
    correct_answers: int
    total_attempts: int
    accuracy: int
    score_display: str
    challenge: Optional[dict]
    progress: Optional[dict]


class AnswerResponse(BaseModel):
    result: str
    session: SessionResponse


# Global state (in production, use proper DI)
storage: WordSource = None
catalog = PatternCatalog()
load_error: Optional[str] = None
user_sessions: dict[str, LearningSession] = {}
user_browsers: dict[str, PatternBrowser] = {}


def log_event(event: str, user_id: str, **data) -> None:
    """Log a user event."""
    logger.info(f"{event} user={user_id} {data}")


def create_storage() -> WordSource:
    """Pick the storage backend from JARGON_STORAGE (file or postgres)."""
    storage_type = os.environ.get('JARGON_STORAGE', 'file')
    if storage_type == 'postgres':
        from server.postgres_storage import PostgresStorage
        logger.info("Using PostgreSQL storage")
        return PostgresStorage()
    logger.info("Using file storage")
    return FileStorage()


def load_catalog(source: WordSource) -> None:
    """Rebuild the catalog and hand the new records to every open session."""
    global load_error
    try:
        records = catalog.load(source)
    except LoadFailure as e:
        load_error = f"Error loading data: {e}"
        raise
    load_error = None
    for session in user_sessions.values():
        session.refresh(records)
    for user_id, browser in list(user_browsers.items()):
        user_browsers[user_id] = PatternBrowser(records, browser.page_size)


def require_catalog() -> PatternCatalog:
    """Return the catalog, or fail with 503 until the data is loaded."""
    if not catalog.is_loaded:
        raise HTTPException(status_code=503, detail=load_error or "Data not loaded")
    return catalog


def get_session(user_id: str = "default") -> LearningSession:
    """Get or create the learning session for a user."""
    records = require_catalog().records
    if user_id not in user_sessions:
        user_sessions[user_id] = LearningSession(records)
    return user_sessions[user_id]


def get_browser(user_id: str = "default") -> PatternBrowser:
    """Get or create the pattern browser for a user."""
    records = require_catalog().records
    if user_id not in user_browsers:
        user_browsers[user_id] = PatternBrowser(records, PAGE_SIZE)
    return user_browsers[user_id]


def page_response(browser: PatternBrowser, window) -> PatternPageResponse:
    expanded = find_pattern(browser.records, browser.expanded) if browser.expanded else None
    return PatternPageResponse(
        **window.to_dict(),
        query=browser.query,
        length=browser.length,
        rarity=browser.rarity,
        expanded=expanded.to_dict() if expanded else None
    )


def session_response(session: LearningSession) -> SessionResponse:
    return SessionResponse(**session.snapshot())


app = FastAPI(title="Jargon API", description="Word pattern explorer and drill API")


@app.on_event("startup")
async def startup():
    """Load the word list and pattern vocabulary on startup."""
    global storage
    storage = create_storage()
    try:
        load_catalog(storage)
    except LoadFailure:
        # Service stays up and reports the error; data endpoints answer 503
        logger.error(f"Startup load failed: {load_error}")


@app.get("/")
async def root():
    """Service health check."""
    return {"service": "jargon", "loaded": catalog.is_loaded}


@app.get("/api/status", response_model=StatusResponse)
async def get_status():
    """Report whether the data is loaded and how big it is."""
    if not catalog.is_loaded:
        return StatusResponse(loaded=False, error=load_error)
    return StatusResponse(**catalog.status())


@app.post("/api/reload", response_model=StatusResponse)
async def reload_data():
    """Reload the word list and vocabulary and rebuild everything."""
    if storage is None:
        raise HTTPException(status_code=503, detail="No storage configured")
    try:
        load_catalog(storage)
    except LoadFailure:
        raise HTTPException(status_code=503, detail=load_error)
    return StatusResponse(**catalog.status())


@app.get("/api/rarities")
async def get_rarities():
    """List rarity tiers with display labels."""
    return {"tiers": [{"tier": tier, "label": RARITY_LABELS[tier]} for tier in RARITY_TIERS]}


@app.get("/api/patterns", response_model=PatternPageResponse)
async def get_patterns(user_id: str = "default", query: Optional[str] = None,
                       length: Optional[int] = None, rarity: Optional[str] = None,
                       page: Optional[int] = None):
    """Browse patterns rarest first. Changing any filter goes back to page 1."""
    browser = get_browser(user_id)
    try:
        if (query, length, rarity) != (browser.query, browser.length, browser.rarity):
            browser.set_filters(query, length, rarity)
        elif page is not None:
            browser.page = page
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return page_response(browser, browser.current_page())


@app.post("/api/patterns/next", response_model=PatternPageResponse)
async def next_patterns_page(request: UserRequest):
    """Move the user's browser one page forward (stays on the last page)."""
    browser = get_browser(request.user_id)
    return page_response(browser, browser.next_page())


@app.post("/api/patterns/previous", response_model=PatternPageResponse)
async def previous_patterns_page(request: UserRequest):
    """Move the user's browser one page back (stays on the first page)."""
    browser = get_browser(request.user_id)
    return page_response(browser, browser.previous_page())


@app.post("/api/patterns/expand", response_model=PatternPageResponse)
async def toggle_expand(request: ExpandRequest):
    """Show a pattern's word lists, or hide them if already shown."""
    browser = get_browser(request.user_id)
    if find_pattern(browser.records, request.pattern) is None:
        raise HTTPException(status_code=404, detail=f"Pattern not found: {request.pattern}")
    browser.toggle_expand(request.pattern)
    return page_response(browser, browser.current_page())


@app.get("/api/patterns/{pattern}")
async def get_pattern(pattern: str):
    """Full word lists of a single pattern."""
    record = find_pattern(require_catalog().records, pattern)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Pattern not found: {pattern}")
    return record.to_dict()


@app.get("/api/drills", response_model=DrillSetResponse)
async def get_drills(user_id: str = "default"):
    """Drillable patterns under the user's current side and affix filters."""
    session = get_session(user_id)
    return DrillSetResponse(
        side=session.side,
        query=session.affix_query,
        patterns=[p.to_dict() for p in session.drill_set()],
        selected=list(session.selected)
    )


@app.post("/api/drills/filter", response_model=DrillSetResponse)
async def set_drill_filters(request: DrillFilterRequest):
    """Change the side and affix filters of the drill set."""
    session = get_session(request.user_id)
    try:
        session.set_drill_filters(request.side, request.query)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await get_drills(request.user_id)


@app.get("/api/session", response_model=SessionResponse)
async def get_session_state(user_id: str = "default"):
    """Current session snapshot."""
    return session_response(get_session(user_id))


@app.post("/api/session/select", response_model=SessionResponse)
async def toggle_selection(request: SelectRequest):
    """Select or unselect one pattern key."""
    session = get_session(request.user_id)
    try:
        session.toggle_selection(request.key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_response(session)


@app.post("/api/session/select-all", response_model=SessionResponse)
async def select_all(request: UserRequest):
    """Select every pattern in the current drill set."""
    session = get_session(request.user_id)
    session.select_all()
    return session_response(session)


@app.post("/api/session/clear", response_model=SessionResponse)
async def clear_selection(request: UserRequest):
    """Unselect everything."""
    session = get_session(request.user_id)
    session.clear_selection()
    return session_response(session)


@app.post("/api/session/start", response_model=SessionResponse)
async def start_session(request: StartRequest):
    """Start a drill over the selected patterns."""
    session = get_session(request.user_id)
    try:
        session.start(request.mode)
    except EmptySelection as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    log_event('session.start', request.user_id, mode=request.mode, patterns=len(session.selected))
    return session_response(session)


@app.post("/api/session/guess", response_model=AnswerResponse)
async def submit_guess(request: AnswerRequest):
    """Submit a fragment (find words) or a full word (repeat after me)."""
    session = get_session(request.user_id)
    try:
        if session.mode == MODE_REPEAT:
            result = session.submit_repeat(request.answer)
        else:
            result = session.submit_guess(request.answer)
        log_event('session.answer', request.user_id, mode=session.mode, result=result)
        return AnswerResponse(result=result, session=session_response(session))
    except Exception as e:
        logger.error(f"Error in submit_guess: {type(e).__name__}: {e}")
        import traceback
        logger.error(traceback.format_exc())
        raise HTTPException(status_code=500, detail=f"Internal error: {type(e).__name__}: {str(e)}")


@app.post("/api/session/reveal", response_model=SessionResponse)
async def reveal_words(request: UserRequest):
    """Give up on the current find-words challenge and show its words."""
    session = get_session(request.user_id)
    if session.reveal():
        log_event('session.reveal', request.user_id, index=session.challenge_index)
    return session_response(session)


@app.post("/api/session/skip", response_model=SessionResponse)
async def skip_word(request: UserRequest):
    """Skip the current repeat-after-me word."""
    session = get_session(request.user_id)
    session.skip()
    return session_response(session)


@app.post("/api/session/next", response_model=SessionResponse)
async def next_challenge(request: UserRequest):
    """Move on to the next selected pattern."""
    session = get_session(request.user_id)
    session.advance()
    return session_response(session)


@app.post("/api/session/reset", response_model=SessionResponse)
async def reset_session(request: UserRequest):
    """End the drill and clear the selection."""
    session = get_session(request.user_id)
    log_event('session.reset', request.user_id,
              correct=session.correct_answers, attempts=session.total_attempts)
    session.reset()
    return session_response(session)


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
