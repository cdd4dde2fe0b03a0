# api/assistant.py
"""
Assistant API Endpoints
HTTP surface over the per-session RecommendationOrchestrator:
- POST   /api/ai/assistant/query                   Process a query
- POST   /api/ai/assistant/join                    Join a recommended event by index
- POST   /api/ai/assistant/join/{event_id}         Join an event by id
- GET    /api/ai/assistant/session/{id}/last       Last result of a session
- POST   /api/ai/assistant/session/{id}/reset      Reset a session's conversation
- DELETE /api/ai/assistant/session/{id}            Drop a session
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger

from ..agents.orchestrator import NoPreviousResultError, RecommendationIndexError
from ..config import create_orchestrator, provide_recommendation_service, settings
from ..interfaces.event_store import EventFullError, EventNotFoundError, EventStore, InMemoryEventStore
from ..interfaces.session_store import OrchestratorSessionStore
from ..llm.recommender import RecommendationServiceError
from ..schemas.ai_schemas import (
    AssistantQueryRequest,
    AssistantQueryResponse,
    JoinByIndexRequest,
    JoinResponse,
    LastResultResponse,
)


router = APIRouter(prefix="/api/ai/assistant", tags=["assistant"])


# ============================================
# Session store wiring
# ============================================

_session_store: Optional[OrchestratorSessionStore] = None


def build_session_store(event_store: Optional[EventStore] = None) -> OrchestratorSessionStore:
    """Session store whose orchestrators share one event store and one reasoning service"""
    event_store = event_store or InMemoryEventStore()
    recommendation_service = provide_recommendation_service()

    return OrchestratorSessionStore(
        orchestrator_factory=lambda: create_orchestrator(recommendation_service, event_store),
        ttl_hours=settings.SESSION_TTL_HOURS,
    )


def set_session_store(store: Optional[OrchestratorSessionStore]):
    global _session_store
    _session_store = store


def get_session_store() -> OrchestratorSessionStore:
    global _session_store
    if _session_store is None:
        _session_store = build_session_store()
    return _session_store


def _require_session(store: OrchestratorSessionStore, session_id: str):
    entry = store.get_session(session_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return entry


def _check_owner(entry, user_id: str):
    # anonymous sessions are open; owned ones only to their owner
    if entry.user_id and entry.user_id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")


# ============================================
# Endpoints
# ============================================

@router.post("/query", response_model=AssistantQueryResponse)
async def process_query(
    request: AssistantQueryRequest,
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """
    Ask the assistant for event recommendations.

    Example queries:
    - "Any music events tonight?"
    - "Something to eat near campus this weekend"
    """
    logger.info(f"Assistant query: user={request.user_id}, query={request.query[:50]}")

    session_id = store.get_or_create_session(request.user_id, request.session_id)
    entry = store.get_session(session_id)
    _check_owner(entry, request.user_id)

    try:
        result = await entry.orchestrator.process_query(
            user_query=request.query,
            user_location=request.location,
            time_window_start=request.time_window_start,
            time_window_end=request.time_window_end,
            max_distance_km=request.max_distance_km,
            user_id=request.user_id,
            conversation_id=request.conversation_id,
        )
    except RecommendationServiceError as e:
        logger.error(f"Recommendation service error: {e}")
        raise HTTPException(status_code=502, detail=str(e))

    return AssistantQueryResponse(session_id=session_id, result=result)


@router.post("/join", response_model=JoinResponse)
async def join_by_index(
    request: JoinByIndexRequest,
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """Join the n-th event (0-based) of the session's last recommendations."""
    entry = _require_session(store, request.session_id)
    _check_owner(entry, request.user_id)

    try:
        event_id = await entry.orchestrator.join_recommended_event_by_index(request.index, request.user_id)
    except NoPreviousResultError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RecommendationIndexError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EventFullError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return JoinResponse(session_id=request.session_id, event_id=event_id, user_id=request.user_id)


@router.post("/join/{event_id}", response_model=JoinResponse)
async def join_by_id(
    event_id: str,
    session_id: str = Query(..., description="Session ID"),
    user_id: str = Query(..., description="User joining the event"),
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """Join a recommended event directly by its id."""
    entry = _require_session(store, session_id)
    _check_owner(entry, user_id)

    try:
        await entry.orchestrator.join_recommended_event_by_id(event_id, user_id)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EventFullError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return JoinResponse(session_id=session_id, event_id=event_id, user_id=user_id)


@router.get("/session/{session_id}/last", response_model=LastResultResponse)
async def get_last_result(
    session_id: str,
    user_id: str = Query("", description="Session owner"),
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """Get the session's last recommendations (null when idle)."""
    entry = _require_session(store, session_id)
    _check_owner(entry, user_id)
    return LastResultResponse(session_id=session_id, result=entry.orchestrator.get_last_result())


@router.post("/session/{session_id}/reset", response_model=LastResultResponse)
async def reset_conversation(
    session_id: str,
    user_id: str = Query("", description="Session owner"),
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """Forget the session's last recommendations."""
    entry = _require_session(store, session_id)
    _check_owner(entry, user_id)
    await entry.orchestrator.reset_conversation()
    return LastResultResponse(session_id=session_id, result=None)


@router.delete("/session/{session_id}")
async def delete_session(
    session_id: str,
    user_id: str = Query("", description="Session owner"),
    store: OrchestratorSessionStore = Depends(get_session_store)
):
    """Drop a session entirely."""
    entry = _require_session(store, session_id)
    _check_owner(entry, user_id)
    store.delete_session(session_id)
    return {"status": "deleted", "session_id": session_id}
