"""
Sessions Router

Inspect and forget chat sessions.
"""

from fastapi import APIRouter, Depends, HTTPException, status
import logging

from ..schemas import HistoryResponse, SessionDeletedResponse, SessionsResponse
from ..dependencies import get_history, get_session_registry
from ..sessions import SessionRegistry
from ...agent import ConversationHistory

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_known(session_id: str, registry: SessionRegistry, history: ConversationHistory):
    if session_id not in registry and session_id not in history:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session '{session_id}' not found"
        )


@router.get("/sessions", response_model=SessionsResponse)
async def list_sessions(registry: SessionRegistry = Depends(get_session_registry)):
    """List the sessions that asked a question since startup."""
    active = registry.list()
    return SessionsResponse(status="ok", activeSessions=active, count=len(active))


@router.get("/sessions/{session_id}/history", response_model=HistoryResponse)
async def get_session_history(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    history: ConversationHistory = Depends(get_history)
):
    """
    Get the stored conversation for a session.

    Only the most recent messages are kept (10 by default).
    """
    _require_known(session_id, registry, history)

    messages = history.get(session_id)
    return HistoryResponse(
        status="ok",
        sessionId=session_id,
        messages=messages,
        count=len(messages)
    )


@router.delete("/sessions/{session_id}", response_model=SessionDeletedResponse)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
    history: ConversationHistory = Depends(get_history)
):
    """Forget a session's history and remove it from the active list."""
    _require_known(session_id, registry, history)

    history.clear(session_id)
    registry.remove(session_id)
    logger.info(f"Session {session_id} cleared. Active sessions: {len(registry)}")

    return SessionDeletedResponse(
        status="ok",
        sessionId=session_id,
        message="Session cleared"
    )
