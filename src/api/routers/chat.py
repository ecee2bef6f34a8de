"""
Chat Router

Question-answering endpoint used by the chat UI.
"""

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from typing import Callable
import logging
import time

from ..schemas import AskRequest, AskResponse
from ..dependencies import get_chain_provider, get_session_registry
from ..sessions import SessionRegistry, generate_session_id
from ..analytics import analytics
from ...agent import RAGChain

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/ask",
    response_model=AskResponse,
    response_model_exclude_none=True,
    responses={400: {"description": "Question is required"}, 500: {"description": "Processing failed"}}
)
async def ask(
    request: AskRequest,
    chain_provider: Callable[[], RAGChain] = Depends(get_chain_provider),
    registry: SessionRegistry = Depends(get_session_registry)
):
    """
    Ask a question about the company wiki.

    The chain will:
    1. Retrieve the most relevant wiki chunks
    2. Add the session's recent conversation
    3. Generate an answer grounded in the retrieved text

    **Parameters:**
    - `question`: Your question
    - `sessionId`: Optional conversation id; one is generated when omitted

    **Returns:**
    - Answer, source titles, timestamp and the session id to reuse
    """
    question = (request.question or "").strip()
    if not question:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"status": "error", "error": "Question is required"}
        )

    session_id = request.sessionId or generate_session_id()
    start_time = time.time()

    try:
        registry.add(session_id)
        logger.info(f"Question from session {session_id}: \"{question[:100]}\"")
        logger.info(f"Active sessions: {len(registry)}")

        chain = await run_in_threadpool(chain_provider)
        result = await run_in_threadpool(chain.ask_question, question, session_id)

        analytics.record_question(
            question=question,
            response_time_ms=int((time.time() - start_time) * 1000),
            success=result.get("status") == "success",
            error=result.get("error"),
            session_id=session_id,
            sources=result.get("sources")
        )

        return AskResponse(**result)

    except Exception as e:
        logger.error(f"Error processing request: {e}", exc_info=True)

        analytics.record_question(
            question=question,
            response_time_ms=int((time.time() - start_time) * 1000),
            success=False,
            error=f"{type(e).__name__}: {e}",
            session_id=session_id
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "error",
                "error": "Failed to process your question",
                "message": str(e)
            }
        )
