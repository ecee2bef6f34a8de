"""
FastAPI Dependencies

Provides dependency injection for settings, the answering chain, conversation
history and the active-session registry. Tests replace any of these through
app.dependency_overrides.
"""

from functools import lru_cache
from typing import Callable, Optional
import logging

from .config import AppSettings
from .sessions import SessionRegistry
from ..agent import ConversationHistory, RAGChain, create_rag_chain
from ..rag import Retriever

logger = logging.getLogger(__name__)


@lru_cache()
def get_settings() -> AppSettings:
    """API settings (read once)"""
    return AppSettings()


# Cached instances shared across requests
_history_instance: Optional[ConversationHistory] = None
_chain_instance: Optional[RAGChain] = None
_registry_instance: Optional[SessionRegistry] = None


def get_history() -> ConversationHistory:
    """Process-wide conversation store"""
    global _history_instance
    if _history_instance is None:
        _history_instance = ConversationHistory(max_messages=get_settings().history_limit)
    return _history_instance


def get_session_registry() -> SessionRegistry:
    """Process-wide registry of sessions seen since startup"""
    global _registry_instance
    if _registry_instance is None:
        _registry_instance = SessionRegistry()
    return _registry_instance


def get_chain() -> RAGChain:
    """
    RAG chain dependency.

    Built on first use and reused across requests; conversation state lives
    in the shared history, so the chain itself is stateless per request.

    Usage:
        @router.post("/ask")
        def ask(chain: RAGChain = Depends(get_chain)):
            result = chain.ask_question(question, session_id)
    """
    global _chain_instance
    if _chain_instance is None:
        _chain_instance = create_rag_chain(
            history=get_history(),
            company_name=get_settings().company_name
        )
    return _chain_instance


def get_chain_provider() -> Callable[[], RAGChain]:
    """
    Deferred chain dependency for routes that report construction failures
    (bad provider config, unreachable Qdrant) in their own error payload.

    Usage:
        @router.post("/ask")
        async def ask(chain_provider = Depends(get_chain_provider)):
            chain = chain_provider()
    """
    return get_chain


def get_search_retriever() -> Optional[Retriever]:
    """
    Retriever for the raw search endpoint.

    Returns None when the chain cannot be built (missing credentials,
    unreachable services) so the endpoint can answer 503.
    """
    try:
        return get_chain().retriever
    except Exception as e:
        logger.error(f"Failed to initialize retriever: {e}")
        return None


def reset_dependencies():
    """Drop cached instances (used by tests and reloads)"""
    global _history_instance, _chain_instance, _registry_instance
    _history_instance = None
    _chain_instance = None
    _registry_instance = None
    get_settings.cache_clear()
