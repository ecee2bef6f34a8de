"""
RAG Question-Answering Chain

Answers questions about the company wiki with source attribution.

Flow:
1. Hybrid search for relevant wiki chunks
2. Format chunks into a context block with source metadata
3. Collect source titles for attribution
4. Build the prompt (system + session history + question)
5. Generate the answer with the chat model
6. Remember the exchange in the session's history
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .history import ConversationHistory
from .llm_config import LLMClient, get_llm_client
from .prompts import DEFAULT_COMPANY_NAME, build_messages
from ..rag.config import RAGConfig, get_rag_config
from ..rag.retriever import (
    Retriever,
    extract_sources,
    format_documents_with_sources,
    get_retriever,
)

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "Sorry, I couldn't process your question due to an error."
ERROR_MESSAGE = "Failed to process your question. Please try again later."

SAMPLE_QUESTIONS = [
    "What are the company holidays?",
    "How does the integration budget work?",
    "What tools does the company use for development?",
    "How do I request massages?",
]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class RAGChain:
    """
    Retrieval-augmented answering over the wiki namespace.

    One instance is shared by every request; per-conversation state lives
    in the ConversationHistory keyed by session id.
    """

    def __init__(
        self,
        retriever: Retriever,
        llm_client: Optional[LLMClient] = None,
        history: Optional[ConversationHistory] = None,
        company_name: str = DEFAULT_COMPANY_NAME,
        top_k: Optional[int] = None
    ):
        """
        Initialize chain.

        Args:
            retriever: Retriever over the vector store
            llm_client: LLM client (defaults to get_llm_client())
            history: Conversation store (a fresh one if omitted)
            company_name: Company the assistant answers for
            top_k: Documents retrieved per question (defaults to retriever config)
        """
        self.retriever = retriever
        self.llm_client = llm_client or get_llm_client()
        self.history = history if history is not None else ConversationHistory()
        self.company_name = company_name
        self.top_k = top_k

    def run(self, question: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Answer a question. Errors propagate.

        Args:
            question: User's question
            session_id: Conversation to read and extend (optional)

        Returns:
            {"answer": str, "sources": List[str]}
        """
        search_results = self.retriever.hybrid_search(question, k=self.top_k)

        context = format_documents_with_sources(search_results)
        sources = extract_sources(search_results)

        history = self.history.get(session_id) if session_id else []
        messages = build_messages(
            question=question,
            context=context,
            history=history,
            company_name=self.company_name
        )

        answer = self.llm_client.complete_text(messages)

        if session_id:
            self.history.add_exchange(session_id, question, answer)

        return {"answer": answer, "sources": sources}

    def answer_question_with_sources(
        self,
        question: str,
        session_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Like run(), but failures become an apology with no sources."""
        try:
            logger.info(f"Processing question: \"{question}\"")
            result = self.run(question, session_id=session_id)

            logger.info(f"Answer: {result['answer']}")
            for index, source in enumerate(result["sources"], 1):
                logger.info(f"Source {index}. {source}")

            return result
        except Exception as e:
            logger.error(f"Error answering question: {e}", exc_info=True)
            return {"answer": FALLBACK_ANSWER, "sources": []}

    def ask_question(self, question: str, session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        API-facing entry point.

        Returns:
            Response dict with status, question, answer, sources, timestamp
            and sessionId, or status "error" with an error message.
        """
        logger.info(f"Received question: \"{question}\"")
        start_time = time.time()

        try:
            result = self.answer_question_with_sources(question, session_id=session_id)

            return {
                "status": "success",
                "question": question,
                "answer": result["answer"],
                "sources": result["sources"],
                "timestamp": _timestamp(),
                "sessionId": session_id,
                "execution_time_ms": int((time.time() - start_time) * 1000),
            }
        except Exception as e:
            logger.error(f"Error processing question: {e}", exc_info=True)

            return {
                "status": "error",
                "question": question,
                "error": ERROR_MESSAGE,
                "timestamp": _timestamp(),
                "sessionId": session_id,
            }


def create_rag_chain(
    config: Optional[RAGConfig] = None,
    llm_client: Optional[LLMClient] = None,
    history: Optional[ConversationHistory] = None,
    company_name: str = DEFAULT_COMPANY_NAME
) -> RAGChain:
    """
    Wire embeddings, vector store and chat model into a RAGChain.

    Args:
        config: RAG configuration (optional, loads from env if not provided)
        llm_client: LLM client (optional)
        history: Conversation store (optional)
        company_name: Company the assistant answers for

    Returns:
        RAGChain instance
    """
    config = config or get_rag_config()

    retriever = get_retriever(config)
    logger.info(f"Using Qdrant collection: {config.qdrant_collection_name}")

    chain = RAGChain(
        retriever=retriever,
        llm_client=llm_client or get_llm_client(),
        history=history,
        company_name=company_name,
        top_k=config.top_k
    )
    logger.info("Enhanced RAG question answering chain created successfully")
    return chain


def demonstrate_rag_pipeline(
    chain: RAGChain,
    questions: Optional[List[str]] = None
) -> List[Dict[str, Any]]:
    """
    Run the sample questions through the chain, printing answers and sources.

    Returns:
        One answer dict per question
    """
    results = []

    print("=== Enhanced RAG Question Answering Pipeline Demo ===\n")

    for question in questions or SAMPLE_QUESTIONS:
        print(f"\n----- Question: {question} -----")
        result = chain.answer_question_with_sources(question)

        print("\nAnswer:")
        print(result["answer"])
        print("\nSources:")
        for index, source in enumerate(result["sources"], 1):
            print(f"{index}. {source}")
        print("-" * 50)

        results.append(result)

    return results
