"""Unit tests for the RAG answering chain."""

import pytest
from unittest.mock import MagicMock, patch

from src.agent.chain import (
    ERROR_MESSAGE,
    FALLBACK_ANSWER,
    RAGChain,
    create_rag_chain,
    demonstrate_rag_pipeline,
)
from src.agent.history import ConversationHistory
from src.rag.retriever import Document, SearchResults


@pytest.fixture
def mock_retriever():
    retriever = MagicMock()
    retriever.hybrid_search.return_value = SearchResults(
        documents=[
            Document("Employees get 26 days off.", {"source": "Holiday Policy.txt", "title": "Holiday Policy", "category": "time-off"}),
        ],
        sources=["Holiday Policy"]
    )
    return retriever


@pytest.fixture
def mock_llm():
    llm = MagicMock()
    llm.complete_text.return_value = "You get 26 days off."
    return llm


@pytest.fixture
def chain(mock_retriever, mock_llm):
    return RAGChain(mock_retriever, llm_client=mock_llm, history=ConversationHistory(), top_k=4)


class TestRun:
    """Retrieval, prompt and generation."""

    def test_answer_and_sources(self, chain, mock_retriever, mock_llm):
        result = chain.run("What are the company holidays?")

        assert result == {"answer": "You get 26 days off.", "sources": ["Holiday Policy"]}
        mock_retriever.hybrid_search.assert_called_once_with("What are the company holidays?", k=4)
        messages = mock_llm.complete_text.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "[Source: Holiday Policy.txt, Title: Holiday Policy, Category: time-off]" in messages[0]["content"]
        assert messages[-1] == {"role": "user", "content": "What are the company holidays?"}

    def test_session_history_used_and_recorded(self, chain, mock_llm):
        chain.run("What are the company holidays?", session_id="s1")
        chain.run("And in Poland?", session_id="s1")

        messages = mock_llm.complete_text.call_args.args[0]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[1]["content"] == "What are the company holidays?"
        assert len(chain.history.get("s1")) == 4

    def test_no_session_no_history(self, chain):
        chain.run("What are the company holidays?")

        assert len(chain.history) == 0

    def test_errors_propagate(self, chain, mock_retriever):
        mock_retriever.hybrid_search.side_effect = RuntimeError("qdrant down")

        with pytest.raises(RuntimeError):
            chain.run("question")


class TestAnswerWithSources:
    def test_fallback_on_error(self, chain, mock_llm):
        mock_llm.complete_text.side_effect = Exception("rate limit")

        result = chain.answer_question_with_sources("question", session_id="s1")

        assert result == {"answer": FALLBACK_ANSWER, "sources": []}
        assert "s1" not in chain.history


class TestAskQuestion:
    """Payload returned to the HTTP layer."""

    def test_success_payload(self, chain):
        response = chain.ask_question("What are the company holidays?", session_id="s1")

        assert response["status"] == "success"
        assert response["question"] == "What are the company holidays?"
        assert response["answer"] == "You get 26 days off."
        assert response["sources"] == ["Holiday Policy"]
        assert response["sessionId"] == "s1"
        assert "timestamp" in response
        assert response["execution_time_ms"] >= 0

    def test_generation_failure_still_success_with_fallback(self, chain, mock_llm):
        mock_llm.complete_text.side_effect = Exception("timeout")

        response = chain.ask_question("question", session_id="s1")

        assert response["status"] == "success"
        assert response["answer"] == FALLBACK_ANSWER
        assert response["sources"] == []

    def test_error_payload(self, chain):
        with patch.object(chain, "answer_question_with_sources", side_effect=Exception("boom")):
            response = chain.ask_question("question", session_id="s1")

        assert response["status"] == "error"
        assert response["error"] == ERROR_MESSAGE
        assert response["sessionId"] == "s1"
        assert "answer" not in response


class TestFactoryAndDemo:
    @patch('src.agent.chain.get_retriever')
    def test_create_rag_chain(self, mock_get_retriever, rag_config, mock_llm):
        chain = create_rag_chain(config=rag_config, llm_client=mock_llm, company_name="Acme")

        mock_get_retriever.assert_called_once_with(rag_config)
        assert chain.top_k == rag_config.top_k
        assert chain.company_name == "Acme"
        assert chain.llm_client is mock_llm

    def test_demonstrate_rag_pipeline(self, chain, capsys):
        results = demonstrate_rag_pipeline(chain, ["What are the company holidays?"])

        output = capsys.readouterr().out
        assert len(results) == 1
        assert "You get 26 days off." in output
        assert "1. Holiday Policy" in output
