"""Unit tests for retrieval and context formatting."""

import pytest
from unittest.mock import MagicMock

from src.rag.retriever import (
    Document,
    Retriever,
    SearchResults,
    document_title,
    extract_sources,
    format_documents,
    format_documents_with_sources,
)
from src.rag.vector_store import SearchHit


@pytest.fixture
def mock_vector_store():
    store = MagicMock()
    store.search.return_value = [
        SearchHit(text="26 days off", metadata={"source": "Holiday Policy.txt", "title": "Holiday Policy"}, score=0.9),
        SearchHit(text="Public holidays", metadata={"source": "Holiday Policy.txt", "title": "Holiday Policy"}, score=0.8),
        SearchHit(text="Jira and Slack", metadata={"source": "Tools.txt"}, score=0.7),
    ]
    return store


@pytest.fixture
def retriever(mock_embedding_service, mock_vector_store, rag_config):
    return Retriever(mock_embedding_service, mock_vector_store, rag_config)


class TestSimilaritySearch:
    """Plain semantic search."""

    def test_returns_documents_with_scores(self, retriever, mock_vector_store):
        documents = retriever.similarity_search("company holidays")

        assert len(documents) == 3
        assert documents[0].page_content == "26 days off"
        assert documents[0].metadata["score"] == 0.9
        kwargs = mock_vector_store.search.call_args.kwargs
        assert kwargs["top_k"] == 4
        assert kwargs["category"] is None

    def test_k_and_filter(self, retriever, mock_vector_store):
        retriever.similarity_search("tools", k=2, filter={"category": "tools"})

        kwargs = mock_vector_store.search.call_args.kwargs
        assert kwargs["top_k"] == 2
        assert kwargs["category"] == "tools"

    def test_empty_query(self, retriever):
        with pytest.raises(ValueError):
            retriever.similarity_search("  ")

    def test_unknown_filter_key(self, retriever):
        with pytest.raises(ValueError):
            retriever.similarity_search("tools", filter={"author": "me"})


class TestHybridSearch:
    """Semantic search plus source attribution."""

    def test_sources_unique_in_rank_order(self, retriever):
        results = retriever.hybrid_search("company holidays")

        assert len(results.documents) == 3
        assert results.sources == ["Holiday Policy", "Tools.txt"]

    def test_no_results(self, retriever, mock_vector_store):
        mock_vector_store.search.return_value = []

        results = retriever.hybrid_search("unknown topic")

        assert results.documents == []
        assert results.sources == []


class TestFormatting:
    """Context block rendering."""

    def test_format_with_sources(self):
        results = SearchResults(
            documents=[
                Document("26 days off", {"source": "Holiday Policy.txt", "title": "Holiday Policy", "category": "time-off"}),
                Document("Misc", {}),
            ],
            sources=["Holiday Policy"]
        )

        context = format_documents_with_sources(results)

        assert context == (
            "[Source: Holiday Policy.txt, Title: Holiday Policy, Category: time-off]\n26 days off"
            "\n\n"
            "[Source: Unknown, Title: Unknown, Category: General]\nMisc"
        )

    def test_format_documents_only_present_keys(self):
        context = format_documents([Document("Jira", {"source": "Tools.txt", "score": 0.5})])

        assert context == "[source: Tools.txt]\nJira"

    def test_document_title_fallbacks(self):
        assert document_title(Document("x", {"title": "T", "source": "S"})) == "T"
        assert document_title(Document("x", {"source": "S"})) == "S"
        assert document_title(Document("x", {})) == "Unknown"

    def test_extract_sources(self):
        assert extract_sources(SearchResults(documents=[], sources=["A", "B"])) == ["A", "B"]
