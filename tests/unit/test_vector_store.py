"""Unit tests for the Qdrant vector store wrapper."""

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from qdrant_client.models import FilterSelector

from src.rag.vector_store import SearchHit, VectorStore


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.get_collections.return_value = SimpleNamespace(collections=[])
    return client


@pytest.fixture
def store(rag_config, mock_client):
    return VectorStore(rag_config, client=mock_client)


class TestCollectionManagement:
    """Create / recreate the wiki collection."""

    def test_create_when_missing(self, store, mock_client):
        assert store.create_collection() is True

        kwargs = mock_client.create_collection.call_args.kwargs
        assert kwargs["collection_name"] == "wiki_documents"
        assert kwargs["vectors_config"].size == 3
        indexed = [c.kwargs["field_name"] for c in mock_client.create_payload_index.call_args_list]
        assert indexed == ["namespace", "source", "category"]

    def test_existing_collection_kept(self, store, mock_client):
        mock_client.get_collections.return_value = SimpleNamespace(
            collections=[SimpleNamespace(name="wiki_documents")]
        )

        assert store.create_collection() is False
        mock_client.create_collection.assert_not_called()

    def test_recreate(self, store, mock_client):
        mock_client.get_collections.return_value = SimpleNamespace(
            collections=[SimpleNamespace(name="wiki_documents")]
        )

        assert store.create_collection(recreate=True) is True
        mock_client.delete_collection.assert_called_once_with("wiki_documents")
        mock_client.create_collection.assert_called_once()

    def test_delete_namespace_uses_filter(self, store, mock_client):
        store.delete_namespace()

        selector = mock_client.delete.call_args.kwargs["points_selector"]
        assert isinstance(selector, FilterSelector)
        condition = selector.filter.must[0]
        assert condition.key == "namespace"
        assert condition.match.value == "wiki"


class TestUpload:
    """Batch upload of chunks with their vectors."""

    def test_upload_in_batches(self, store, mock_client, chunker):
        chunks = chunker.chunk_document(" ".join(f"w{i}" for i in range(25)), "Holiday Policy.txt")
        embeddings = [[0.1, 0.2, 0.3]] * len(chunks)

        uploaded = store.upload_chunks(chunks, embeddings)

        assert uploaded == 3
        assert mock_client.upsert.call_count == 2
        first_point = mock_client.upsert.call_args_list[0].kwargs["points"][0]
        assert first_point.payload["namespace"] == "wiki"
        assert first_point.payload["text"] == chunks[0].text
        assert first_point.payload["chunk"] == 1
        assert first_point.payload["category"] == "time-off"

    def test_custom_namespace(self, store, mock_client, chunker):
        chunks = chunker.chunk_document("hello", "Intro.txt")

        store.upload_chunks(chunks, [[0.0, 0.0, 1.0]], namespace="blog")

        point = mock_client.upsert.call_args.kwargs["points"][0]
        assert point.payload["namespace"] == "blog"

    def test_length_mismatch(self, store, chunker):
        chunks = chunker.chunk_document("hello", "Intro.txt")

        with pytest.raises(ValueError):
            store.upload_chunks(chunks, [])

    def test_empty_upload(self, store, mock_client):
        assert store.upload_chunks([], []) == 0
        mock_client.upsert.assert_not_called()


class TestSearch:
    """Similarity search restricted to the namespace."""

    def test_search_returns_hits(self, store, mock_client):
        mock_client.query_points.return_value = SimpleNamespace(points=[
            SimpleNamespace(
                payload={"text": "26 days of holiday", "namespace": "wiki", "source": "Holiday Policy.txt"},
                score=0.91
            )
        ])

        hits = store.search([0.1, 0.2, 0.3], top_k=2)

        assert hits == [SearchHit(text="26 days of holiday", metadata={"source": "Holiday Policy.txt"}, score=0.91)]
        kwargs = mock_client.query_points.call_args.kwargs
        assert kwargs["limit"] == 2
        assert [c.key for c in kwargs["query_filter"].must] == ["namespace"]

    def test_search_with_category(self, store, mock_client):
        mock_client.query_points.return_value = SimpleNamespace(points=[])

        store.search([0.1, 0.2, 0.3], category="tools")

        conditions = mock_client.query_points.call_args.kwargs["query_filter"].must
        assert [(c.key, c.match.value) for c in conditions] == [("namespace", "wiki"), ("category", "tools")]


class TestCount:
    def test_count_namespace(self, store, mock_client):
        mock_client.count.return_value = SimpleNamespace(count=5)

        assert store.count_points(namespace="wiki") == 5

    def test_count_failure_is_zero(self, store, mock_client):
        mock_client.get_collection.side_effect = Exception("connection refused")

        assert store.count_points() == 0
