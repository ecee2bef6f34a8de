"""
Vector Store Interface for Qdrant

Manages storage and retrieval of wiki chunk embeddings in Qdrant.

Features:
- Collection management (create, delete, info)
- Namespaces: logical partitions of one collection, kept in the payload
- Batch upload of embeddings with metadata
- Similarity search with metadata filters (category, source)
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    FilterSelector,
    MatchValue,
    PayloadSchemaType,
    PointStruct,
    VectorParams,
)

from .config import RAGConfig
from .chunker import TextChunk

logger = logging.getLogger(__name__)

TEXT_KEY = "text"
NAMESPACE_KEY = "namespace"
INDEXED_FIELDS = (NAMESPACE_KEY, "source", "category")


@dataclass
class SearchHit:
    """A stored chunk returned by similarity search."""
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    score: float = 0.0


class VectorStore:
    """Interface to Qdrant vector database."""

    def __init__(self, config: RAGConfig, client: Optional[QdrantClient] = None):
        """
        Initialize vector store.

        Args:
            config: RAG configuration
            client: Pre-built Qdrant client (optional)
        """
        self.config = config
        self.collection_name = config.qdrant_collection_name
        self.namespace = config.namespace
        self.dimension = config.embedding_dimension

        if client is None:
            logger.info(f"Connecting to Qdrant at {config.qdrant_url}")
            logger.info(f"Qdrant API key configured: {bool(config.qdrant_api_key)}")
            client = QdrantClient(
                url=config.qdrant_url,
                api_key=config.qdrant_api_key
            )
        self.client = client

        logger.info(f"Using collection: {self.collection_name} (namespace '{self.namespace}')")

    def _namespace_filter(
        self,
        namespace: Optional[str] = None,
        **matches: Any
    ) -> Filter:
        conditions = [
            FieldCondition(
                key=NAMESPACE_KEY,
                match=MatchValue(value=namespace or self.namespace)
            )
        ]
        for key, value in matches.items():
            if value is not None:
                conditions.append(FieldCondition(key=key, match=MatchValue(value=value)))
        return Filter(must=conditions)

    def collection_exists(self) -> bool:
        collections = self.client.get_collections().collections
        return self.collection_name in [c.name for c in collections]

    def create_collection(self, recreate: bool = False) -> bool:
        """
        Create the collection for wiki chunk embeddings.

        Args:
            recreate: If True, delete existing collection and recreate

        Returns:
            True if collection was created, False if already existed
        """
        if self.collection_exists():
            if recreate:
                logger.warning(f"Deleting existing collection: {self.collection_name}")
                self.client.delete_collection(self.collection_name)
            else:
                logger.info(f"Collection already exists: {self.collection_name}")
                return False

        logger.info(f"Creating collection: {self.collection_name}")
        self.client.create_collection(
            collection_name=self.collection_name,
            vectors_config=VectorParams(
                size=self.dimension,
                distance=Distance.COSINE
            )
        )

        for field_name in INDEXED_FIELDS:
            self.client.create_payload_index(
                collection_name=self.collection_name,
                field_name=field_name,
                field_schema=PayloadSchemaType.KEYWORD
            )

        logger.info("Collection created successfully with payload indexes")
        return True

    def delete_collection(self) -> bool:
        """
        Delete the collection.

        Returns:
            True if deleted, False if it could not be deleted
        """
        try:
            self.client.delete_collection(self.collection_name)
            logger.info(f"Deleted collection: {self.collection_name}")
            return True
        except Exception as e:
            logger.error(f"Error deleting collection: {e}")
            return False

    def clear_collection(self) -> bool:
        """Drop all data from the collection and recreate it with fresh indexes."""
        logger.warning(f"Clearing collection: {self.collection_name}")
        self.delete_collection()
        self.create_collection()
        return True

    def delete_namespace(self, namespace: Optional[str] = None) -> None:
        """Remove every point belonging to one namespace."""
        namespace = namespace or self.namespace
        logger.warning(f"Deleting namespace '{namespace}' from {self.collection_name}")
        self.client.delete(
            collection_name=self.collection_name,
            points_selector=FilterSelector(filter=self._namespace_filter(namespace))
        )

    def get_collection_info(self) -> Optional[Dict]:
        """
        Get information about the collection.

        Returns:
            Dictionary with collection info, or None if it doesn't exist
        """
        try:
            info = self.client.get_collection(self.collection_name)
            return {
                "name": self.collection_name,
                "points_count": info.points_count,
                "status": info.status,
            }
        except Exception as e:
            logger.error(f"Error getting collection info: {e}")
            return None

    def upload_chunks(
        self,
        chunks: List[TextChunk],
        embeddings: List[List[float]],
        namespace: Optional[str] = None,
        batch_size: Optional[int] = None
    ) -> int:
        """
        Upload chunks with their embeddings to Qdrant.

        Args:
            chunks: List of text chunks
            embeddings: List of embedding vectors (same order as chunks)
            namespace: Target namespace (defaults to the configured one)
            batch_size: Number of points to upload per request

        Returns:
            Number of points uploaded
        """
        if len(chunks) != len(embeddings):
            raise ValueError("Number of chunks must match number of embeddings")

        if not chunks:
            return 0

        namespace = namespace or self.namespace
        batch_size = batch_size or self.config.upload_batch_size

        points = []
        for chunk, embedding in zip(chunks, embeddings):
            payload = chunk.to_metadata()
            payload[TEXT_KEY] = chunk.text
            payload[NAMESPACE_KEY] = namespace
            points.append(PointStruct(
                id=str(uuid.uuid4()),
                vector=embedding,
                payload=payload
            ))

        total_uploaded = 0
        for i in range(0, len(points), batch_size):
            batch = points[i:i + batch_size]
            self.client.upsert(
                collection_name=self.collection_name,
                points=batch
            )
            total_uploaded += len(batch)
            logger.info(f"Uploaded {total_uploaded}/{len(points)} points")

        return total_uploaded

    def search(
        self,
        query_embedding: List[float],
        top_k: int = 4,
        namespace: Optional[str] = None,
        category: Optional[str] = None,
        source: Optional[str] = None,
        score_threshold: Optional[float] = None
    ) -> List[SearchHit]:
        """
        Search for similar chunks.

        Args:
            query_embedding: Query vector
            top_k: Number of results to return
            namespace: Namespace to search (defaults to the configured one)
            category: Filter by document category
            source: Filter by source filename
            score_threshold: Minimum similarity score

        Returns:
            List of SearchHit, best match first
        """
        query_filter = self._namespace_filter(namespace, category=category, source=source)

        results = self.client.query_points(
            collection_name=self.collection_name,
            query=query_embedding,
            limit=top_k,
            query_filter=query_filter,
            score_threshold=score_threshold,
            with_payload=True
        ).points

        hits = []
        for result in results:
            payload = dict(result.payload or {})
            text = payload.pop(TEXT_KEY, "")
            payload.pop(NAMESPACE_KEY, None)
            hits.append(SearchHit(text=text, metadata=payload, score=result.score))

        return hits

    def count_points(self, namespace: Optional[str] = None) -> int:
        """
        Count points in the collection, or in one namespace if given.

        Returns:
            Number of points
        """
        try:
            if namespace is None:
                info = self.client.get_collection(self.collection_name)
                return info.points_count or 0
            return self.client.count(
                collection_name=self.collection_name,
                count_filter=self._namespace_filter(namespace),
                exact=True
            ).count
        except Exception:
            return 0


def get_vector_store(config: Optional[RAGConfig] = None) -> VectorStore:
    """
    Get vector store instance.

    Args:
        config: RAG configuration (optional)

    Returns:
        VectorStore instance
    """
    if config is None:
        from .config import get_rag_config
        config = get_rag_config()

    return VectorStore(config)
