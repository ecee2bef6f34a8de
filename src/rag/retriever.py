"""
Retriever

Embeds a question, searches the vector store and turns hits into
documents that can be pasted into a prompt.

hybrid_search() is the entry point used by the chat chain. It is a
semantic search under another name: the vector store has no keyword index,
so it adds source attribution on top of similarity_search() and nothing else.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .config import RAGConfig, get_rag_config
from .embedding_service import EmbeddingService, get_embedding_service
from .vector_store import VectorStore, get_vector_store

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"
CONTEXT_KEYS = ("source", "title", "category")


@dataclass
class Document:
    """Retrieved text with its metadata."""
    page_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResults:
    """Documents from a search plus the de-duplicated titles they came from."""
    documents: List[Document]
    sources: List[str]


def document_title(document: Document) -> str:
    return document.metadata.get("title") or document.metadata.get("source") or UNKNOWN


def format_documents(documents: List[Document]) -> str:
    """Render documents with whichever of source/title/category they carry."""
    blocks = []
    for document in documents:
        metadata_str = ", ".join(
            f"{key}: {document.metadata[key]}"
            for key in CONTEXT_KEYS
            if key in document.metadata
        )
        blocks.append(f"[{metadata_str}]\n{document.page_content}")
    return "\n\n".join(blocks)


def format_documents_with_sources(results: SearchResults) -> str:
    """
    Format documents as a context string with source attribution.

    Each document becomes::

        [Source: <source>, Title: <title>, Category: <category>]
        <content>
    """
    blocks = []
    for document in results.documents:
        source = document.metadata.get("source") or UNKNOWN
        title = document.metadata.get("title") or source
        category = document.metadata.get("category") or "General"
        metadata_str = f"Source: {source}, Title: {title}, Category: {category}"
        blocks.append(f"[{metadata_str}]\n{document.page_content}")
    return "\n\n".join(blocks)


def extract_sources(results: SearchResults) -> List[str]:
    return list(results.sources)


class Retriever:
    """Semantic search over the wiki namespace."""

    def __init__(
        self,
        embedding_service: EmbeddingService,
        vector_store: VectorStore,
        config: Optional[RAGConfig] = None
    ):
        self.embedding_service = embedding_service
        self.vector_store = vector_store
        self.config = config or vector_store.config

    def similarity_search(
        self,
        query: str,
        k: Optional[int] = None,
        filter: Optional[Dict[str, str]] = None
    ) -> List[Document]:
        """
        Return the k chunks closest to the query.

        Args:
            query: Natural language query
            k: Number of documents (defaults to config.top_k)
            filter: Optional metadata filter, keys 'category' and/or 'source'

        Returns:
            List of Document, best match first
        """
        if not query or not query.strip():
            raise ValueError("Query cannot be empty")

        filter = filter or {}
        unknown_keys = set(filter) - {"category", "source"}
        if unknown_keys:
            raise ValueError(f"Unsupported filter keys: {', '.join(sorted(unknown_keys))}")

        query_embedding = self.embedding_service.get_query_embedding(query)
        hits = self.vector_store.search(
            query_embedding=query_embedding,
            top_k=k or self.config.top_k,
            category=filter.get("category"),
            source=filter.get("source"),
            score_threshold=self.config.score_threshold
        )

        documents = []
        for hit in hits:
            metadata = dict(hit.metadata)
            metadata["score"] = hit.score
            documents.append(Document(page_content=hit.text, metadata=metadata))
        return documents

    def hybrid_search(
        self,
        query: str,
        k: Optional[int] = None,
        filter: Optional[Dict[str, str]] = None
    ) -> SearchResults:
        """
        Search and collect the titles of the matching documents.

        Args:
            query: Natural language query
            k: Number of documents (defaults to config.top_k)
            filter: Optional metadata filter

        Returns:
            SearchResults with documents and unique source titles in rank order
        """
        logger.info(f"Performing hybrid search for: \"{query}\"")

        documents = self.similarity_search(query, k=k, filter=filter)
        titles = [document_title(doc) for doc in documents]

        logger.info(
            f"Found {len(documents)} relevant documents from: {', '.join(titles)}"
        )

        return SearchResults(
            documents=documents,
            sources=list(dict.fromkeys(titles))
        )


def get_retriever(config: Optional[RAGConfig] = None) -> Retriever:
    """
    Build a retriever with embedding service and vector store from config.

    Args:
        config: RAG configuration (optional, loads from env if not provided)

    Returns:
        Retriever instance
    """
    config = config or get_rag_config()
    return Retriever(
        embedding_service=get_embedding_service(config),
        vector_store=get_vector_store(config),
        config=config
    )
