"""
RAG (Retrieval Augmented Generation) System

This module provides semantic search over the company wiki.

Components:
- embedding_service: Generates vector embeddings (managed API or sentence-transformers)
- chunker: Splits documents into token- or character-bounded chunks
- vector_store: Manages the Qdrant vector database
- retriever: Retrieves relevant context for questions
"""

from .config import RAGConfig, get_rag_config
from .retriever import Document, Retriever, SearchResults, get_retriever

__all__ = [
    "RAGConfig",
    "get_rag_config",
    "Document",
    "Retriever",
    "SearchResults",
    "get_retriever",
]
