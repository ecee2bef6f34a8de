"""
RAG System Configuration

Centralized configuration for all RAG components including:
- Vector database settings (Qdrant collection and namespace)
- Embedding provider settings
- Chunking parameters
- Retrieval and ingestion parameters
"""

import os
from typing import Optional
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class RAGConfig(BaseSettings):
    """Configuration for RAG system."""

    # Qdrant Vector Database
    qdrant_url: str = Field(
        default="http://localhost:6333",
        description="Qdrant server URL"
    )
    qdrant_api_key: Optional[str] = Field(
        default=None,
        description="Qdrant API key (for cloud deployments)"
    )
    qdrant_collection_name: str = Field(
        default="wiki_documents",
        description="Name of the Qdrant collection"
    )
    namespace: str = Field(
        default="wiki",
        description="Logical partition inside the collection"
    )

    # Embedding Model
    embedding_provider: str = Field(
        default="azure",
        description="Embedding backend: 'azure', 'openai' or 'local'"
    )
    embedding_model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model or Azure deployment name"
    )
    embedding_dimension: int = Field(
        default=1536,
        gt=0,
        description="Dimension of embedding vectors (text-embedding-3-small = 1536)"
    )
    embedding_batch_size: int = Field(
        default=16,
        gt=0,
        description="Batch size for embedding generation"
    )
    embedding_api_base: Optional[str] = Field(
        default=None,
        description="Endpoint for managed embeddings (e.g. https://<name>.openai.azure.com)"
    )
    embedding_api_version: Optional[str] = Field(
        default=None,
        description="API version for Azure OpenAI embeddings"
    )
    embedding_api_key: Optional[str] = Field(
        default=None,
        description="API key for managed embeddings"
    )

    # Text Chunking
    chunk_size: int = Field(
        default=1000,
        gt=0,
        description="Tokens per chunk"
    )
    chunk_overlap: int = Field(
        default=100,
        ge=0,
        description="Overlap between chunks in tokens"
    )
    char_chunk_size: int = Field(
        default=1500,
        gt=0,
        description="Characters per chunk when falling back to character splitting"
    )
    char_chunk_overlap: int = Field(
        default=150,
        ge=0,
        description="Overlap between character chunks"
    )
    min_chunk_size: int = Field(
        default=1,
        ge=1,
        description="Minimum chunk size to keep (characters)"
    )
    max_embedding_tokens: int = Field(
        default=8000,
        gt=0,
        description="Max tokens accepted by the embedding model"
    )

    # Retrieval
    top_k: int = Field(
        default=4,
        ge=1,
        description="Number of similar chunks to retrieve"
    )
    score_threshold: Optional[float] = Field(
        default=None,
        description="Minimum similarity score threshold"
    )

    # Ingestion
    wiki_dir: str = Field(
        default="drive-download",
        description="Directory holding the exported wiki files"
    )
    upload_batch_size: int = Field(
        default=100,
        gt=0,
        description="Documents embedded and uploaded per batch"
    )

    # Performance
    use_gpu: bool = Field(
        default=False,
        description="Use GPU for local embeddings if available"
    )

    class Config:
        env_prefix = "RAG_"
        case_sensitive = False

    @model_validator(mode="after")
    def _check_overlaps(self) -> "RAGConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than chunk_size ({self.chunk_size})"
            )
        if self.char_chunk_overlap >= self.char_chunk_size:
            raise ValueError(
                f"char_chunk_overlap ({self.char_chunk_overlap}) must be smaller than "
                f"char_chunk_size ({self.char_chunk_size})"
            )
        if self.chunk_size > self.max_embedding_tokens:
            raise ValueError("chunk_size cannot exceed max_embedding_tokens")
        return self


def get_rag_config() -> RAGConfig:
    """Get RAG configuration from environment."""
    # Hosting platforms set QDRANT_URL / QDRANT_API_KEY without our prefix
    overrides = {}
    if os.getenv("QDRANT_URL"):
        overrides["qdrant_url"] = os.getenv("QDRANT_URL")
    if os.getenv("QDRANT_API_KEY"):
        overrides["qdrant_api_key"] = os.getenv("QDRANT_API_KEY")
    return RAGConfig(**overrides)
