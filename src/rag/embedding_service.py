"""
Embedding Service

Generates vector embeddings for wiki text.

Providers:
- azure: Azure OpenAI deployment called through LiteLLM (default)
- openai: OpenAI embeddings API called through LiteLLM
- local: sentence-transformers model running in-process (no API costs)

The managed providers default to text-embedding-3-small (1536 dims).
For the local provider set RAG_EMBEDDING_MODEL to e.g.
sentence-transformers/all-MiniLM-L6-v2 and RAG_EMBEDDING_DIMENSION=384.
"""

import logging
from typing import Any, List, Optional
import numpy as np

import litellm

from .config import RAGConfig

logger = logging.getLogger(__name__)

MANAGED_PROVIDERS = ("azure", "openai")


class EmbeddingService:
    """Service for generating text embeddings."""

    def __init__(self, config: RAGConfig):
        """
        Initialize embedding service.

        Args:
            config: RAG configuration
        """
        self.config = config
        self.provider = config.embedding_provider.lower()
        self.model_name = config.embedding_model
        self.batch_size = config.embedding_batch_size
        self.dimension = config.embedding_dimension
        self.model = None

        if self.provider == "local":
            self.model = self._load_local_model()
        elif self.provider not in MANAGED_PROVIDERS:
            raise ValueError(
                f"Unsupported embedding provider '{config.embedding_provider}'. "
                f"Use one of: {', '.join(MANAGED_PROVIDERS + ('local',))}"
            )

        logger.info(f"Embedding provider: {self.provider} ({self.model_name})")
        logger.info(f"Embedding dimension: {self.dimension}")

    def _load_local_model(self):
        from sentence_transformers import SentenceTransformer

        device = "cuda" if self.config.use_gpu else "cpu"
        logger.info(f"Loading embedding model: {self.model_name}")
        model = SentenceTransformer(self.model_name, device=device)
        logger.info(f"Model loaded on device: {device}")
        return model

    @property
    def litellm_model(self) -> str:
        """Model string in LiteLLM's provider/model format."""
        if self.provider == "azure":
            return f"azure/{self.model_name}"
        return self.model_name

    def _embed_remote(self, texts: List[str]) -> List[List[float]]:
        params = {
            "model": self.litellm_model,
            "input": texts,
        }
        if self.config.embedding_api_base:
            params["api_base"] = self.config.embedding_api_base
        if self.config.embedding_api_version:
            params["api_version"] = self.config.embedding_api_version
        if self.config.embedding_api_key:
            params["api_key"] = self.config.embedding_api_key

        response = litellm.embedding(**params)
        return [_extract_vector(item) for item in response.data]

    def _embed_local(self, texts: List[str], show_progress: bool = False) -> List[List[float]]:
        embeddings = self.model.encode(
            texts,
            batch_size=self.batch_size,
            convert_to_numpy=True,
            show_progress_bar=show_progress
        )
        return embeddings.tolist()

    def embed_text(self, text: str) -> List[float]:
        """
        Generate embedding for a single text.

        Args:
            text: Text to embed

        Returns:
            Embedding vector as list of floats
        """
        return self.embed_batch([text])[0]

    def embed_batch(
        self,
        texts: List[str],
        show_progress: bool = False
    ) -> List[List[float]]:
        """
        Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed
            show_progress: Show progress bar (local provider only)

        Returns:
            List of embedding vectors, in input order
        """
        if not texts:
            return []

        if self.provider == "local":
            vectors = self._embed_local(texts, show_progress=show_progress)
        else:
            logger.debug(f"Embedding {len(texts)} texts in batches of {self.batch_size}")
            vectors = []
            for i in range(0, len(texts), self.batch_size):
                vectors.extend(self._embed_remote(texts[i:i + self.batch_size]))

        if len(vectors) != len(texts):
            raise ValueError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        return vectors

    def get_query_embedding(self, query: str) -> List[float]:
        """
        Generate embedding for a search query.

        Args:
            query: Search query text

        Returns:
            Query embedding vector
        """
        # Queries and documents share one embedding space for these models
        return self.embed_text(query)

    def similarity(
        self,
        embedding1: List[float],
        embedding2: List[float]
    ) -> float:
        """
        Calculate cosine similarity between two embeddings.

        Args:
            embedding1: First embedding vector
            embedding2: Second embedding vector

        Returns:
            Cosine similarity score
        """
        vec1 = np.array(embedding1)
        vec2 = np.array(embedding2)

        norm1 = np.linalg.norm(vec1)
        norm2 = np.linalg.norm(vec2)

        if norm1 == 0 or norm2 == 0:
            return 0.0

        return float(np.dot(vec1, vec2) / (norm1 * norm2))


def _extract_vector(item: Any) -> List[float]:
    """LiteLLM returns dict-like or attribute-style embedding entries."""
    if isinstance(item, dict):
        return list(item["embedding"])
    return list(item.embedding)


def get_embedding_service(config: Optional[RAGConfig] = None) -> EmbeddingService:
    """
    Get embedding service instance.

    Args:
        config: RAG configuration (optional, will load from env if not provided)

    Returns:
        EmbeddingService instance
    """
    if config is None:
        from .config import get_rag_config
        config = get_rag_config()

    return EmbeddingService(config)
