"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from src.rag.config import RAGConfig
from src.rag.chunker import DocumentChunker, TokenTextSplitter


class WordEncoding:
    """Offline stand-in for a tiktoken encoding: one token per word."""

    def __init__(self):
        self.vocab = {}
        self.words = []

    def encode(self, text):
        tokens = []
        for word in text.split():
            if word not in self.vocab:
                self.vocab[word] = len(self.words)
                self.words.append(word)
            tokens.append(self.vocab[word])
        return tokens

    def decode(self, tokens):
        return " ".join(self.words[t] for t in tokens)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def word_encoding():
    return WordEncoding()


@pytest.fixture
def rag_config(monkeypatch):
    """Small chunk sizes so tests produce several chunks from short text."""
    monkeypatch.delenv("QDRANT_URL", raising=False)
    monkeypatch.delenv("QDRANT_API_KEY", raising=False)
    return RAGConfig(
        chunk_size=10,
        chunk_overlap=2,
        char_chunk_size=200,
        char_chunk_overlap=20,
        embedding_dimension=3,
        upload_batch_size=2,
    )


@pytest.fixture
def chunker(rag_config, word_encoding):
    """Document chunker that never touches tiktoken's download cache."""
    return DocumentChunker(
        rag_config,
        token_splitter=TokenTextSplitter(
            rag_config.chunk_size,
            rag_config.chunk_overlap,
            encoding=word_encoding
        )
    )


@pytest.fixture
def wiki_dir(tmp_path):
    """Exported wiki with three documents and a nested folder."""
    directory = tmp_path / "drive-download"
    directory.mkdir()
    (directory / "Holiday Policy.txt").write_text(
        "Employees get 26 days of paid holiday per year.", encoding="utf-8"
    )
    (directory / "Development Tools.md").write_text(
        "We use GitHub, Jira and Slack for daily work.", encoding="utf-8"
    )
    (directory / "Integration Budget.txt").write_text(
        "Each team has a quarterly integration budget.", encoding="utf-8"
    )
    (directory / "archive").mkdir()
    (directory / "archive" / "old.txt").write_text("stale", encoding="utf-8")
    return directory


@pytest.fixture
def mock_embedding_service():
    service = MagicMock()
    service.get_query_embedding.return_value = [0.1, 0.2, 0.3]
    service.embed_batch.side_effect = lambda texts, **kwargs: [[0.1, 0.2, 0.3] for _ in texts]
    return service
