"""
Text Chunking for RAG

Splits wiki documents into bounded-size chunks that can be embedded and
retrieved independently.

Strategy:
- Token-based splitting first (tiktoken), sized for the embedding model
- If token splitting fails, fall back to character-based splitting:
  paragraph boundaries first, then sentence boundaries
- Maintain overlap between chunks for context continuity
- Attach source metadata (filename, title, category) to every chunk
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import tiktoken

from .config import RAGConfig

logger = logging.getLogger(__name__)

# (keywords, category) pairs, first match wins
CATEGORY_RULES = [
    (("holiday", "vacation"), "time-off"),
    (("tool", "software"), "tools"),
    (("feedback", "review"), "hr"),
    (("amsterdam", "wrocław", "kraków", "rzeszów", "poznań"), "locations"),
]
DEFAULT_CATEGORY = "general"


def get_category_from_filename(filename: str) -> str:
    """Categorize a wiki document based on keywords in its filename."""
    lower_filename = filename.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lower_filename for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


@dataclass
class TextChunk:
    """A chunk of text with metadata."""
    text: str
    source: str
    title: str
    category: str
    chunk_index: int
    total_chunks: int
    chunk_method: str
    chunk_size: int
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_metadata(self) -> Dict[str, Any]:
        """Payload stored next to the vector (chunk numbers are 1-based)."""
        return {
            "source": self.source,
            "title": self.title,
            "category": self.category,
            "chunk": self.chunk_index + 1,
            "total_chunks": self.total_chunks,
            "chunk_method": self.chunk_method,
            "chunk_size": self.chunk_size,
            "created_at": self.created_at,
        }


class TokenTextSplitter:
    """Splits text into overlapping windows of tokens."""

    def __init__(
        self,
        chunk_size: int,
        chunk_overlap: int,
        encoding_name: str = "cl100k_base",
        encoding=None
    ):
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.encoding_name = encoding_name
        self._encoding = encoding

    @property
    def encoding(self):
        # tiktoken fetches the BPE file on first use, so load lazily
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
        return self._encoding

    def count_tokens(self, text: str) -> int:
        return len(self.encoding.encode(text))

    def split_text(self, text: str) -> List[str]:
        """
        Split text into chunks of at most chunk_size tokens.

        Args:
            text: Text to split

        Returns:
            List of decoded text chunks
        """
        tokens = self.encoding.encode(text)
        if not tokens:
            return []

        step = self.chunk_size - self.chunk_overlap
        chunks = []
        for start in range(0, len(tokens), step):
            window = tokens[start:start + self.chunk_size]
            chunks.append(self.encoding.decode(window))
            if start + self.chunk_size >= len(tokens):
                break
        return chunks


class CharacterTextSplitter:
    """Splits text into overlapping chunks by characters."""

    def __init__(self, chunk_size: int, chunk_overlap: int, min_chunk_size: int = 1):
        """
        Initialize splitter.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters carried over into the next chunk
            min_chunk_size: Chunks shorter than this are dropped
        """
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.min_chunk_size = min_chunk_size

    def split_text(self, text: str) -> List[str]:
        """
        Split text into chunks with overlap.

        Args:
            text: Text to chunk

        Returns:
            List of chunk strings
        """
        text = self._clean_text(text)

        if len(text) < self.min_chunk_size:
            return []

        # Try paragraph-based chunking first
        paragraphs = self._split_paragraphs(text)

        chunks = []
        current_chunk = ""

        for para in paragraphs:
            if len(current_chunk) + len(para) > self.chunk_size and current_chunk:
                chunks.append(current_chunk.strip())
                overlap_text = self._get_overlap(current_chunk.strip())
                current_chunk = (overlap_text + " " if overlap_text else "") + para
            else:
                current_chunk += para

        if current_chunk.strip():
            chunks.append(current_chunk.strip())

        # Paragraphs that are still too long get split on sentences
        final_chunks = []
        for chunk in chunks:
            if len(chunk) > self.chunk_size:
                final_chunks.extend(self._split_by_sentences(chunk))
            else:
                final_chunks.append(chunk)

        return [c for c in final_chunks if len(c) >= self.min_chunk_size]

    def _clean_text(self, text: str) -> str:
        """Normalize whitespace while keeping paragraph breaks."""
        text = text.replace("\r\n", "\n")
        text = re.sub(r'[ \t]+', ' ', text)
        text = re.sub(r'\n\s*\n+', '\n\n', text)
        return text.strip()

    def _split_paragraphs(self, text: str) -> List[str]:
        """Split text on paragraph boundaries."""
        paragraphs = re.split(r'\n\s*\n', text)
        return [p.strip() + "\n\n" for p in paragraphs if p.strip()]

    def _split_by_sentences(self, text: str) -> List[str]:
        """Split long text by sentences."""
        # Room left for the overlap prefix and its separator
        limit = max(1, self.chunk_size - self.chunk_overlap - 1)

        pieces = []
        for sentence in re.split(r'(?<=[.!?])\s+', text):
            if sentence:
                pieces.extend(self._hard_split(sentence, limit))

        chunks = []
        current_chunk = ""

        for piece in pieces:
            if current_chunk and len(current_chunk) + len(piece) > self.chunk_size:
                chunks.append(current_chunk.strip())
                overlap = self._get_overlap(current_chunk.strip())
                current_chunk = overlap + " " if overlap else ""
            current_chunk += piece + " "

        if current_chunk.strip():
            chunks.append(current_chunk.strip())

        return chunks

    @staticmethod
    def _hard_split(text: str, limit: int) -> List[str]:
        if len(text) <= limit:
            return [text]
        return [text[i:i + limit] for i in range(0, len(text), limit)]

    def _get_overlap(self, text: str) -> str:
        """
        Get overlap text from end of chunk.

        Args:
            text: Text to get overlap from

        Returns:
            Last N characters based on overlap setting, starting at a word
        """
        if self.chunk_overlap == 0:
            return ""
        if len(text) <= self.chunk_overlap:
            return text

        overlap = text[-self.chunk_overlap:]

        space_idx = overlap.find(' ')
        if space_idx != -1:
            overlap = overlap[space_idx + 1:]

        return overlap


class DocumentChunker:
    """Turns a whole document into TextChunks, token-first with character fallback."""

    def __init__(
        self,
        config: RAGConfig,
        token_splitter: Optional[TokenTextSplitter] = None,
        char_splitter: Optional[CharacterTextSplitter] = None
    ):
        self.config = config
        self.token_splitter = token_splitter or TokenTextSplitter(
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap
        )
        self.char_splitter = char_splitter or CharacterTextSplitter(
            chunk_size=config.char_chunk_size,
            chunk_overlap=config.char_chunk_overlap,
            min_chunk_size=config.min_chunk_size
        )

    def chunk_document(self, text: str, source: str) -> List[TextChunk]:
        """
        Split one document into chunks.

        Args:
            text: Document content
            source: Filename the content came from

        Returns:
            List of TextChunk objects
        """
        if not text or not text.strip():
            return []

        try:
            pieces = self.token_splitter.split_text(text)
            method, size = "token", self.config.chunk_size
        except Exception as e:
            logger.warning(
                f"Token splitting failed for {source}, falling back to character splitting: {e}"
            )
            pieces = self.char_splitter.split_text(text)
            method, size = "character", self.config.char_chunk_size

        pieces = [p for p in pieces if p.strip()]
        title = Path(source).stem
        category = get_category_from_filename(source)
        created_at = datetime.now(timezone.utc).isoformat()

        return [
            TextChunk(
                text=piece,
                source=source,
                title=title,
                category=category,
                chunk_index=i,
                total_chunks=len(pieces),
                chunk_method=method,
                chunk_size=size,
                created_at=created_at
            )
            for i, piece in enumerate(pieces)
        ]
