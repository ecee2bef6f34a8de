"""
Wiki Ingestion

Reads the exported wiki directory, chunks every file and stores the chunks
with their embeddings in the Qdrant wiki namespace.
"""

import logging
import math
from pathlib import Path
from typing import List, Optional, Union

from tqdm import tqdm

from ..rag.chunker import DocumentChunker, TextChunk
from ..rag.config import RAGConfig, get_rag_config
from ..rag.embedding_service import EmbeddingService, get_embedding_service
from ..rag.retriever import Document, Retriever
from ..rag.vector_store import VectorStore, get_vector_store

logger = logging.getLogger(__name__)


def load_wiki_documents(
    wiki_dir: Union[str, Path],
    chunker: DocumentChunker
) -> List[TextChunk]:
    """
    Read and chunk every file in the wiki directory.

    Sub-directories are skipped. A file that cannot be read or chunked is
    logged and skipped; the others are still processed.

    Args:
        wiki_dir: Directory with exported wiki files
        chunker: Document chunker

    Returns:
        All chunks from all files
    """
    wiki_path = Path(wiki_dir)
    if not wiki_path.is_dir():
        raise FileNotFoundError(f"Wiki directory not found: {wiki_path}")

    files = sorted(wiki_path.iterdir())
    logger.info(f"Found {len(files)} files in the wiki directory")

    all_chunks = []
    for file_path in files:
        if file_path.is_dir():
            continue

        try:
            content = file_path.read_text(encoding="utf-8")
            logger.info(f"Processing file: {file_path.name}")

            chunks = chunker.chunk_document(content, source=file_path.name)
            all_chunks.extend(chunks)
            logger.info(f"Split {file_path.name} into {len(chunks)} chunks")
        except Exception as e:
            logger.error(f"Error processing file {file_path.name}: {e}")

    logger.info(f"Total chunks created: {len(all_chunks)}")
    return all_chunks


class WikiIngestionPipeline:
    """Pipeline for chunking, embedding and uploading wiki files."""

    def __init__(
        self,
        config: Optional[RAGConfig] = None,
        embedding_service: Optional[EmbeddingService] = None,
        vector_store: Optional[VectorStore] = None,
        chunker: Optional[DocumentChunker] = None
    ):
        self.config = config or get_rag_config()
        self.embedding_service = embedding_service or get_embedding_service(self.config)
        self.vector_store = vector_store or get_vector_store(self.config)
        self.chunker = chunker or DocumentChunker(self.config)

    def run(
        self,
        wiki_dir: Optional[Union[str, Path]] = None,
        clear_first: bool = False,
        show_progress: bool = False
    ) -> int:
        """
        Ingest the wiki.

        Args:
            wiki_dir: Directory to read (defaults to config.wiki_dir)
            clear_first: Remove the namespace's existing points before uploading
            show_progress: Show a tqdm progress bar over batches

        Returns:
            Number of chunks uploaded
        """
        logger.info("Starting wiki ingestion...")

        documents = load_wiki_documents(wiki_dir or self.config.wiki_dir, self.chunker)
        if not documents:
            logger.info("No documents to process. Exiting.")
            return 0

        self.vector_store.create_collection()
        if clear_first:
            self.vector_store.delete_namespace()

        batch_size = self.config.upload_batch_size
        total_batches = math.ceil(len(documents) / batch_size)
        uploaded = 0

        batch_starts = range(0, len(documents), batch_size)
        for batch_num, start in enumerate(tqdm(batch_starts, disable=not show_progress), 1):
            batch = documents[start:start + batch_size]
            logger.info(f"Processing batch {batch_num}/{total_batches}")

            embeddings = self.embedding_service.embed_batch([chunk.text for chunk in batch])
            uploaded += self.vector_store.upload_chunks(batch, embeddings)

            logger.info(f"Added batch of {len(batch)} documents to Qdrant")

        logger.info(
            f"Successfully added {uploaded} chunks to collection "
            f"'{self.config.qdrant_collection_name}' (namespace '{self.config.namespace}')"
        )
        return uploaded


def display_results(documents: List[Document]):
    """Print a short preview of each search result."""
    for i, doc in enumerate(documents, 1):
        print(f"\nResult {i}:")
        print(f"Content: {doc.page_content[:150]}...")
        print(f"Source: {doc.metadata.get('source')}")
        print(f"Category: {doc.metadata.get('category') or 'N/A'}")
        if doc.metadata.get("chunk"):
            print(f"Chunk: {doc.metadata['chunk']}/{doc.metadata.get('total_chunks')}")


def demonstrate_queries(retriever: Retriever):
    """Show plain, category-filtered and hybrid search against the fresh index."""
    print("\n=== QUERY DEMONSTRATIONS ===")

    basic_query = "What are the company holidays?"
    print(f"\n1. Basic similarity search for: \"{basic_query}\"")
    display_results(retriever.similarity_search(basic_query, k=2))

    category_query = "What tools does the company use?"
    print(f"\n2. Category-filtered search for: \"{category_query}\"")
    display_results(retriever.similarity_search(category_query, k=2, filter={"category": "tools"}))

    hybrid_query = "communication guidelines for remote work"
    print(f"\n3. Hybrid search for: \"{hybrid_query}\"")
    display_results(retriever.hybrid_search(hybrid_query, k=2).documents)
