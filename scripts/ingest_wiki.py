"""
Ingest the Company Wiki

This script:
1. Reads every file in the exported wiki directory
2. Chunks the text (token-based, with a character-based fallback)
3. Generates embeddings with the configured embedding model
4. Uploads the chunks to the Qdrant "wiki" namespace

Usage:
    # Ingest the default directory (RAG_WIKI_DIR, default ./drive-download)
    python scripts/ingest_wiki.py

    # Re-ingest from scratch
    python scripts/ingest_wiki.py --clear-first

    # Run sample searches afterwards
    python scripts/ingest_wiki.py --demo
"""

import sys
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.rag.config import get_rag_config
from src.rag.embedding_service import get_embedding_service
from src.rag.vector_store import get_vector_store
from src.rag.retriever import Retriever
from src.ingestion.wiki_loader import WikiIngestionPipeline, demonstrate_queries

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Load environment
load_dotenv()


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Chunk, embed and upload the exported company wiki"
    )
    parser.add_argument(
        "--wiki-dir",
        type=str,
        help="Directory with exported wiki files (default: RAG_WIKI_DIR)"
    )
    parser.add_argument(
        "--clear-first",
        action="store_true",
        help="Delete the namespace's existing chunks before uploading"
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Run sample searches after ingestion"
    )

    args = parser.parse_args()

    config = get_rag_config()
    logger.info(f"Qdrant: {config.qdrant_url}")
    logger.info(f"Collection: {config.qdrant_collection_name} (namespace '{config.namespace}')")

    embedding_service = get_embedding_service(config)
    vector_store = get_vector_store(config)
    pipeline = WikiIngestionPipeline(
        config=config,
        embedding_service=embedding_service,
        vector_store=vector_store
    )

    try:
        uploaded = pipeline.run(
            wiki_dir=args.wiki_dir,
            clear_first=args.clear_first,
            show_progress=True
        )

        if uploaded > 0:
            logger.info("\nIngestion completed successfully!")
        else:
            logger.warning("\nIngestion completed but no chunks were uploaded")

        if args.demo and uploaded > 0:
            demonstrate_queries(Retriever(embedding_service, vector_store, config))

        sys.exit(0)

    except KeyboardInterrupt:
        logger.info("\nIngestion interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"\nIngestion failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
