"""
Ask the Wiki

Runs the sample questions (or one given question) through the RAG chain and
prints answers with their sources.

Usage:
    python scripts/ask_questions.py
    python scripts/ask_questions.py --question "How do I request massages?"
"""

import sys
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.agent.chain import create_rag_chain, demonstrate_rag_pipeline

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

load_dotenv()


def main():
    parser = argparse.ArgumentParser(description="Ask questions about the company wiki")
    parser.add_argument(
        "--question",
        type=str,
        help="Ask a single question instead of the sample set"
    )
    args = parser.parse_args()

    try:
        chain = create_rag_chain()
        demonstrate_rag_pipeline(chain, [args.question] if args.question else None)
    except Exception as e:
        logger.error(f"Error in main function: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
