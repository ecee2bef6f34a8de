"""
Find AI Blog Posts

Lists the company blog posts tagged with AI.

Usage:
    python scripts/find_ai_blog_posts.py
"""

import sys
import logging
from pathlib import Path

import httpx

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.ingestion.blog_scraper import AI_PAGES, fetch_ai_blog_urls

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def main():
    try:
        with httpx.Client(timeout=30.0, follow_redirects=True) as client:
            urls = fetch_ai_blog_urls(client=client)
    except httpx.HTTPError as e:
        logger.error(f"Could not fetch {AI_PAGES}: {e}")
        sys.exit(1)

    print(f"Found {len(urls)} AI blog URLs:")
    for url in urls:
        print(url)


if __name__ == "__main__":
    main()
