"""Ingestion components: wiki export loading and blog link discovery."""

from .wiki_loader import WikiIngestionPipeline, load_wiki_documents
from .blog_scraper import fetch_ai_blog_urls, find_ai_urls

__all__ = [
    "WikiIngestionPipeline",
    "load_wiki_documents",
    "fetch_ai_blog_urls",
    "find_ai_urls",
]
