"""Company blog scraper: finds AI-related blog post URLs."""

import logging
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup
from tenacity import retry, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)

BLOG_PAGE_URL = "https://www.amsterdamstandard.com/blog/"
AI_PAGES = BLOG_PAGE_URL + "tag/ai"


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    reraise=True
)
def get_page_content(url: str, client: Optional[httpx.Client] = None) -> str:
    """
    Fetch the content of the given URL.

    Args:
        url: URL to fetch
        client: Shared httpx client (optional)

    Returns:
        Page content
    """
    try:
        if client is None:
            response = httpx.get(url, timeout=30.0, follow_redirects=True)
        else:
            response = client.get(url)
        response.raise_for_status()
        return response.text
    except httpx.HTTPError as e:
        logger.error(f"Error fetching {url}: {e}")
        raise


def get_blog_urls(urls: List[str], blog_page_url: str = BLOG_PAGE_URL) -> List[str]:
    """Keep only URLs that point into the blog."""
    return [url for url in urls if blog_page_url in url]


def find_ai_urls(html_content: str, blog_page_url: str = BLOG_PAGE_URL) -> List[str]:
    """
    Parse HTML content and return the blog URLs it links to.

    Args:
        html_content: HTML of a blog listing page
        blog_page_url: Prefix identifying blog links

    Returns:
        Blog URLs in document order
    """
    soup = BeautifulSoup(html_content, "html.parser")
    urls = [a["href"] for a in soup.find_all("a", href=True) if a["href"]]
    return get_blog_urls(urls, blog_page_url)


def fetch_ai_blog_urls(client: Optional[httpx.Client] = None) -> List[str]:
    """Download the AI tag page and list the blog posts it links to."""
    logger.info("Fetching AI blog pages...")
    content = get_page_content(AI_PAGES, client=client)
    return find_ai_urls(content)
