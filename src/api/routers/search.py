"""
Search Router

Raw semantic search over the wiki, for checking what retrieval returns.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from typing import Optional
import logging

from ..schemas import SearchRequest, SearchResponse, SearchResult
from ..dependencies import get_search_retriever
from ...rag import Retriever

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/search", response_model=SearchResponse)
async def semantic_search(
    request: SearchRequest,
    retriever: Optional[Retriever] = Depends(get_search_retriever)
):
    """
    Search the wiki using semantic search.

    Returns the chunks the chatbot would see, with their similarity scores.

    **Parameters:**
    - `query`: Your search text (1-500 characters)
    - `top_k`: Number of results to return (1-20, default: 4)
    - `category`: Optional - one of time-off, tools, hr, locations, general
    """
    logger.info(f"Semantic search: {request.query[:100]}...")

    if retriever is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Semantic search is currently unavailable. Qdrant vector database may not be running."
        )

    search_filter = {"category": request.category} if request.category else None

    try:
        documents = await run_in_threadpool(
            retriever.similarity_search, request.query, request.top_k, search_filter
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Semantic search error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Search failed: {str(e)}"
        )

    results = [
        SearchResult(
            text=doc.page_content,
            source=doc.metadata.get("source"),
            title=doc.metadata.get("title"),
            category=doc.metadata.get("category"),
            score=doc.metadata.get("score"),
            metadata=doc.metadata
        )
        for doc in documents
    ]

    logger.info(f"Search completed: {len(results)} results")

    return SearchResponse(
        success=True,
        query=request.query,
        results=results,
        results_count=len(results)
    )
