"""
API Request/Response Models (Pydantic Schemas)

Defines data validation and serialization for FastAPI endpoints.
"""

from typing import List, Dict, Any, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Chat Endpoints
class ConversationMessage(BaseModel):
    """Single message in conversation history"""

    role: str = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="Message content")


class AskRequest(BaseModel):
    """Request model for a wiki question"""

    # Optional so a missing question gets the chat API's own 400 payload
    question: Optional[str] = Field(
        default=None,
        max_length=2000,
        description="Question about the company wiki",
        examples=["What are the company holidays?"]
    )
    sessionId: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Conversation id; generated when omitted"
    )


class AskResponse(BaseModel):
    """Answer with source attribution"""

    status: str = Field(..., description="'success' or 'error'")
    question: Optional[str] = Field(None, description="Question as received")
    answer: Optional[str] = Field(None, description="Generated answer")
    sources: Optional[List[str]] = Field(None, description="Titles of the wiki documents used")
    timestamp: str = Field(..., description="ISO 8601 time the answer was produced")
    sessionId: Optional[str] = Field(None, description="Conversation id")
    execution_time_ms: Optional[int] = Field(None, description="Total execution time in milliseconds")
    error: Optional[str] = Field(None, description="Error message if failed")


# Sessions
class SessionsResponse(BaseModel):
    """Sessions seen since startup"""

    status: str = Field(default="ok")
    activeSessions: List[str] = Field(default_factory=list)
    count: int = Field(..., description="Number of active sessions")


class HistoryResponse(BaseModel):
    """Stored conversation for one session"""

    status: str = Field(default="ok")
    sessionId: str
    messages: List[ConversationMessage]
    count: int


class SessionDeletedResponse(BaseModel):
    """Result of forgetting a session"""

    status: str = Field(default="ok")
    sessionId: str
    message: str


# Health Check
class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(..., description="Service status", examples=["ok"])
    message: str = Field(..., description="Status message", examples=["API is operational"])
    activeSessions: int = Field(..., description="Number of active sessions")
    version: str = Field(..., description="API version", examples=["0.1.0"])


# Error Response
class ErrorResponse(BaseModel):
    """Standard error response"""

    detail: str = Field(..., description="Error message")
    error_code: Optional[str] = Field(None, description="Error code for client handling")
    timestamp: datetime = Field(default_factory=_utcnow)


# Search Models
class SearchRequest(BaseModel):
    """Raw semantic search over the wiki namespace"""

    query: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Search text",
        examples=["remote work guidelines"]
    )
    top_k: int = Field(default=4, ge=1, le=20, description="Number of results to return")
    category: Optional[str] = Field(
        default=None,
        description="Restrict to one category (time-off, tools, hr, locations, general)"
    )

    @field_validator('query')
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        """Reject whitespace-only search text."""
        v = v.strip()
        if not v:
            raise ValueError("query must not be blank")
        return v


class SearchResult(BaseModel):
    """Single matching chunk"""

    text: str
    source: Optional[str] = None
    title: Optional[str] = None
    category: Optional[str] = None
    score: Optional[float] = Field(None, description="Cosine similarity")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SearchResponse(BaseModel):
    """Semantic search results"""

    success: bool
    query: str
    results: List[SearchResult]
    results_count: int
