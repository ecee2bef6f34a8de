"""
API Configuration

Server settings for the chat API, loaded from the environment / .env.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """HTTP server settings"""

    port: int = Field(default=3000, description="Port the API listens on")
    company_name: str = Field(default="Amsterdam Standard", description="Company the assistant answers for")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")
    history_limit: int = Field(default=10, ge=1, description="Messages kept per session")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
