"""
FastAPI Application Module

Provides the REST API for the wiki chatbot.
"""

from .main import app

__all__ = ["app"]
