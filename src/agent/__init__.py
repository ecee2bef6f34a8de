"""
Agent module for the wiki chatbot.

This module provides the LLM client, prompts, conversation history and the
retrieval-augmented answering chain.
"""

from .llm_config import LLMClient, LLMSettings, get_llm_client
from .history import ConversationHistory
from .chain import RAGChain, create_rag_chain
from .prompts import build_messages, get_system_prompt

__all__ = [
    "LLMClient",
    "LLMSettings",
    "get_llm_client",
    "ConversationHistory",
    "RAGChain",
    "create_rag_chain",
    "build_messages",
    "get_system_prompt"
]
