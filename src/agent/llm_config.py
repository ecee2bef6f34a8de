"""
LiteLLM Configuration Module

Unified interface to the chat model through LiteLLM, which speaks an
OpenAI-compatible API to 100+ providers. The starter kit targets Azure
OpenAI (gpt-4o / gpt-4o-mini deployments) but any LiteLLM provider works.

Environment variables:
- LLM_PROVIDER: Provider name (e.g., "azure", "openai", "anthropic")
- LLM_MODEL: Model identifier; for Azure this is the deployment name
- AZURE_API_KEY / OPENAI_API_KEY / LLM_API_KEY: credentials
- LLM_BASE_URL: Endpoint, e.g. https://<resource>.openai.azure.com
- LLM_API_VERSION: Azure OpenAI API version
- LLM_MAX_TOKENS: (Optional) Max tokens for responses (default: 1024)
- LLM_TEMPERATURE: (Optional) Temperature (default: 0.1 for factual answers)
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings
import litellm
from litellm import acompletion, completion

logger = logging.getLogger(__name__)


class LLMSettings(BaseSettings):
    """LLM configuration settings"""

    # Provider and model
    llm_provider: str = Field(default="azure", description="LLM provider name")
    llm_model: str = Field(default="gpt-4o", description="Model identifier or Azure deployment")

    # API credentials
    llm_api_key: Optional[str] = Field(default=None, description="API key for LLM provider")
    azure_api_key: Optional[str] = Field(default=None, description="Azure OpenAI API key")
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    anthropic_api_key: Optional[str] = Field(default=None, description="Anthropic API key")

    # Optional configuration
    llm_base_url: Optional[str] = Field(default=None, description="Custom base URL / Azure endpoint")
    llm_api_version: Optional[str] = Field(default=None, description="Azure OpenAI API version")
    llm_max_tokens: int = Field(default=1024, description="Max tokens for completion")
    llm_temperature: float = Field(default=0.1, description="Lower temperature for more factual answers")
    llm_timeout: int = Field(default=60, description="Request timeout in seconds")

    # LiteLLM specific settings
    litellm_log_level: str = Field(default="ERROR", description="LiteLLM log level")
    litellm_drop_params: bool = Field(
        default=True,
        description="Drop unsupported params for each provider"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


class LLMClient:
    """Chat completion client using LiteLLM."""

    def __init__(self, settings: Optional[LLMSettings] = None):
        """
        Initialize LLM client.

        Args:
            settings: LLM settings (defaults to loading from environment)
        """
        self.settings = settings or LLMSettings()

        litellm.drop_params = self.settings.litellm_drop_params
        logging.getLogger("LiteLLM").setLevel(self.settings.litellm_log_level.upper())

        self.api_key = self._resolve_api_key()
        self.model = self._build_model_string()

    def _resolve_api_key(self) -> Optional[str]:
        """Provider-specific key first, generic llm_api_key second."""
        provider = self.settings.llm_provider.lower()
        provider_keys = {
            "azure": self.settings.azure_api_key,
            "openai": self.settings.openai_api_key,
            "anthropic": self.settings.anthropic_api_key,
        }
        return provider_keys.get(provider) or self.settings.llm_api_key

    def _build_model_string(self) -> str:
        """
        Build LiteLLM model string.

        Examples:
        - "azure/gpt-4o" (Azure deployment named gpt-4o)
        - "gpt-4o-mini" (OpenAI default)
        - "claude-3-5-sonnet-20241022" (Anthropic is auto-detected)
        """
        provider = self.settings.llm_provider.lower()
        model = self.settings.llm_model

        if provider in ["azure", "bedrock", "vertex_ai", "gemini"]:
            return f"{provider}/{model}"

        return model

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _build_params(self, messages: List[Dict[str, str]], **kwargs) -> Dict[str, Any]:
        params = {
            "model": self.model,
            "messages": messages,
            "max_tokens": kwargs.pop("max_tokens", self.settings.llm_max_tokens),
            "temperature": kwargs.pop("temperature", self.settings.llm_temperature),
            "timeout": kwargs.pop("timeout", self.settings.llm_timeout),
        }

        if self.api_key:
            params["api_key"] = self.api_key
        if self.settings.llm_base_url:
            params["api_base"] = self.settings.llm_base_url
        if self.settings.llm_api_version:
            params["api_version"] = self.settings.llm_api_version

        params.update(kwargs)
        return params

    def complete(self, messages: List[Dict[str, str]], **kwargs) -> Any:
        """
        Generate completion using LiteLLM.

        Args:
            messages: List of message dicts with 'role' and 'content'
            **kwargs: Additional parameters to pass to litellm.completion()

        Returns:
            LiteLLM completion response

        Example:
            >>> client = LLMClient()
            >>> response = client.complete(
            ...     messages=[{"role": "user", "content": "Hello!"}]
            ... )
            >>> print(response.choices[0].message.content)
        """
        return completion(**self._build_params(messages, **kwargs))

    async def acomplete(self, messages: List[Dict[str, str]], **kwargs) -> Any:
        """Async version of complete()."""
        return await acompletion(**self._build_params(messages, **kwargs))

    def complete_text(self, messages: List[Dict[str, str]], **kwargs) -> str:
        """Run a completion and return only the message text."""
        response = self.complete(messages, **kwargs)
        return response.choices[0].message.content or ""

    def count_tokens(self, messages: List[Dict[str, str]]) -> int:
        """
        Count tokens in messages using LiteLLM's token counter.

        Args:
            messages: List of message dicts

        Returns:
            Estimated token count
        """
        try:
            return litellm.token_counter(model=self.model, messages=messages)
        except Exception:
            # Rough estimate: 4 chars = 1 token
            total_chars = sum(len(msg.get("content", "")) for msg in messages)
            return total_chars // 4


_default_client: Optional[LLMClient] = None


def get_llm_client(settings: Optional[LLMSettings] = None) -> LLMClient:
    """
    Get or create the default LLM client.

    Args:
        settings: Optional settings (creates new client if provided)

    Returns:
        LLM client instance
    """
    global _default_client

    if settings is not None:
        return LLMClient(settings)

    if _default_client is None:
        _default_client = LLMClient()

    return _default_client
