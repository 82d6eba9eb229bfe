"""
Base classes and data structures for LLM providers.

This module defines the abstract base class that all LLM providers must implement,
as well as the LLMResponse data structure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import httpx

from aligner.config import REQUEST_TIMEOUT


@dataclass
class LLMResponse:
    """Response from LLM with token usage information"""
    content: str
    prompt_tokens: int = 0  # Number of tokens in the prompt
    completion_tokens: int = 0  # Number of tokens in the response

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class LLMProvider(ABC):
    """Abstract base class for LLM providers"""

    name = "llm"

    def __init__(self, model: str, timeout: int = REQUEST_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the LLM provider.

        Args:
            model: Model name/identifier
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the service in tests)
        """
        self.model = model
        self.timeout = timeout
        self._transport = transport
        self._client = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create a persistent HTTP client with connection pooling"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport
            )
        return self._client

    async def close(self):
        """Close the HTTP client"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    async def generate_json(self, prompt: str, response_schema: dict) -> LLMResponse:
        """
        Generate a JSON document constrained by ``response_schema``.

        Args:
            prompt: The full instruction including the source text
            response_schema: Schema the service must follow

        Returns:
            LLMResponse whose content is the raw JSON text

        Raises:
            ProviderError: If the request fails or yields no text
        """
        pass
