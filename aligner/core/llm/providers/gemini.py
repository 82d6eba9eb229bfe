"""
Google Gemini provider implementation.

This module provides the GeminiProvider class for interacting with
Google's Gemini API in structured-output (JSON) mode.
"""

from typing import Optional
import httpx

from aligner.config import GEMINI_API_BASE, REQUEST_TIMEOUT
from aligner.utils.unified_logger import get_logger, LogType
from ..base import LLMProvider, LLMResponse
from ..exceptions import ProviderError


class GeminiProvider(LLMProvider):
    """
    Provider for Google Gemini API.

    Requests ``application/json`` output constrained by a response schema,
    so the returned text can be parsed without free-form extraction.
    Exactly one HTTP round trip is made per call; failures are raised,
    never retried.

    Configuration:
        api_key: Google AI API key (required)
        model: Gemini model name

    Example:
        >>> provider = GeminiProvider(api_key="AI...", model="gemini-2.5-flash")
        >>> response = await provider.generate_json(prompt, schema)
    """

    name = "gemini"

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash",
                 timeout: int = REQUEST_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the Gemini provider.

        Args:
            api_key: Google AI API key
            model: Gemini model name (default: gemini-2.5-flash)
            timeout: Request timeout in seconds
            transport: Optional httpx transport override
        """
        super().__init__(model, timeout=timeout, transport=transport)
        self.api_key = api_key
        self.api_endpoint = f"{GEMINI_API_BASE}/{model}:generateContent"
        self._logger = get_logger("gemini")

    def build_payload(self, prompt: str, response_schema: dict) -> dict:
        """Build the generateContent request body."""
        return {
            "contents": [{
                "role": "user",
                "parts": [{
                    "text": prompt
                }]
            }],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
                "thinkingConfig": {"thinkingBudget": 0}
            }
        }

    async def generate_json(self, prompt: str, response_schema: dict) -> LLMResponse:
        """
        Generate structured JSON text using the Gemini API.

        Args:
            prompt: The full instruction including the source text
            response_schema: Gemini responseSchema for the output

        Returns:
            LLMResponse with the raw JSON text and token usage

        Raises:
            ProviderError: On HTTP errors, timeouts, transport failures
                or an empty candidate list
        """
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key
        }
        payload = self.build_payload(prompt, response_schema)

        self._logger.debug("Sending request to Gemini", LogType.LLM_REQUEST, {
            'model': self.model,
            'prompt': prompt
        })

        client = await self._get_client()
        try:
            response = await client.post(
                self.api_endpoint,
                headers=headers,
                json=payload,
                timeout=self.timeout
            )
            response.raise_for_status()
            response_json = response.json()
            if not isinstance(response_json, dict):
                raise ValueError(f"expected an object, got {type(response_json).__name__}")
        except httpx.TimeoutException as e:
            raise ProviderError(f"Gemini API timeout after {self.timeout}s: {e}") from e
        except httpx.HTTPStatusError as e:
            error_body = e.response.text[:500] if e.response is not None else ""
            raise ProviderError(
                f"Gemini API HTTP error {e.response.status_code}: {error_body}",
                status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Gemini API request failed: {e}") from e
        except ValueError as e:
            # Body was not a JSON object
            raise ProviderError(f"Gemini API returned an unexpected body: {e}") from e

        response_text = self.extract_text(response_json)
        if not response_text:
            finish_reason = ""
            candidate = self._first_candidate(response_json)
            if candidate:
                finish_reason = candidate.get("finishReason", "")
            raise ProviderError(
                f"Gemini API returned no text (finishReason={finish_reason or 'n/a'})"
            )

        usage_metadata = response_json.get("usageMetadata")
        if not isinstance(usage_metadata, dict):
            usage_metadata = {}
        return LLMResponse(
            content=response_text,
            prompt_tokens=usage_metadata.get("promptTokenCount", 0),
            completion_tokens=usage_metadata.get("candidatesTokenCount", 0)
        )

    @staticmethod
    def _first_candidate(response_json: dict) -> dict:
        candidates = response_json.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return {}
        candidate = candidates[0]
        return candidate if isinstance(candidate, dict) else {}

    @classmethod
    def extract_text(cls, response_json: dict) -> str:
        """Concatenate the text parts of the first candidate.

        Blocked candidates (e.g. finishReason SAFETY) come back with no
        content at all; those yield an empty string.
        """
        content = cls._first_candidate(response_json).get("content")
        if not isinstance(content, dict):
            return ""
        parts = content.get("parts")
        if not isinstance(parts, list):
            return ""
        return "".join(
            part["text"] for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
