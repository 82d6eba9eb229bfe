"""Unit tests for the Gemini provider (HTTP stubbed with httpx.MockTransport)."""

import json

import httpx
import pytest

from aligner.core.exceptions import ConfigurationError
from aligner.core.llm import create_llm_provider, GeminiProvider, ProviderError
from aligner.core.prompts import ALIGNMENT_RESPONSE_SCHEMA


def gemini_body(text, prompt_tokens=12, completion_tokens=34):
    return {
        "candidates": [{
            "content": {"role": "model", "parts": [{"text": text}]},
            "finishReason": "STOP"
        }],
        "usageMetadata": {
            "promptTokenCount": prompt_tokens,
            "candidatesTokenCount": completion_tokens
        }
    }


def make_provider(handler):
    return GeminiProvider(
        api_key="test-key",
        model="gemini-test",
        transport=httpx.MockTransport(handler)
    )


class TestGeminiProvider:

    @pytest.mark.asyncio
    async def test_request_shape(self):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["headers"] = request.headers
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=gemini_body("[]"))

        provider = make_provider(handler)
        await provider.generate_json("prompt text", ALIGNMENT_RESPONSE_SCHEMA)
        await provider.close()

        assert captured["url"].endswith("/models/gemini-test:generateContent")
        assert captured["headers"]["x-goog-api-key"] == "test-key"
        body = captured["body"]
        assert body["contents"][0]["parts"][0]["text"] == "prompt text"
        generation = body["generationConfig"]
        assert generation["responseMimeType"] == "application/json"
        assert generation["responseSchema"] == ALIGNMENT_RESPONSE_SCHEMA
        assert generation["thinkingConfig"] == {"thinkingBudget": 0}

    @pytest.mark.asyncio
    async def test_returns_text_and_usage(self):
        provider = make_provider(lambda request: httpx.Response(200, json=gemini_body('[{"a": 1}]')))
        response = await provider.generate_json("p", {})
        await provider.close()

        assert response.content == '[{"a": 1}]'
        assert response.prompt_tokens == 12
        assert response.completion_tokens == 34
        assert response.total_tokens == 46

    @pytest.mark.asyncio
    async def test_concatenates_text_parts(self):
        body = gemini_body("")
        body["candidates"][0]["content"]["parts"] = [{"text": "[{"}, {"text": "}]"}]
        provider = make_provider(lambda request: httpx.Response(200, json=body))
        response = await provider.generate_json("p", {})
        await provider.close()
        assert response.content == "[{}]"

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503, text="overloaded")

        provider = make_provider(handler)
        with pytest.raises(ProviderError) as exc_info:
            await provider.generate_json("p", {})
        await provider.close()

        assert exc_info.value.status_code == 503
        assert "overloaded" in str(exc_info.value)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_provider_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        provider = make_provider(handler)
        with pytest.raises(ProviderError, match="timeout"):
            await provider.generate_json("p", {})
        await provider.close()

    @pytest.mark.asyncio
    async def test_connection_error_raises_provider_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        provider = make_provider(handler)
        with pytest.raises(ProviderError, match="request failed"):
            await provider.generate_json("p", {})
        await provider.close()

    @pytest.mark.asyncio
    async def test_no_candidates_raises_provider_error(self):
        provider = make_provider(lambda request: httpx.Response(200, json={"candidates": []}))
        with pytest.raises(ProviderError, match="no text"):
            await provider.generate_json("p", {})
        await provider.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        [],
        "plain string",
        {"candidates": [{"content": None, "finishReason": "SAFETY"}]},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [None]},
        {"candidates": {"not": "a list"}},
        {"candidates": [{"content": {"parts": None}}]},
    ])
    async def test_unexpected_body_shape_raises_provider_error(self, body):
        provider = make_provider(lambda request: httpx.Response(200, json=body))
        with pytest.raises(ProviderError):
            await provider.generate_json("p", {})
        await provider.close()

    @pytest.mark.asyncio
    async def test_blocked_candidate_reports_finish_reason(self):
        body = {"candidates": [{"content": None, "finishReason": "SAFETY"}]}
        provider = make_provider(lambda request: httpx.Response(200, json=body))
        with pytest.raises(ProviderError, match="SAFETY"):
            await provider.generate_json("p", {})
        await provider.close()

    @pytest.mark.asyncio
    async def test_malformed_usage_metadata_is_ignored(self):
        body = gemini_body("[]")
        body["usageMetadata"] = None
        provider = make_provider(lambda request: httpx.Response(200, json=body))
        response = await provider.generate_json("p", {})
        await provider.close()
        assert response.total_tokens == 0

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        provider = make_provider(lambda request: httpx.Response(200, json=gemini_body("[]")))
        await provider.generate_json("p", {})
        await provider.close()
        await provider.close()
        assert provider._client is None


class TestProviderFactory:

    def test_creates_gemini_provider(self):
        provider = create_llm_provider("gemini", api_key="k", model="gemini-x")
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-x"

    def test_reads_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "env-key")
        provider = create_llm_provider("gemini")
        assert provider.api_key == "env-key"

    def test_missing_key_is_configuration_error(self, monkeypatch):
        monkeypatch.delenv("API_KEY", raising=False)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            create_llm_provider("gemini")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown provider type"):
            create_llm_provider("ollama", api_key="k")
