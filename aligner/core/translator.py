"""
Translator adapter: Arabic text → ordered Arabic/English segment pairs.

One call to ``translate_and_align`` makes exactly one request to the
language model. Any failure (service, transport, JSON, schema) surfaces as
a single ``TranslationFailedError``; partial results are never returned.
"""

import json
import time
from typing import List, Optional, Protocol

from aligner.core.exceptions import (
    InputError,
    TranslationFailedError,
    EMPTY_INPUT_MESSAGE,
)
from aligner.core.llm import LLMProvider, ProviderError
from aligner.core.models import SegmentPair, pairs_from_json
from aligner.core.prompts import ALIGNMENT_RESPONSE_SCHEMA, build_alignment_prompt
from aligner.utils.unified_logger import UnifiedLogger, LogType, get_logger


class Translator(Protocol):
    """Interface for anything that can produce aligned segment pairs."""

    async def translate_and_align(self, text: str) -> List[SegmentPair]:
        """Translate ``text`` and return pairs in source paragraph order.

        Raises:
            InputError: If ``text`` is empty or whitespace only
            TranslationFailedError: If the translation cannot be obtained
        """
        ...


class SegmentTranslator:
    """Translator backed by an LLM provider in structured-output mode."""

    def __init__(self, provider: LLMProvider, logger: Optional[UnifiedLogger] = None):
        self.provider = provider
        self.logger = logger or get_logger("translator")

    async def translate_and_align(self, text: str) -> List[SegmentPair]:
        if not text or not text.strip():
            raise InputError(EMPTY_INPUT_MESSAGE)

        prompt = build_alignment_prompt(text)
        self.logger.info("Translation started", LogType.TRANSLATION_START, {
            'source_lang': 'Arabic',
            'target_lang': 'English',
            'model': self.provider.model,
            'characters': len(text)
        })

        start = time.monotonic()
        try:
            response = await self.provider.generate_json(prompt, ALIGNMENT_RESPONSE_SCHEMA)
        except ProviderError as e:
            self._log_failure("Error calling the translation service", e)
            raise TranslationFailedError(context={'cause': str(e)}) from e

        self.logger.debug("Translation response received", LogType.LLM_RESPONSE, {
            'execution_time': time.monotonic() - start,
            'prompt_tokens': response.prompt_tokens,
            'completion_tokens': response.completion_tokens,
            'response': response.content
        })

        try:
            pairs = pairs_from_json(json.loads(response.content))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError subclass
            self._log_failure("Model returned an invalid response", e)
            raise TranslationFailedError(context={'cause': str(e)}) from e

        self.logger.info("Translation complete", LogType.TRANSLATION_END, {
            'segments': len(pairs)
        })
        return pairs

    def _log_failure(self, message: str, error: Exception):
        self.logger.error(message, LogType.ERROR_DETAIL, {
            'details': f"{type(error).__name__}: {error}"
        })
