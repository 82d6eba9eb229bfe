"""
Pytest configuration and fixtures for all tests.

This file is automatically loaded by pytest and provides common fixtures
and configuration for all test modules.
"""

import json
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from aligner.core.llm.base import LLMProvider, LLMResponse
from aligner.core.models import SegmentPair
from aligner.utils.unified_logger import UnifiedLogger


class FakeProvider(LLMProvider):
    """Provider returning canned content and recording prompts."""

    name = "fake"

    def __init__(self, content="", error=None):
        super().__init__(model="fake-model")
        self.content = content
        self.error = error
        self.prompts = []
        self.schemas = []
        self.closed = False

    async def generate_json(self, prompt, response_schema):
        self.prompts.append(prompt)
        self.schemas.append(response_schema)
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, prompt_tokens=10, completion_tokens=5)

    async def close(self):
        self.closed = True


@pytest.fixture
def quiet_logger():
    """Logger that records entries instead of printing."""
    entries = []
    logger = UnifiedLogger("test", console_output=False, web_callback=entries.append)
    logger.entries = entries
    return logger


@pytest.fixture
def sample_pairs():
    """Title pair plus one body row."""
    return [
        SegmentPair(arabic="أ", english="a title"),
        SegmentPair(arabic="ب", english="row one"),
    ]


@pytest.fixture
def sample_response_json():
    """Schema-conforming model output with a multi-line segment."""
    return json.dumps([
        {"arabic": "العنوان", "english": "The Title"},
        {"arabic": "الفقرة الأولى", "english": "The first paragraph"},
        {"arabic": "سطر أول\nسطر ثان", "english": "First line\nSecond line"},
    ], ensure_ascii=False)


@pytest.fixture
def fake_provider_factory():
    return FakeProvider
