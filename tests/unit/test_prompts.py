"""Unit tests for the alignment prompt and response schema."""

from aligner.core.prompts import ALIGNMENT_RESPONSE_SCHEMA, build_alignment_prompt


def test_prompt_embeds_source_text_between_fences():
    text = "العنوان\n\nالفقرة الأولى"
    prompt = build_alignment_prompt(text)
    assert f"---\n{text}\n---" in prompt


def test_prompt_states_segmentation_rules():
    prompt = build_alignment_prompt("نص")
    assert "separated by one or more empty lines" in prompt
    assert "first segment should represent the title" in prompt
    assert "newline character (\\n)" in prompt


def test_prompt_requires_unabbreviated_bible_books():
    prompt = build_alignment_prompt("نص")
    assert "New King James Version" in prompt
    assert "'1 Corinthians' instead of '1 Cor.'" in prompt


def test_prompt_survives_braces_in_source():
    # Source text is substituted once and never re-formatted
    assert "{x}" in build_alignment_prompt("{x}")


def test_schema_requires_both_fields():
    items = ALIGNMENT_RESPONSE_SCHEMA["items"]
    assert ALIGNMENT_RESPONSE_SCHEMA["type"] == "ARRAY"
    assert items["type"] == "OBJECT"
    assert set(items["required"]) == {"arabic", "english"}
    assert all(p["type"] == "STRING" for p in items["properties"].values())
