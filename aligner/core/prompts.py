"""
Prompt and response schema for Arabic → English alignment.
"""

# Gemini responseSchema (OpenAPI subset, upper-case type names)
ALIGNMENT_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "arabic": {
                "type": "STRING",
                "description": "The original Arabic sentence or phrase.",
            },
            "english": {
                "type": "STRING",
                "description": "The corresponding English translation.",
            },
        },
        "required": ["arabic", "english"],
    },
}

ALIGNMENT_PROMPT_TEMPLATE = """
You are an expert translator specializing in Arabic to English.
Your task is to take the provided Arabic text, translate it accurately into English, and segment the output based on the paragraph structure of the original text.
Treat any block of text separated by one or more empty lines as a distinct paragraph or segment.
The first segment should represent the title or the very first line of the source text.
For each segment you identify, create a corresponding translation.

CRITICAL FORMATTING RULE: If a segment (a row) contains internal single line breaks that are NOT empty lines, you MUST preserve these line breaks by using the newline character (\\n) in your JSON string output for both 'arabic' and 'english' fields.

BIBLE REFERENCE RULE: If the text contains Bible references or is from the Bible, ensure the English translation aligns with a well-known version like the New King James Version (NKJV).
MANDATORY: You must use the full, unabbreviated name of every Bible book in every reference (e.g., '1 Corinthians' instead of '1 Cor.', 'Philippians' instead of 'Phil.', 'John' instead of 'Jn.', 'Psalms' instead of 'Ps.'). This is a strict requirement.

The final output must be a valid JSON array of objects.

Here is the Arabic text:
---
{text}
---
"""


def build_alignment_prompt(text: str) -> str:
    """Embed the full source text in the fixed alignment instruction."""
    return ALIGNMENT_PROMPT_TEMPLATE.format(text=text)
