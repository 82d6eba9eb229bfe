"""
Arabic Text Aligner & Translator

Translate Arabic text into aligned Arabic/English segments with Gemini and
export them as a two-column Word document.
"""

__version__ = "1.0.0"
