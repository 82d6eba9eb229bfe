"""
Exception hierarchy for the aligner.

Every error that reaches the user carries a short, human-readable message.
The underlying cause (when there is one) travels in ``context`` and in the
exception chain so it can be logged for diagnostics.
"""

from typing import Optional, Dict, Any


TRANSLATION_FAILED_MESSAGE = (
    "Failed to translate and align text. "
    "The model may have returned an invalid response."
)
EXPORT_FAILED_MESSAGE = "Failed to generate the Word document."
EMPTY_INPUT_MESSAGE = "Please enter some Arabic text to translate."
NOTHING_TO_EXPORT_MESSAGE = "There is nothing to export."


class AlignerError(Exception):
    """Base exception for all aligner errors.

    Attributes:
        message: Human-readable error message (safe to show in the UI)
        context: Additional diagnostic context
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        base = f"{self.__class__.__name__}: {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base += f" (context: {context_str})"
        return base


class InputError(AlignerError):
    """Raised for requests rejected before any external call.

    Covers whitespace-only source text on translate and an empty result
    set on export.
    """
    pass


class TranslationFailedError(AlignerError):
    """Raised when the translation service fails or returns unusable data."""

    def __init__(self, message: str = TRANSLATION_FAILED_MESSAGE,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class ExportFailedError(AlignerError):
    """Raised when the Word document cannot be assembled or packed."""

    def __init__(self, message: str = EXPORT_FAILED_MESSAGE,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)


class ConfigurationError(AlignerError):
    """Raised at startup when required configuration is missing. Fatal."""
    pass
