"""
LLM-specific exceptions.

This module defines the exceptions raised by the LLM provider layer.
"""

from typing import Optional


class ProviderError(Exception):
    """
    Raised when a provider request fails.

    Covers HTTP status errors, timeouts, transport failures and responses
    that carry no generated text.

    Attributes:
        status_code: HTTP status code when the service answered, else None
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
