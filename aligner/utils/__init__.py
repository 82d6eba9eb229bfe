"""
Utility modules

Import helpers directly from their module:

    from aligner.utils.unified_logger import get_logger
"""

__all__ = []
