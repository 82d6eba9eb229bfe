"""
Word (.docx) export of aligned segment pairs.
"""
from .exporter import (
    WordExporter,
    ExportedDocument,
    to_title_case,
    sanitize_filename,
    build_export_filename,
)

__all__ = [
    'WordExporter',
    'ExportedDocument',
    'to_title_case',
    'sanitize_filename',
    'build_export_filename',
]
