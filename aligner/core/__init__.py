"""
Core modules: segment model, translator adapter, Word exporter
"""
from .models import SegmentPair, pairs_from_json, split_title

__all__ = [
    'SegmentPair',
    'pairs_from_json',
    'split_title'
]
