"""
Segment pair data model.

A translation is an ordered list of ``SegmentPair``. Position 0 is the
title pair; the remaining positions are body rows in source paragraph order.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, List, Optional, Tuple

LINE_BREAK_PATTERN = re.compile(r'\r?\n')

LANGUAGE_FIELDS = ('arabic', 'english')


@dataclass(frozen=True)
class SegmentPair:
    """One Arabic source unit and its English counterpart.

    Attributes:
        arabic: Original Arabic segment (may contain embedded newlines)
        english: English translation (may contain embedded newlines)
    """
    arabic: str
    english: str

    @classmethod
    def from_dict(cls, data: Any) -> 'SegmentPair':
        """Build a pair from a decoded JSON object.

        Raises:
            ValueError: If ``data`` is not an object or a field is missing
                or not a string
        """
        if not isinstance(data, dict):
            raise ValueError(f"Segment must be an object, got {type(data).__name__}")
        for name in LANGUAGE_FIELDS:
            if name not in data:
                raise ValueError(f"Segment is missing required field '{name}'")
            if not isinstance(data[name], str):
                raise ValueError(
                    f"Segment field '{name}' must be a string, got {type(data[name]).__name__}"
                )
        return cls(arabic=data['arabic'], english=data['english'])

    def to_dict(self) -> dict:
        return asdict(self)

    def lines(self, language: str) -> List[str]:
        """Split one side of the pair on its embedded line breaks."""
        if language not in LANGUAGE_FIELDS:
            raise ValueError(f"Unknown language field: {language}")
        return LINE_BREAK_PATTERN.split(getattr(self, language))


def pairs_from_json(payload: Any) -> List[SegmentPair]:
    """Validate a decoded JSON array into an ordered list of pairs.

    Order is preserved exactly; no item is dropped or merged.

    Raises:
        ValueError: If the payload is not a list or any item is invalid
    """
    if not isinstance(payload, list):
        raise ValueError(f"Expected a JSON array, got {type(payload).__name__}")
    pairs = []
    for index, item in enumerate(payload):
        try:
            pairs.append(SegmentPair.from_dict(item))
        except ValueError as e:
            raise ValueError(f"Invalid segment at index {index}: {e}") from e
    return pairs


def split_title(pairs: List[SegmentPair]) -> Tuple[Optional[SegmentPair], List[SegmentPair]]:
    """Return ``(title_pair, body_pairs)``; the title is None for an empty list."""
    if not pairs:
        return None, []
    return pairs[0], list(pairs[1:])
