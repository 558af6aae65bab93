"""Route a raw line to its record shape by looking at the kind tag only."""

from __future__ import annotations
from enum import Enum


DELIMITER = "|"


class RecordShape(Enum):
    PRIMARY = "MMI"
    ALTERNATE = "AA"
    UNRECOGNIZED = "?"


_SHAPE_BY_TAG = {
    "MMI": RecordShape.PRIMARY,
    "AA": RecordShape.ALTERNATE,
    "UA": RecordShape.ALTERNATE,
}

FIELD_COUNTS = {
    RecordShape.PRIMARY: 10,
    RecordShape.ALTERNATE: 9,
}


def kind_tag(line: str) -> str | None:
    """Return the second field of `line`, or None if there is no second field."""
    first = line.find(DELIMITER)
    if first < 0:
        return None
    end = line.find(DELIMITER, first + 1)
    return line[first + 1:] if end < 0 else line[first + 1:end]


def classify_line(line: str) -> RecordShape:
    """Classify one input line. Never raises."""
    tag = kind_tag(line)
    if tag is None:
        return RecordShape.UNRECOGNIZED
    return _SHAPE_BY_TAG.get(tag, RecordShape.UNRECOGNIZED)
