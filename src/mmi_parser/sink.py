"""JSON-lines output for parse results."""

from __future__ import annotations
import json
from dataclasses import asdict
from typing import Any, TextIO

from .errors import ParseError
from .normalize import Result
from .records import PrimaryRecord


def to_entry(result: Result) -> dict[str, Any]:
    """Convert a record or ParseError to a JSON-ready dict.

    The first key is always "variant": "MMI", "AA" or "Error".
    Enum fields are str subclasses, so json writes their values.
    """
    if isinstance(result, ParseError):
        return {
            "variant": "Error",
            "line_no": result.line_no,
            "line": result.line,
            "category": result.kind.value,
            "detail": result.detail,
        }
    entry: dict[str, Any] = {"variant": result.VARIANT}
    entry.update(asdict(result))
    if isinstance(result, PrimaryRecord):
        entry["negated"] = result.negated
    return entry


def dumps(result: Result) -> str:
    return json.dumps(to_entry(result), ensure_ascii=False)


class JsonLinesSink:
    """Writes one JSON object per result to a text stream."""

    def __init__(self, fh: TextIO):
        self.fh = fh

    def emit(self, result: Result) -> None:
        self.fh.write(dumps(result) + "\n")
