"""Positional-information decoding.

MMI records write positions in one of four layouts (9a-9d in the 2016
format document), see PositionCase. Abbreviation records use start:length.
"""

from __future__ import annotations

from .errors import ErrorKind, FieldError
from .records import PositionCase, PositionSpan


def _fail(detail: str) -> FieldError:
    return FieldError(ErrorKind.MALFORMED_POSITION_SPAN, detail)


def categorize_positions(text: str) -> PositionCase:
    """Decide which layout a positional field uses.

    Raises:
        FieldError: if brackets are unbalanced or nested.
    """
    has_brackets = False
    comma_inside = False
    comma_outside = False
    depth = 0
    for i, ch in enumerate(text):
        if ch == "[":
            if depth:
                raise _fail(f"nested bracket at offset {i}")
            has_brackets = True
            depth = 1
        elif ch == "]":
            if not depth:
                raise _fail(f"unmatched ']' at offset {i}")
            depth = 0
        elif ch == ",":
            if depth:
                comma_inside = True
            else:
                comma_outside = True
    if depth:
        raise _fail("unterminated '[' in positional information")

    if has_brackets:
        return PositionCase.D if comma_inside else PositionCase.C
    return PositionCase.B if comma_outside else PositionCase.A


def split_outside_brackets(text: str) -> list[str]:
    """Split on commas that are not inside [...] groups."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def _parse_int(text: str, what: str, pair: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise _fail(f"{what} must be a non-negative integer in {pair!r}")
    return int(text)


def parse_pair(pair: str, sep: str = "/", case: PositionCase | None = None) -> PositionSpan:
    """Parse a single start/length pair."""
    halves = pair.split(sep)
    if len(halves) != 2:
        raise _fail(f"expected <start>{sep}<length>, got {pair!r}")
    start = _parse_int(halves[0], "start", pair)
    length = _parse_int(halves[1], "length", pair)
    if length == 0:
        raise _fail(f"length must be positive in {pair!r}")
    return PositionSpan(start=start, length=length, case=case)


def parse_positions(field: str) -> tuple[PositionSpan, ...]:
    """Decode an MMI positional field into spans, in source order.

    Raises:
        FieldError: MalformedPositionSpan.
    """
    if not field:
        raise _fail("positional information is empty")
    case = categorize_positions(field)
    spans: list[PositionSpan] = []
    for segment in field.split(";"):
        for group in split_outside_brackets(segment):
            if group.startswith("[") and group.endswith("]"):
                group = group[1:-1]
            elif "[" in group or "]" in group:
                raise _fail(f"malformed bracketed group {group!r}")
            for pair in group.split(","):
                spans.append(parse_pair(pair, "/", case))
    return tuple(spans)


def parse_abbreviation_positions(field: str) -> tuple[PositionSpan, ...]:
    """Decode the start:length field of an AA/UA record."""
    if not field:
        raise _fail("positional information is empty")
    return tuple(parse_pair(pair, ":") for pair in field.split(","))
