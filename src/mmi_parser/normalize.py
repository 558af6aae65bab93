"""Parsing pipeline.

Pipeline shape:
- classify the line -> record shape
- decode the fields for that shape -> record
- any failure -> ParseError value carrying the line and its number

Every input line yields exactly one result, so output entry N always matches
input line N.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional, Union

from .classify import RecordShape, classify_line
from .decode import decode_line
from .errors import ErrorKind, FieldError, ParseError
from .records import Record


Result = Union[Record, ParseError]


def parse_line(line: str, line_no: int = 1) -> Result:
    """Parse one input line into a record, or a ParseError describing why not.

    Never raises for bad input.
    """
    raw = line.rstrip("\r\n")
    shape = classify_line(raw)
    if shape is RecordShape.UNRECOGNIZED:
        return ParseError(
            ErrorKind.UNRECOGNIZED_SHAPE,
            "line is not an MMI, AA or UA record",
            line=raw,
            line_no=line_no,
        )
    try:
        return decode_line(raw, shape)
    except FieldError as ex:
        return ParseError(ex.kind, ex.detail, line=raw, line_no=line_no)


def _parse_numbered(item: tuple[int, str]) -> Result:
    line_no, line = item
    return parse_line(line, line_no)


def parse_lines(
    lines: Iterable[str],
    workers: Optional[int] = None,
    first_line_no: int = 1,
) -> list[Result]:
    """Parse many lines, returning results in source order.

    With `workers` > 1 the lines are parsed on a thread pool; results are
    still returned in input order.
    """
    numbered = list(enumerate(lines, start=first_line_no))
    if not workers or workers <= 1 or len(numbered) < 2:
        return [_parse_numbered(item) for item in numbered]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_parse_numbered, numbered))
