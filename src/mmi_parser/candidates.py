"""Candidate-list ("trigger") sub-parser.

The field looks like:

    ["Drug, NOS"-tx-33-"medicine"-noun-0,"Drug - NOS"-tx-29-"medication"-noun-0]

Quoted parts may contain the tuple separator (",") and the part separator
("-"), so both splits go through the same small state machine, which only
splits while outside quotes. Inside quotes a backslash escapes only a double
quote or another backslash; any other backslash is kept as text.
"""

from __future__ import annotations
from enum import Enum

from .errors import ErrorKind, FieldError
from .records import Candidate


TUPLE_SEPARATOR = ","
PART_SEPARATOR = "-"
QUOTE = '"'
ESCAPE = "\\"
PARTS_PER_CANDIDATE = 6


class _State(Enum):
    OUTSIDE = 0
    QUOTED = 1
    ESCAPE = 2


def _fail(detail: str) -> FieldError:
    return FieldError(ErrorKind.MALFORMED_CANDIDATE_LIST, detail)


def split_outside_quotes(text: str, sep: str, offset: int = 0) -> list[tuple[str, int]]:
    """Split `text` on `sep` wherever it is not inside double quotes.

    Returns (piece, absolute offset) pairs; `offset` is the position of
    `text` inside the enclosing field and only affects error messages.

    Raises:
        FieldError: on an unterminated quote or a dangling escape.
    """
    parts: list[tuple[str, int]] = []
    state = _State.OUTSIDE
    start = 0
    quote_at = -1
    for i, ch in enumerate(text):
        if state is _State.OUTSIDE:
            if ch == QUOTE:
                state = _State.QUOTED
                quote_at = i
            elif ch == sep:
                parts.append((text[start:i], offset + start))
                start = i + 1
        elif state is _State.QUOTED:
            if ch == ESCAPE:
                state = _State.ESCAPE
            elif ch == QUOTE:
                state = _State.OUTSIDE
        else:
            state = _State.QUOTED

    if state is _State.ESCAPE:
        raise _fail(f"dangling escape at offset {offset + len(text) - 1}")
    if state is _State.QUOTED:
        raise _fail(f"unterminated quote opened at offset {offset + quote_at}")
    parts.append((text[start:], offset + start))
    return parts


def unquote(part: str, offset: int) -> str:
    """Strip the surrounding quotes and resolve escaped quotes and backslashes."""
    if len(part) < 2 or part[0] != QUOTE or part[-1] != QUOTE:
        raise _fail(f"expected a quoted string at offset {offset}, got {part!r}")
    out: list[str] = []
    escaped = False
    for i, ch in enumerate(part[1:-1], start=1):
        if escaped:
            if ch not in (QUOTE, ESCAPE):
                out.append(ESCAPE)
            out.append(ch)
            escaped = False
        elif ch == ESCAPE:
            escaped = True
        elif ch == QUOTE:
            raise _fail(f"unexpected quote inside quoted string at offset {offset + i}")
        else:
            out.append(ch)
    if escaped:
        out.append(ESCAPE)
    return "".join(out)


def _parse_ordinal(part: str, offset: int) -> int:
    if not part.isascii() or not part.isdigit():
        raise _fail(f"ordinal must be a non-negative integer at offset {offset}, got {part!r}")
    return int(part)


def _parse_negation(part: str, offset: int) -> bool:
    if part == "1":
        return True
    if part == "0":
        return False
    raise _fail(f"negation flag must be 0 or 1 at offset {offset}, got {part!r}")


def parse_candidate(text: str, offset: int = 0) -> Candidate:
    """Parse a single hyphen-delimited trigger tuple."""
    if not text:
        raise _fail(f"empty candidate at offset {offset}")
    parts = split_outside_quotes(text, PART_SEPARATOR, offset)
    if len(parts) != PARTS_PER_CANDIDATE:
        raise _fail(
            f"candidate at offset {offset} has {len(parts)} parts, "
            f"expected {PARTS_PER_CANDIDATE}: {text!r}"
        )
    (name, name_at), (tag, tag_at), (ordinal, ord_at), (form, form_at), (pos, _), (neg, neg_at) = parts
    if not tag:
        raise _fail(f"empty tag at offset {tag_at}")
    return Candidate(
        text=unquote(name, name_at),
        tag=tag,
        ordinal=_parse_ordinal(ordinal, ord_at),
        lexical_form=unquote(form, form_at),
        part_of_speech=pos,
        negated=_parse_negation(neg, neg_at),
    )


def parse_candidates(field: str) -> tuple[Candidate, ...]:
    """Decode the bracketed candidate-list field into Candidates, in order.

    Raises:
        FieldError: MalformedCandidateList on any structural problem.
    """
    if len(field) < 2 or not field.startswith("[") or not field.endswith("]"):
        raise _fail(f"candidate list must be enclosed in brackets: {field!r}")
    inner = field[1:-1]
    if not inner:
        raise _fail("candidate list is empty")
    return tuple(
        parse_candidate(piece, at)
        for piece, at in split_outside_quotes(inner, TUPLE_SEPARATOR, offset=1)
    )
