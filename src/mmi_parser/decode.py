"""Field decoder: turn a classified line into a typed record."""

from __future__ import annotations
import re
from typing import Optional

from .candidates import parse_candidates
from .classify import DELIMITER, FIELD_COUNTS, RecordShape
from .errors import ErrorKind, FieldError
from .positions import parse_abbreviation_positions, parse_positions
from .records import AbbreviationType, AlternateRecord, Location, PrimaryRecord, Record


CUI_RE = re.compile(r"[A-Za-z][0-9]{7}")


def split_fields(line: str, shape: RecordShape) -> list[str]:
    """Split on '|' and check the field count for `shape`."""
    expected = FIELD_COUNTS[shape]
    parts = line.split(DELIMITER)
    if len(parts) != expected:
        raise FieldError(
            ErrorKind.FIELD_COUNT_MISMATCH,
            f"expected {expected} fields separated by '|' for {shape.value}, got {len(parts)}",
        )
    return parts


def decode_cui(text: str) -> str:
    if not CUI_RE.fullmatch(text):
        raise FieldError(
            ErrorKind.INVALID_CUI,
            f"CUI must be one letter followed by seven digits, got {text!r}",
        )
    return text


def decode_semantic_types(text: str) -> tuple[str, ...]:
    """Parse "[neop,dsyn]" into ("neop", "dsyn")."""
    if len(text) < 2 or not text.startswith("[") or not text.endswith("]"):
        raise FieldError(ErrorKind.INVALID_FIELD, f"semantic types must be bracketed, got {text!r}")
    cleaned = text[1:-1]
    if not cleaned:
        raise FieldError(ErrorKind.EMPTY_SEMANTIC_TYPE_SET, "no semantic types inside brackets")
    types = cleaned.split(",")
    if not all(types):
        raise FieldError(ErrorKind.INVALID_FIELD, f"blank semantic type in {text!r}")
    return tuple(types)


def decode_score(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise FieldError(ErrorKind.INVALID_FIELD, f"score is not a number: {text!r}") from None


def decode_location(text: str) -> Location:
    try:
        return Location(text.upper())
    except ValueError:
        raise FieldError(ErrorKind.INVALID_FIELD, f"unknown location: {text!r}") from None


def decode_tree_codes(text: str) -> Optional[tuple[str, ...]]:
    """Tree codes are optional; an empty field means "not present"."""
    if not text:
        return None
    return tuple(text.split(";"))


def decode_count(text: str, name: str) -> int:
    if not text.isascii() or not text.isdigit():
        raise FieldError(ErrorKind.INVALID_FIELD, f"{name} must be a non-negative integer, got {text!r}")
    return int(text)


def decode_abbreviation_type(text: str) -> AbbreviationType:
    try:
        return AbbreviationType(text.upper())
    except ValueError:
        raise FieldError(ErrorKind.INVALID_FIELD, f"unknown abbreviation type: {text!r}") from None


def decode_primary(line: str) -> PrimaryRecord:
    (rec_id, kind, score, name, cui, semtypes,
     triggers, location, positions, tree_codes) = split_fields(line, RecordShape.PRIMARY)
    return PrimaryRecord(
        id=rec_id,
        kind=kind,
        score=decode_score(score),
        name=name,
        cui=decode_cui(cui),
        semantic_types=decode_semantic_types(semtypes),
        candidates=parse_candidates(triggers),
        location=decode_location(location),
        positions=parse_positions(positions),
        tree_codes=decode_tree_codes(tree_codes),
    )


def decode_alternate(line: str) -> AlternateRecord:
    (rec_id, kind, short_form, long_form, stc, scc,
     ltc, lcc, positions) = split_fields(line, RecordShape.ALTERNATE)
    return AlternateRecord(
        id=rec_id,
        kind=decode_abbreviation_type(kind),
        short_form=short_form,
        long_form=long_form,
        short_token_count=decode_count(stc, "short token count"),
        short_character_count=decode_count(scc, "short character count"),
        long_token_count=decode_count(ltc, "long token count"),
        long_character_count=decode_count(lcc, "long character count"),
        positions=parse_abbreviation_positions(positions),
    )


def decode_line(line: str, shape: RecordShape) -> Record:
    """Decode `line` as `shape`.

    Raises:
        FieldError: naming the field that failed and why.
    """
    if shape is RecordShape.PRIMARY:
        return decode_primary(line)
    if shape is RecordShape.ALTERNATE:
        return decode_alternate(line)
    raise FieldError(ErrorKind.UNRECOGNIZED_SHAPE, "line is not an MMI, AA or UA record")
