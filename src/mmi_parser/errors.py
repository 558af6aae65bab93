"""Errors used by the MMI parsing pipeline."""

from __future__ import annotations
from enum import Enum


class ErrorKind(str, Enum):
    """Category written to output for a line that failed to parse."""
    UNRECOGNIZED_SHAPE = "UnrecognizedShape"
    FIELD_COUNT_MISMATCH = "FieldCountMismatch"
    INVALID_CUI = "InvalidCui"
    EMPTY_SEMANTIC_TYPE_SET = "EmptySemanticTypeSet"
    MALFORMED_CANDIDATE_LIST = "MalformedCandidateList"
    MALFORMED_POSITION_SPAN = "MalformedPositionSpan"
    INVALID_FIELD = "InvalidField"


class MmiError(Exception):
    """Base error for this package."""


class FieldError(MmiError):
    """Raised by the field decoders when one field cannot be decoded."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


class ParseError(MmiError):
    """An input line that could not be parsed into a record.

    The pipeline returns these as values so a bad line never stops a file.
    """

    def __init__(self, kind: ErrorKind, detail: str, line: str, line_no: int):
        super().__init__(f"line {line_no}: {kind.value}: {detail}")
        self.kind = kind
        self.detail = detail
        self.line = line
        self.line_no = line_no

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.kind, self.detail, self.line, self.line_no) == (
            other.kind, other.detail, other.line, other.line_no
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.detail, self.line, self.line_no))


class BatchError(MmiError):
    """Raised when a whole file or run cannot be processed."""
