"""Typed records for fielded MMI output.

MetaMap writes one pipe-delimited line per detected concept. Two shapes exist:

    MMI:  <id>|MMI|<score>|<name>|<cui>|[<semtypes>]|[<triggers>]|<location>|<positions>|<tree codes>
    AA:   <id>|AA|<short form>|<long form>|<stc>|<scc>|<ltc>|<lcc>|<start>:<length>

UA lines (user-defined abbreviations) share the AA layout.

Example:
    24119710|MMI|637.30|Isopoda|C0598806|[euka]|["Isopoda"-ti-1-"Isopoda"-noun-0]|TI|228/6|B01.050

Reference: https://lhncbc.nlm.nih.gov/ii/tools/MetaMap/Docs/MMI_Output_2016.pdf
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class Location(str, Enum):
    """Where in the citation the concept was found."""
    TI = "TI"
    AB = "AB"
    TX = "TX"
    TIAB = "TI;AB"


class AbbreviationType(str, Enum):
    AA = "AA"  # MetaMap acronyms and abbreviations
    UA = "UA"  # user-defined acronyms and abbreviations


class PositionCase(str, Enum):
    """Layout of the positional field (cases 9a-9d of the 2016 format)."""
    A = "A"  # 228/6;136/7
    B = "B"  # 7059/5,7073/5
    C = "C"  # [1351/8],[1437/8]
    D = "D"  # [4061/10,4075/11],[4061/10,4075/11]


@dataclass(frozen=True)
class Candidate:
    """One trigger tuple from the bracketed candidate list."""
    text: str
    tag: str
    ordinal: int
    lexical_form: str
    part_of_speech: str
    negated: bool


@dataclass(frozen=True)
class PositionSpan:
    start: int
    length: int
    case: Optional[PositionCase] = None


@dataclass(frozen=True)
class PrimaryRecord:
    """A concept line (MMI)."""
    VARIANT: ClassVar[str] = "MMI"

    id: str
    kind: str
    score: float
    name: str
    cui: str
    semantic_types: tuple[str, ...]
    candidates: tuple[Candidate, ...]
    location: Location
    positions: tuple[PositionSpan, ...]
    tree_codes: Optional[tuple[str, ...]] = None

    @property
    def negated(self) -> bool:
        return any(c.negated for c in self.candidates)


@dataclass(frozen=True)
class AlternateRecord:
    """An acronym/abbreviation line (AA or UA)."""
    VARIANT: ClassVar[str] = "AA"

    id: str
    kind: AbbreviationType
    short_form: str
    long_form: str
    short_token_count: int
    short_character_count: int
    long_token_count: int
    long_character_count: int
    positions: tuple[PositionSpan, ...]


Record = Union[PrimaryRecord, AlternateRecord]


def _quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def render_candidate(c: Candidate) -> str:
    return "-".join([
        _quote(c.text),
        c.tag,
        str(c.ordinal),
        _quote(c.lexical_form),
        c.part_of_speech,
        "1" if c.negated else "0",
    ])


def render_positions(spans: tuple[PositionSpan, ...]) -> str:
    """Render spans back to the layout they were read from."""
    case = spans[0].case if spans else None
    if case is None:
        return ",".join(f"{s.start}:{s.length}" for s in spans)
    pairs = [f"{s.start}/{s.length}" for s in spans]
    if case is PositionCase.A:
        return ";".join(pairs)
    if case is PositionCase.B:
        return ",".join(pairs)
    if case is PositionCase.C:
        return ",".join(f"[{p}]" for p in pairs)
    # D: grouping is not kept on the spans, so emit a single bracket group
    return "[" + ",".join(pairs) + "]"


def render_record(r: Record) -> str:
    """Render a record back to its fielded line form."""
    if isinstance(r, PrimaryRecord):
        return "|".join([
            r.id,
            r.kind,
            f"{r.score:.2f}",
            r.name,
            r.cui,
            "[" + ",".join(r.semantic_types) + "]",
            "[" + ",".join(render_candidate(c) for c in r.candidates) + "]",
            r.location.value,
            render_positions(r.positions),
            ";".join(r.tree_codes) if r.tree_codes else "",
        ])
    return "|".join([
        r.id,
        r.kind.value,
        r.short_form,
        r.long_form,
        str(r.short_token_count),
        str(r.short_character_count),
        str(r.long_token_count),
        str(r.long_character_count),
        render_positions(r.positions),
    ])
