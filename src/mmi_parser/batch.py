"""Batch driver: convert every MMI file in a folder.

Each input file gets a sibling output file:
- notes.txt  -> notes_parsed.jsonl (one JSON line per input line)
- notes.json -> notes_parsed.json  (the same document with parsed entries added)
"""

from __future__ import annotations
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from itertools import islice
from pathlib import Path
from typing import Any, Optional

from tqdm import tqdm

from .errors import BatchError, ParseError
from .normalize import parse_lines
from .sink import JsonLinesSink, to_entry

logger = logging.getLogger(__name__)

INPUT_TYPES = ("txt", "json")
PARSED_SUFFIX = "_parsed"


@dataclass(frozen=True)
class BatchOptions:
    """Settings for one run, built from the command line."""
    folder: Path
    input_type: str = "txt"
    workers: int = 1
    strict: bool = False
    progress: bool = True
    chunk_size: int = 1000


@dataclass
class FileReport:
    path: Path
    output: Path
    lines: int = 0
    errors: int = 0
    error_kinds: Counter = field(default_factory=Counter)


@dataclass
class BatchSummary:
    files: list[FileReport] = field(default_factory=list)

    @property
    def lines(self) -> int:
        return sum(f.lines for f in self.files)

    @property
    def errors(self) -> int:
        return sum(f.errors for f in self.files)


def output_path_for(path: Path) -> Path:
    suffix = ".jsonl" if path.suffix.lower() == ".txt" else path.suffix
    return path.with_name(f"{path.stem}{PARSED_SUFFIX}{suffix}")


def discover_files(folder: Path, input_type: str) -> list[Path]:
    """List input files in `folder` ending in `.<input_type>`, skipping our outputs."""
    if input_type.lower() not in INPUT_TYPES:
        raise BatchError(f"unsupported input type: {input_type!r}")
    if not folder.is_dir():
        raise BatchError(f"not a directory: {folder}")
    ext = "." + input_type.lower()
    return sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() == ext and not p.stem.endswith(PARSED_SUFFIX)
    )


def _record_errors(report: FileReport, results) -> None:
    for r in results:
        report.lines += 1
        if isinstance(r, ParseError):
            report.errors += 1
            report.error_kinds[r.kind.value] += 1
            logger.debug("%s:%d: %s: %s", report.path.name, r.line_no, r.kind.value, r.detail)


def convert_text_file(path: Path, options: BatchOptions) -> FileReport:
    """Write one JSON line per input line of `path`.

    Undecodable bytes become U+FFFD so every line still gets an entry.
    """
    report = FileReport(path=path, output=output_path_for(path))
    with path.open("r", encoding="utf-8", errors="replace") as src, \
            report.output.open("w", encoding="utf-8", buffering=1) as dst:
        sink = JsonLinesSink(dst)
        while True:
            chunk = list(islice(src, options.chunk_size))
            if not chunk:
                break
            results = parse_lines(chunk, workers=options.workers, first_line_no=report.lines + 1)
            for r in results:
                sink.emit(r)
            _record_errors(report, results)
    return report


def _notes(document: Any) -> list[dict[str, Any]]:
    try:
        encounters = document["encounter"]
        return [note for enc in encounters.values() for note in enc["scm-notes"]]
    except (KeyError, TypeError, AttributeError) as ex:
        raise BatchError(f"unexpected document layout: missing or invalid {ex}") from ex


def convert_json_file(path: Path, options: BatchOptions) -> FileReport:
    """Add an "mmi_output" list next to each note's raw "metamap_output" lines."""
    report = FileReport(path=path, output=output_path_for(path))
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as ex:
        # JSONDecodeError and UnicodeDecodeError
        raise BatchError(f"{path}: invalid JSON document: {ex}") from ex

    for note in _notes(document):
        raw = note.get("metamap_output") if isinstance(note, dict) else None
        if not isinstance(raw, list) or not all(isinstance(x, str) for x in raw):
            raise BatchError(f"{path}: note without a list of metamap_output strings")
        results = parse_lines(raw, workers=options.workers)
        note["mmi_output"] = [to_entry(r) for r in results]
        _record_errors(report, results)

    report.output.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
    return report


_CONVERTERS = {
    "txt": convert_text_file,
    "json": convert_json_file,
}


def run_batch(options: BatchOptions, files: Optional[list[Path]] = None) -> BatchSummary:
    """Convert every input file of the configured type."""
    if files is None:
        files = discover_files(options.folder, options.input_type)
    convert = _CONVERTERS[options.input_type.lower()]
    logger.info("Reading %d %s file(s) from %s", len(files), options.input_type, options.folder)

    summary = BatchSummary()
    for path in tqdm(files, desc="Parsing", unit="file", disable=not options.progress):
        logger.info("Reading file: %s", path)
        report = convert(path, options)
        summary.files.append(report)
        if report.errors:
            logger.warning(
                "%s: %d of %d line(s) failed to parse (%s)",
                path.name, report.errors, report.lines,
                ", ".join(f"{k}={n}" for k, n in sorted(report.error_kinds.items())),
            )
        logger.info("Wrote %d entries to %s", report.lines, report.output)
    return summary
