"""Command-line interface for mmi_parser.

Reads every fielded MMI file in a folder and writes a *_parsed.jsonl file
next to each one, keeping a 1:1 mapping between input lines and output lines.

Exit codes:
- 0: done
- 1: --strict was given and at least one line failed to parse
- 2: the run itself failed (missing folder, unreadable file, bad JSON document)
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path

from .batch import INPUT_TYPES, BatchOptions, run_batch
from .errors import MmiError


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="mmi-parser", description="Parse fielded MMI output into JSON lines.")
    p.add_argument("folder", help="Folder to read files from")
    p.add_argument("-i", "--input-type", default="txt", choices=INPUT_TYPES,
                   help="File type to search for inside folder (default: txt)")
    p.add_argument("-w", "--workers", type=int, default=1, help="Parse lines on N threads")
    p.add_argument("--strict", action="store_true", help="Exit with status 1 if any line fails to parse")
    p.add_argument("--no-progress", action="store_true", help="Hide the progress bar")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level")
    return p


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    options = BatchOptions(
        folder=Path(args.folder),
        input_type=args.input_type,
        workers=max(1, args.workers),
        strict=args.strict,
        progress=not args.no_progress,
    )

    try:
        summary = run_batch(options)
    except (MmiError, OSError) as ex:
        sys.stderr.write(f"error: {ex}\n")
        return 2

    logging.getLogger(__name__).info(
        "Parsed %d line(s) from %d file(s), %d error(s)",
        summary.lines, len(summary.files), summary.errors,
    )
    if options.strict and summary.errors:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
