"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pgnstudy.core.notation import (
    ParserOptions,
    parse_multiple,
    serialize_collection,
    study_title,
    validate_pgn,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgnstudy",
        description="Parse PGN studies and report their structure.",
    )
    parser.add_argument("pgn", type=Path, help="PGN file to read")
    parser.add_argument(
        "--validate",
        action="store_true",
        help="print the pre-flight validation report only",
    )
    parser.add_argument("--export", type=Path, help="write normalized PGN to this path")
    parser.add_argument(
        "--max-comment-length",
        type=int,
        default=ParserOptions().max_comment_length,
        help="truncate longer {...} comments (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    pgn_text = args.pgn.read_text(encoding="utf-8", errors="replace")
    options = ParserOptions(max_comment_length=args.max_comment_length)

    if args.validate:
        report = validate_pgn(pgn_text, options)
        print(f"valid: {'yes' if report.valid else 'no'}")
        print(f"studies: {report.study_count}")
        print(f"complexity: {report.complexity}")
        for error in report.errors:
            print(f"error: {error}")
        for warning in report.warnings:
            print(f"warning: {warning}")
        return 0 if report.valid else 1

    collection = parse_multiple(pgn_text, options)
    for index, study in enumerate(collection.studies):
        complexity = study.complexity.complexity if study.complexity else "-"
        marker = " [fallback]" if study.fallback else ""
        print(
            f"{study_title(study, index)}: {len(study.moves)} moves, "
            f"result {study.result}, complexity {complexity}{marker}"
        )
    for error in collection.errors:
        print(f"error: study {error.study_index + 1}: {error.message}")

    if args.export is not None:
        args.export.write_text(serialize_collection(collection), encoding="utf-8")

    return 1 if collection.errors else 0


if __name__ == "__main__":
    sys.exit(main())
