"""Command-line interface for the chapter tool."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

from scripts.chapters.config import ChapterConfig, find_config
from scripts.chapters.errors import (
    ChapterError,
    ConfigError,
    EmptySequence,
    InvalidArgument,
    PositionTooHigh,
)
from scripts.chapters.inserter import InsertReport, insert_chapter
from scripts.chapters.manifest import manifest_positions
from scripts.chapters.request import parse_request
from scripts.chapters.scanner import scan_chapters


class ExitCode(IntEnum):
    """Process exit codes. Warnings never change the exit code."""

    SUCCESS = 0
    INVALID_ARGUMENT = 1
    SEQUENCE_ERROR = 2
    FILE_SYSTEM_ERROR = 3
    INCONSISTENT = 4


def _exit_code_for(error: ChapterError) -> ExitCode:
    if isinstance(error, (InvalidArgument, ConfigError)):
        return ExitCode.INVALID_ARGUMENT
    if isinstance(error, (EmptySequence, PositionTooHigh)):
        return ExitCode.SEQUENCE_ERROR
    return ExitCode.FILE_SYSTEM_ERROR


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(logging.INFO if verbose else logging.WARNING)


def _get_config(args: argparse.Namespace, root: Path) -> ChapterConfig:
    """Load config and apply command-line overrides."""
    config = find_config(root, args.config)
    if getattr(args, "src_dir", None):
        config.src_dir = args.src_dir
    return config


def _print_report(report: InsertReport, root: Path) -> None:
    request = report.request
    src_dir = report.path.parent if report.path else root
    prefix = "[dry run] " if report.dry_run else ""

    print(f"{prefix}Inserting new chapter: {report.path} (chapter {request.position})")
    if not report.is_append:
        print(
            f"Renumbering chapters {request.position}..{report.highest} -> "
            f"{request.position + 1}..{report.highest + 1}"
        )

    if report.renames:
        print()
        for rename in report.renames:
            print(f"  rename: {rename.source.name} -> {rename.target.name}")

    if report.rewrites:
        print()
        print("Updated cross-references:")
        for rewrite in report.rewrites:
            print(f"  {rewrite.path.name}: {rewrite.replacements} reference(s)")

    if report.manifest:
        update = report.manifest
        where = "before" if update.anchor.before else "after"
        print()
        print(f"Inserted into {update.path.name} {where} line {update.anchor.line_number}:")
        print(f"  {update.entry.strip()}")

    print()
    if report.dry_run:
        print("Dry run: no files were changed.")
        return

    print(f"Done! New chapter {request.position} created at {report.path}")
    if report.warnings:
        print(f"Completed with {len(report.warnings)} warning(s); see messages above.")
    print()
    print("Next steps:")
    print(f"  1. Edit {report.path} with your content")
    print("  2. Review the manifest to make sure the entry is in the right section")
    print(f"  3. Run 'chapters check' to verify numbering in {src_dir}")


def cmd_insert(args: argparse.Namespace) -> int:
    """Insert a chapter and renumber the ones after it."""
    root = Path.cwd()
    try:
        config = _get_config(args, root)
        request = parse_request(args.position, args.slug, args.title)
        report = insert_chapter(request, config, root, dry_run=args.dry_run)
    except ChapterError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return _exit_code_for(e)
    except OSError as e:
        print(json.dumps({"error": "file_system_error", "message": str(e)}), file=sys.stderr)
        return ExitCode.FILE_SYSTEM_ERROR

    _print_report(report, root)
    return ExitCode.SUCCESS


def cmd_list(args: argparse.Namespace) -> int:
    """Print the chapter set."""
    root = Path.cwd()
    try:
        config = _get_config(args, root)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.INVALID_ARGUMENT

    src_dir = config.source_path(root)
    chapter_set = scan_chapters(src_dir, config)
    if not len(chapter_set):
        print(f"No chapter files found in {src_dir}")
        return ExitCode.SUCCESS

    for chapter in chapter_set:
        print(f"{chapter.position:>3}  {chapter.name}")

    gaps = chapter_set.gaps()
    if gaps:
        print(f"\nGaps: {', '.join(str(p) for p in gaps)}")
    for position, names in chapter_set.duplicates().items():
        print(f"Duplicate position {position}: {', '.join(names)}")

    return ExitCode.SUCCESS


def cmd_check(args: argparse.Namespace) -> int:
    """Verify numbering and manifest order."""
    root = Path.cwd()
    try:
        config = _get_config(args, root)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.INVALID_ARGUMENT

    src_dir = config.source_path(root)
    chapter_set = scan_chapters(src_dir, config)
    problems: list[str] = []

    if not len(chapter_set):
        problems.append(f"no chapter files found in {src_dir}")

    for position in chapter_set.gaps():
        problems.append(f"missing chapter {config.tag(position)}")
    for position, names in chapter_set.duplicates().items():
        problems.append(f"position {position} used by {', '.join(names)}")

    manifest_path = config.manifest_path(root)
    if manifest_path.is_file():
        listed = manifest_positions(manifest_path, config)
        order = [position for position, _ in listed]
        if order != sorted(order):
            problems.append(f"{manifest_path.name} entries are not in chapter order")

        listed_names = {name for _, name in listed}
        for chapter in chapter_set:
            if chapter.name not in listed_names:
                problems.append(f"{chapter.name} is not listed in {manifest_path.name}")
    else:
        problems.append(f"manifest {manifest_path} not found")

    if problems:
        print(f"Found {len(problems)} problem(s):")
        for problem in problems:
            print(f"  - {problem}")
        return ExitCode.INCONSISTENT

    print(f"{len(chapter_set)} chapters, numbering and {manifest_path.name} are consistent.")
    return ExitCode.SUCCESS


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add --config and --src-dir to a parser."""
    parser.add_argument(
        "--config",
        "-c",
        help="Path to config file (default: book/chapters.yaml)",
    )
    parser.add_argument(
        "--src-dir",
        help="Chapter source directory (default: book/src)",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="chapters",
        description="Keep numbered book chapters, their cross-references and SUMMARY.md in sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  chapters insert 6 my-new-topic "My New Topic"
  chapters insert 1 preface --dry-run
  chapters list
  chapters check
        """,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every rename and rewrite",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    insert_parser = subparsers.add_parser(
        "insert",
        help="Insert a new chapter at a position and renumber the rest",
    )
    insert_parser.add_argument("position", help="Chapter number for the new chapter")
    insert_parser.add_argument("slug", help="Filename slug, e.g. my-new-topic")
    insert_parser.add_argument(
        "title",
        nargs="?",
        default="",
        help="Display title (default: derived from the slug)",
    )
    insert_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would change without touching any file",
    )
    _add_common_args(insert_parser)

    list_parser = subparsers.add_parser("list", help="List chapters in order")
    _add_common_args(list_parser)

    check_parser = subparsers.add_parser(
        "check",
        help="Verify contiguous numbering and manifest order",
    )
    _add_common_args(check_parser)

    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    commands = {
        "insert": cmd_insert,
        "list": cmd_list,
        "check": cmd_check,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
