"""Splice a new chapter entry into the manifest (SUMMARY.md)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from scripts.chapters.config import ChapterConfig
from scripts.chapters.errors import AnchorNotFound
from scripts.chapters.request import InsertionRequest

logger = logging.getLogger(__name__)


LINK_TARGET_PATTERN = re.compile(r"\]\(([^)\s]+)\)")


@dataclass(frozen=True)
class Anchor:
    """Manifest line the new entry is placed next to."""

    index: int  # 0-based line index
    line: str
    pattern: str
    before: bool  # True when inserting ahead of the anchor (new chapter 1)

    @property
    def line_number(self) -> int:
        return self.index + 1


@dataclass(frozen=True)
class ManifestUpdate:
    """Result of inserting a manifest entry."""

    path: Path
    entry: str
    anchor: Anchor

    @property
    def inserted_at(self) -> int:
        """1-based line number of the new entry."""
        return self.anchor.line_number if self.anchor.before else self.anchor.line_number + 1


def format_entry(title: str, filename: str) -> str:
    return f"- [{title}](./{filename})"


def find_anchor(lines: list[str], new_pos: int, config: ChapterConfig) -> Optional[Anchor]:
    """Find the line to insert next to.

    For position p > 1 this is the first line mentioning chapter p - 1
    (insert after). For p == 1 it is the first line mentioning chapter 2,
    which is the old chapter 1 after the shift (insert before).
    """
    before = new_pos == 1
    pattern = config.token(2 if before else new_pos - 1)

    for index, line in enumerate(lines):
        if pattern in line:
            return Anchor(index=index, line=line, pattern=pattern, before=before)
    return None


def _line_ending(line: str) -> str:
    if line.endswith("\r\n"):
        return "\r\n"
    return "\n"


def _indentation(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def insert_entry(
    manifest_path: Path,
    request: InsertionRequest,
    filename: str,
    config: ChapterConfig,
    dry_run: bool = False,
    text: Optional[str] = None,
) -> ManifestUpdate:
    """Insert ``- [title](./filename)`` next to the neighbouring chapter.

    The entry copies the anchor's indentation and line ending. All other
    lines are left as they are.

    Args:
        manifest_path: Path to SUMMARY.md
        request: Validated insertion request
        filename: New chapter filename
        config: Chapter configuration
        dry_run: Compute the update without writing
        text: Manifest content to use instead of reading the file

    Raises:
        AnchorNotFound: If the manifest is missing or names no neighbour.
            The manifest is not modified in that case.
    """
    pattern = config.token(2 if request.is_first else request.position - 1)

    if text is None:
        if not manifest_path.is_file():
            raise AnchorNotFound(
                f"manifest {manifest_path} not found; add the entry for {filename} by hand",
                pattern=pattern,
                file=str(manifest_path),
                position=request.position,
            )
        with open(manifest_path, encoding="utf-8", errors="surrogateescape", newline="") as f:
            text = f.read()

    lines = text.splitlines(keepends=True)

    anchor = find_anchor(lines, request.position, config)
    if anchor is None:
        raise AnchorNotFound(
            f"could not find '{pattern}' in {manifest_path.name} to insert new entry",
            pattern=pattern,
            file=str(manifest_path),
            position=request.position,
        )

    ending = _line_ending(anchor.line)
    entry = _indentation(anchor.line) + format_entry(request.title, filename)

    if anchor.before:
        lines.insert(anchor.index, entry + ending)
    else:
        if not anchor.line.endswith("\n"):
            lines[anchor.index] = anchor.line + ending
        lines.insert(anchor.index + 1, entry + ending)

    update = ManifestUpdate(path=manifest_path, entry=entry, anchor=anchor)

    if not dry_run:
        with open(manifest_path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write("".join(lines))
        where = "before" if anchor.before else "after"
        logger.info(f"Inserted into {manifest_path.name} {where} line {anchor.line_number}")

    return update


def manifest_positions(manifest_path: Path, config: ChapterConfig) -> list[tuple[int, str]]:
    """Chapter positions linked from the manifest, in listing order.

    Returns:
        (position, filename) pairs; empty when the manifest is missing
    """
    if not manifest_path.is_file():
        return []

    pattern = config.filename_pattern()
    entries: list[tuple[int, str]] = []
    for line in manifest_path.read_text(encoding="utf-8", errors="surrogateescape").splitlines():
        for target in LINK_TARGET_PATTERN.findall(line):
            name = target.split("#", 1)[0].rsplit("/", 1)[-1]
            match = pattern.match(name)
            if match:
                entries.append((int(match.group(1)), name))
    return entries
