"""Rewrite textual references to shifted chapters.

Two reference forms are recognized:

- filename-prefix tokens such as ``ch07-`` (usually inside relative links),
  matched as a literal substring;
- prose phrases ``Chapter <n>`` with an unpadded number, matched on word
  boundaries.

Any other chapter-number-shaped text is left alone. Positions are processed
from highest to lowest so a freshly rewritten ``Chapter 6`` is never bumped
again while ``Chapter 5`` is being processed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from scripts.chapters.config import ChapterConfig

logger = logging.getLogger(__name__)


PREFIX_FORM = "prefix"
PROSE_FORM = "prose"


@dataclass(frozen=True)
class ReferenceOccurrence:
    """A place in a document where a chapter position is encoded."""

    document: Optional[Path]
    start: int
    end: int
    text: str
    position: int
    form: str  # "prefix" or "prose"
    line: int = 0


@dataclass
class DocumentRewrite:
    """Rewrite result for one document that needed changes."""

    path: Path
    occurrences: list[ReferenceOccurrence] = field(default_factory=list)
    replacements: int = 0


def _prose_pattern(position: int) -> re.Pattern[str]:
    return re.compile(rf"\bChapter(\s+){position}\b")


def line_of(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def find_references(
    text: str,
    positions: Iterable[int],
    config: ChapterConfig,
    document: Optional[Path] = None,
) -> list[ReferenceOccurrence]:
    """Locate every reference to the given positions in a text.

    Returns:
        Occurrences sorted by offset
    """
    found: list[ReferenceOccurrence] = []
    for position in positions:
        token = config.token(position)
        for match in re.finditer(re.escape(token), text):
            found.append(ReferenceOccurrence(
                document=document,
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                position=position,
                form=PREFIX_FORM,
                line=line_of(text, match.start()),
            ))
        for match in _prose_pattern(position).finditer(text):
            found.append(ReferenceOccurrence(
                document=document,
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                position=position,
                form=PROSE_FORM,
                line=line_of(text, match.start()),
            ))

    found.sort(key=lambda o: (o.start, o.form))
    return found


def shift_range(new_pos: int, highest: int) -> range:
    """Positions to shift, highest first. Empty for a pure append."""
    return range(highest, new_pos - 1, -1)


def rewrite_text(text: str, new_pos: int, highest: int, config: ChapterConfig) -> tuple[str, int]:
    """Increment references to positions new_pos..highest by one.

    Returns:
        (rewritten text, number of replacements)
    """
    count = 0
    for i in shift_range(new_pos, highest):
        old_token = config.token(i)
        new_token = config.token(i + 1)
        hits = text.count(old_token)
        if hits:
            text = text.replace(old_token, new_token)
            count += hits

        text, n = _prose_pattern(i).subn(rf"Chapter\g<1>{i + 1}", text)
        count += n

    return text, count


def iter_documents(src_dir: Path, config: ChapterConfig) -> list[Path]:
    """All documents under src_dir with the configured extension, sorted."""
    if not src_dir.is_dir():
        return []
    return sorted(p for p in src_dir.rglob(f"*{config.extension}") if p.is_file())


def read_document(path: Path) -> str:
    """Read verbatim. Bytes that are not UTF-8 survive a read/write cycle."""
    with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def write_document(path: Path, content: str) -> None:
    with open(path, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
        f.write(content)


def rewrite_references(
    src_dir: Path,
    new_pos: int,
    highest: int,
    config: ChapterConfig,
    dry_run: bool = False,
) -> list[DocumentRewrite]:
    """Rewrite references across every document in src_dir.

    Documents without a match are not written.

    Args:
        src_dir: Chapter source directory
        new_pos: Insertion position
        highest: Highest position before the shift
        config: Chapter configuration
        dry_run: Report changes without writing

    Returns:
        One entry per document that changed (or would change)
    """
    positions = list(shift_range(new_pos, highest))
    if not positions:
        return []

    results: list[DocumentRewrite] = []
    for path in iter_documents(src_dir, config):
        original = read_document(path)
        occurrences = find_references(original, positions, config, document=path)
        if not occurrences:
            continue

        updated, count = rewrite_text(original, new_pos, highest, config)
        if updated == original:
            continue

        if not dry_run:
            write_document(path, updated)
        logger.info(f"Updated {count} reference(s) in {path.name}")
        results.append(DocumentRewrite(path=path, occurrences=occurrences, replacements=count))

    return results
