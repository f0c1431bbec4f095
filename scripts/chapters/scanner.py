"""Discover the numbered chapter set in a source directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from scripts.chapters.config import ChapterConfig
from scripts.chapters.errors import EmptySequence, PositionTooHigh
from scripts.chapters.request import InsertionRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChapterFile:
    """One numbered chapter on disk."""

    position: int
    slug: str
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


@dataclass
class ChapterSet:
    """Numbered chapters of one directory, sorted by position then name."""

    src_dir: Path
    chapters: list[ChapterFile] = field(default_factory=list)

    @property
    def highest(self) -> int:
        return max((c.position for c in self.chapters), default=0)

    def __len__(self) -> int:
        return len(self.chapters)

    def __iter__(self):
        return iter(self.chapters)

    def at(self, position: int) -> list[ChapterFile]:
        """All files claiming a position (more than one means a duplicate)."""
        return [c for c in self.chapters if c.position == position]

    def gaps(self) -> list[int]:
        """Positions in 1..highest with no file."""
        present = {c.position for c in self.chapters}
        return [p for p in range(1, self.highest + 1) if p not in present]

    def duplicates(self) -> dict[int, list[str]]:
        """Positions claimed by more than one file."""
        by_position: dict[int, list[str]] = {}
        for c in self.chapters:
            by_position.setdefault(c.position, []).append(c.name)
        return {p: names for p, names in by_position.items() if len(names) > 1}

    def is_contiguous(self) -> bool:
        return not self.gaps() and not self.duplicates()


def scan_chapters(src_dir: Path, config: ChapterConfig) -> ChapterSet:
    """Read the chapter set fresh from disk.

    Entries are sorted explicitly; directory listing order is never
    relied on.
    """
    chapter_set = ChapterSet(src_dir=src_dir)
    if not src_dir.is_dir():
        return chapter_set

    pattern = config.filename_pattern()
    for path in sorted(src_dir.iterdir()):
        if not path.is_file():
            continue
        match = pattern.match(path.name)
        if not match:
            continue
        chapter_set.chapters.append(
            ChapterFile(position=int(match.group(1)), slug=match.group(2), path=path)
        )

    chapter_set.chapters.sort(key=lambda c: (c.position, c.name))
    return chapter_set


def find_highest(src_dir: Path, config: ChapterConfig) -> int:
    """Return the highest assigned chapter position.

    Raises:
        EmptySequence: If the directory holds no numbered chapters
    """
    highest = scan_chapters(src_dir, config).highest
    if highest == 0:
        raise EmptySequence(
            f"no chapter files found in {src_dir}",
            file=str(src_dir),
        )
    logger.info(f"Highest chapter in {src_dir}: {highest}")
    return highest


def check_position(request: InsertionRequest, highest: int) -> None:
    """Reject positions that would leave a gap after the last chapter.

    Raises:
        PositionTooHigh: If request.position > highest + 1
    """
    if request.position > highest + 1:
        raise PositionTooHigh(request.position, highest)
