"""Rename chapter files to open a slot at the insertion point."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from scripts.chapters.config import ChapterConfig
from scripts.chapters.errors import AlreadyExists, MissingExpectedFile
from scripts.chapters.scanner import scan_chapters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rename:
    """One planned file move from position to position + 1."""

    position: int
    source: Path
    target: Path


@dataclass
class ShiftPlan:
    """Renames in execution order (highest position first)."""

    new_pos: int
    highest: int
    renames: list[Rename] = field(default_factory=list)
    warnings: list[MissingExpectedFile] = field(default_factory=list)

    @property
    def is_append(self) -> bool:
        return self.new_pos > self.highest


def plan_shift(
    src_dir: Path,
    new_pos: int,
    highest: int,
    config: ChapterConfig,
) -> ShiftPlan:
    """Plan the renames for positions highest down to new_pos.

    Descending order keeps every destination vacant: position i + 1 has
    already moved out by the time position i moves into it. A leftover
    duplicate can still sit on a target; that raises AlreadyExists here,
    before anything on disk has moved.
    """
    plan = ShiftPlan(new_pos=new_pos, highest=highest)
    if plan.is_append:
        return plan

    chapter_set = scan_chapters(src_dir, config)

    for i in range(highest, new_pos - 1, -1):
        candidates = chapter_set.at(i)
        if not candidates:
            warning = MissingExpectedFile(
                f"no file found for {config.tag(i)}, skipping rename",
                file=str(src_dir / f"{config.token(i)}*{config.extension}"),
                position=i,
            )
            logger.warning(str(warning))
            plan.warnings.append(warning)
            continue

        if len(candidates) > 1:
            logger.warning(
                f"{len(candidates)} files share position {i}; "
                f"moving {candidates[0].name} only"
            )

        chapter = candidates[0]
        target = src_dir / config.filename(i + 1, chapter.slug)
        vacated = {r.source for r in plan.renames}
        if target.exists() and target not in vacated:
            raise AlreadyExists(
                f"cannot move {chapter.name}: {target.name} already exists",
                file=str(target),
                position=i + 1,
            )
        plan.renames.append(Rename(position=i, source=chapter.path, target=target))

    return plan


def apply_shift(plan: ShiftPlan) -> list[Rename]:
    """Execute planned renames in order.

    Returns:
        Renames that were performed
    """
    done: list[Rename] = []
    for rename in plan.renames:
        if rename.target.exists():
            raise AlreadyExists(
                f"cannot move {rename.source.name}: {rename.target.name} already exists",
                file=str(rename.target),
                position=rename.position + 1,
            )
        logger.info(f"rename: {rename.source.name} -> {rename.target.name}")
        rename.source.rename(rename.target)
        done.append(rename)
    return done


def shift_files(
    src_dir: Path,
    new_pos: int,
    highest: int,
    config: ChapterConfig,
) -> ShiftPlan:
    """Plan and apply the shift in one step."""
    plan = plan_shift(src_dir, new_pos, highest, config)
    apply_shift(plan)
    return plan
