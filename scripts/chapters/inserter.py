"""Insert a chapter and renumber everything after it.

Stages run strictly in order: scan, shift files, rewrite references,
create the chapter, update the manifest. Each stage re-reads what it needs
from disk, so a run that failed halfway can simply be repeated.

Nothing is rolled back. Failures before the shift leave the tree untouched;
later failures leave it as far as the run got.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from scripts.chapters.config import ChapterConfig
from scripts.chapters.creator import create_chapter
from scripts.chapters.errors import AnchorNotFound, ChapterError
from scripts.chapters.manifest import ManifestUpdate, insert_entry
from scripts.chapters.request import InsertionRequest
from scripts.chapters.rewriter import (
    DocumentRewrite,
    iter_documents,
    read_document,
    rewrite_references,
    rewrite_text,
)
from scripts.chapters.scanner import check_position, find_highest
from scripts.chapters.shifter import Rename, apply_shift, plan_shift

logger = logging.getLogger(__name__)


@dataclass
class InsertReport:
    """Everything an insertion did (or would do, for a dry run)."""

    request: InsertionRequest
    highest: int
    path: Optional[Path] = None
    renames: list[Rename] = field(default_factory=list)
    rewrites: list[DocumentRewrite] = field(default_factory=list)
    manifest: Optional[ManifestUpdate] = None
    warnings: list[ChapterError] = field(default_factory=list)
    dry_run: bool = False

    @property
    def is_append(self) -> bool:
        return self.request.position > self.highest


def insert_chapter(
    request: InsertionRequest,
    config: ChapterConfig,
    root: Optional[Path] = None,
    dry_run: bool = False,
) -> InsertReport:
    """Insert a new chapter at request.position.

    Args:
        request: Validated insertion request
        config: Chapter configuration
        root: Book root containing config.src_dir (defaults to cwd)
        dry_run: Plan every stage without touching disk

    Returns:
        Report of renames, rewrites, the new file and the manifest entry

    Raises:
        EmptySequence: If there are no chapters yet
        PositionTooHigh: If the insertion would leave a gap
        AlreadyExists: If the new chapter's filename is taken after shifting
    """
    if root is None:
        root = Path.cwd()
    src_dir = config.source_path(root)

    highest = find_highest(src_dir, config)
    check_position(request, highest)

    report = InsertReport(request=request, highest=highest, dry_run=dry_run)

    # Stage 1: rename files, highest first
    plan = plan_shift(src_dir, request.position, highest, config)
    report.warnings.extend(plan.warnings)
    report.renames = list(plan.renames) if dry_run else apply_shift(plan)

    # Stage 2: rewrite references, same descending order
    report.rewrites = rewrite_references(
        src_dir, request.position, highest, config, dry_run=dry_run
    )

    # Stage 3: create the chapter
    report.path = create_chapter(
        src_dir,
        request,
        config,
        dry_run=dry_run,
        vacated={r.source for r in plan.renames},
    )

    # Stage 4: manifest entry (advisory; never rolls back stages 1-3)
    manifest_path = config.manifest_path(root)
    text = None
    if dry_run and manifest_path.is_file():
        text = read_document(manifest_path)
        # The rewriter only reaches the manifest when it lives in src_dir
        if manifest_path in iter_documents(src_dir, config):
            text, _ = rewrite_text(text, request.position, highest, config)
    try:
        report.manifest = insert_entry(
            manifest_path, request, report.path.name, config, dry_run=dry_run, text=text
        )
    except AnchorNotFound as e:
        logger.warning(str(e))
        report.warnings.append(e)

    return report
