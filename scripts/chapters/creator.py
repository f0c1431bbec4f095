"""Create the new chapter file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Collection

from scripts.chapters.config import ChapterConfig
from scripts.chapters.errors import AlreadyExists
from scripts.chapters.request import InsertionRequest

logger = logging.getLogger(__name__)


def render_chapter(title: str, config: ChapterConfig) -> str:
    """Render the starter body for a chapter."""
    return config.template.format(title=title)


def create_chapter(
    src_dir: Path,
    request: InsertionRequest,
    config: ChapterConfig,
    dry_run: bool = False,
    vacated: Collection[Path] = (),
) -> Path:
    """Write the new chapter at the (now vacant) requested position.

    Args:
        src_dir: Chapter source directory
        request: Validated insertion request
        config: Chapter configuration
        dry_run: Only compute the path
        vacated: Paths a pending shift will move away (dry runs only)

    Raises:
        AlreadyExists: If the target filename is already taken
    """
    path = src_dir / config.filename(request.position, request.slug)
    if path.exists() and path not in vacated:
        raise AlreadyExists(
            f"{path.name} already exists; the sequence needs manual inspection",
            file=str(path),
            position=request.position,
        )

    if dry_run:
        return path

    try:
        with open(path, "x", encoding="utf-8") as f:
            f.write(render_chapter(request.title, config))
    except FileExistsError:
        raise AlreadyExists(
            f"{path.name} already exists; the sequence needs manual inspection",
            file=str(path),
            position=request.position,
        )
    logger.info(f"Created {path}")
    return path
