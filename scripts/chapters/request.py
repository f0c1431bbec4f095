"""Validate and normalize a chapter insertion request."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from scripts.chapters.errors import InvalidArgument


SLUG_SEPARATORS = re.compile(r"[-_]+")
POSITION_PATTERN = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class InsertionRequest:
    """Where to insert a chapter and what to call it."""

    position: int
    slug: str
    title: str

    @property
    def is_first(self) -> bool:
        return self.position == 1


def derive_title(slug: str) -> str:
    """Build a display title from a slug.

    Separators become spaces and each word's first letter is upper-cased;
    the rest of each word is kept as written.

    >>> derive_title("my-new-topic")
    'My New Topic'
    """
    words = [w for w in SLUG_SEPARATORS.split(slug) if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def parse_position(value: Union[int, str]) -> int:
    """Parse a positive chapter position from an int or decimal string."""
    if isinstance(value, bool):
        raise InvalidArgument(f"chapter number must be a positive integer, got '{value}'")

    if isinstance(value, int):
        position = value
    elif isinstance(value, str) and POSITION_PATTERN.match(value.strip()):
        position = int(value.strip())
    else:
        raise InvalidArgument(f"chapter number must be a positive integer, got '{value}'")

    if position < 1:
        raise InvalidArgument(f"chapter number must be a positive integer, got '{value}'")
    return position


def validate_slug(slug: str) -> str:
    """Check that a slug can be embedded in a chapter filename."""
    if not slug or not slug.strip():
        raise InvalidArgument("slug must not be empty")
    if "/" in slug or "\\" in slug:
        raise InvalidArgument(f"slug must not contain path separators, got '{slug}'")
    if any(c.isspace() for c in slug):
        raise InvalidArgument(f"slug must not contain whitespace, got '{slug}'")
    return slug


def parse_request(
    position: Union[int, str],
    slug: str,
    title: Optional[str] = None,
) -> InsertionRequest:
    """Build a normalized InsertionRequest.

    Args:
        position: Target position, 1-based
        slug: Filename slug for the new chapter
        title: Display title; derived from the slug when empty

    Returns:
        The validated request

    Raises:
        InvalidArgument: If the position or slug is malformed
    """
    parsed = parse_position(position)
    slug = validate_slug(slug)

    if not title or not title.strip():
        title = derive_title(slug) or slug

    return InsertionRequest(position=parsed, slug=slug, title=title)
