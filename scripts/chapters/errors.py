"""Error types for the chapter maintenance tool.

Fatal errors are raised and abort the run. Non-fatal conditions
(``MissingExpectedFile``, ``AnchorNotFound``) are collected by the
inserter and reported as warnings.
"""

from __future__ import annotations

from typing import Any, Optional


class ChapterError(Exception):
    """Base error for chapter operations."""

    error_type = "chapter_error"

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        position: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        self.position = position

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        if self.position is not None:
            result["position"] = self.position
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.file:
            parts.append(f"file: {self.file}")
        if self.position is not None:
            parts.append(f"position: {self.position}")
        return " | ".join(parts)


class ConfigError(ChapterError):
    """Invalid configuration file or value."""

    error_type = "config_invalid"


class InvalidArgument(ChapterError):
    """Malformed insertion request (position or slug)."""

    error_type = "invalid_argument"


class EmptySequence(ChapterError):
    """No numbered chapters exist to anchor against."""

    error_type = "empty_sequence"


class PositionTooHigh(ChapterError):
    """Requested position would leave a gap in the numbering."""

    error_type = "position_too_high"

    def __init__(self, position: int, highest: int, file: Optional[str] = None):
        self.highest = highest
        self.next_position = highest + 1
        super().__init__(
            f"chapter {position} is too high; highest existing chapter is {highest}. "
            f"Use {self.next_position} to append at the end.",
            file=file,
            position=position,
        )

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["next_position"] = self.next_position
        return result


class AlreadyExists(ChapterError):
    """Target chapter file is occupied after shifting."""

    error_type = "already_exists"


class MissingExpectedFile(ChapterError):
    """A position inside the shift range has no file (non-fatal)."""

    error_type = "missing_expected_file"


class AnchorNotFound(ChapterError):
    """No manifest line to insert the new entry next to (non-fatal)."""

    error_type = "anchor_not_found"

    def __init__(
        self,
        message: str,
        pattern: str,
        file: Optional[str] = None,
        position: Optional[int] = None,
    ):
        super().__init__(message, file=file, position=position)
        self.pattern = pattern

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["pattern"] = self.pattern
        return result
