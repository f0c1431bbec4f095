"""Configuration loading and validation for the chapter tool."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.chapters.errors import ConfigError


# Default paths, relative to the book root
DEFAULT_CONFIG_PATH = "book/chapters.yaml"
LEGACY_CONFIG_PATH = "chapters.yaml"

DEFAULT_TEMPLATE = "# {title}\n\n<!-- TODO: Write chapter content -->\n"


@dataclass
class ChapterConfig:
    """Complete chapter tool configuration."""

    version: str = "1.0"
    src_dir: str = "book/src"
    manifest: str = "SUMMARY.md"  # relative to src_dir
    prefix: str = "ch"
    pad_width: int = 2
    extension: str = ".md"
    template: str = DEFAULT_TEMPLATE

    def tag(self, position: int) -> str:
        """Padded prefix for a position, e.g. ``ch06``."""
        return f"{self.prefix}{position:0{self.pad_width}d}"

    def token(self, position: int) -> str:
        """Filename-prefix token as it appears in links, e.g. ``ch06-``."""
        return f"{self.tag(position)}-"

    def filename(self, position: int, slug: str) -> str:
        """Full chapter filename, e.g. ``ch06-my-new-topic.md``."""
        return f"{self.token(position)}{slug}{self.extension}"

    def filename_pattern(self) -> re.Pattern[str]:
        """Regex that parses a chapter filename into (digits, slug)."""
        return re.compile(
            rf"^{re.escape(self.prefix)}([0-9]{{{self.pad_width},}})-(.+){re.escape(self.extension)}$"
        )

    def source_path(self, root: Path) -> Path:
        return root / self.src_dir

    def manifest_path(self, root: Path) -> Path:
        return root / self.src_dir / self.manifest


def get_default_config() -> ChapterConfig:
    """Return the default chapter configuration."""
    return ChapterConfig()


def validate_config(config: ChapterConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration is invalid.
    """
    if not isinstance(config.prefix, str) or not config.prefix:
        raise ConfigError("prefix must be a non-empty string", file=config_file)
    if any(c.isdigit() for c in config.prefix) or "/" in config.prefix or "\\" in config.prefix:
        raise ConfigError(
            f"prefix '{config.prefix}' must not contain digits or path separators",
            file=config_file,
        )

    if isinstance(config.pad_width, bool) or not isinstance(config.pad_width, int) or config.pad_width < 1:
        raise ConfigError(
            f"pad_width must be a positive integer, got {config.pad_width!r}",
            file=config_file,
        )

    if not isinstance(config.extension, str) or not config.extension.startswith(".") or len(config.extension) < 2:
        raise ConfigError(
            f"extension must start with '.', got {config.extension!r}",
            file=config_file,
        )

    if not isinstance(config.template, str) or "{title}" not in config.template:
        raise ConfigError("template must contain a '{title}' placeholder", file=config_file)
    try:
        config.template.format(title="")
    except (KeyError, IndexError, ValueError) as e:
        raise ConfigError(f"Invalid template: {e}", file=config_file)

    for name in ("src_dir", "manifest"):
        value = getattr(config, name)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{name} must be a non-empty string", file=config_file)


def load_config(config_path: Path | str) -> ChapterConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the chapters.yaml file.

    Returns:
        ChapterConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return defaults

        data: Any = yaml.safe_load(content)
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise ConfigError("Top-level chapters config must be a mapping", file=config_file)

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)

    config = ChapterConfig(
        version=str(data.get("version", defaults.version)),
        src_dir=data.get("src_dir", defaults.src_dir),
        manifest=data.get("manifest", defaults.manifest),
        prefix=data.get("prefix", defaults.prefix),
        pad_width=data.get("pad_width", defaults.pad_width),
        extension=data.get("extension", defaults.extension),
        template=data.get("template", defaults.template),
    )

    validate_config(config, config_file)

    return config


def find_config(root: Path, config_path: Optional[str] = None) -> ChapterConfig:
    """Load config from an explicit path or the first default location.

    Search order:
    1. Explicit --config path
    2. book/chapters.yaml
    3. chapters.yaml
    4. Built-in defaults
    """
    if config_path:
        return load_config(config_path)

    for candidate in (DEFAULT_CONFIG_PATH, LEGACY_CONFIG_PATH):
        path = root / candidate
        if path.exists():
            return load_config(path)

    return get_default_config()
