"""Shared fixtures for chapter tool tests."""

import pytest

from scripts.chapters.config import ChapterConfig


SUMMARY = (
    "# Summary\n"
    "\n"
    "[Introduction](./introduction.md)\n"
    "\n"
    "# Guide\n"
    "\n"
    "- [Getting Started](./ch01-getting-started.md)\n"
    "- [Basics](./ch02-basics.md)\n"
    "- [Advanced](./ch03-advanced.md)\n"
)


@pytest.fixture
def config():
    """Default chapter configuration."""
    return ChapterConfig()


@pytest.fixture
def sample_book(tmp_path):
    """Create a book with three chapters, an introduction and SUMMARY.md."""
    src = tmp_path / "book" / "src"
    src.mkdir(parents=True)

    (src / "SUMMARY.md").write_text(SUMMARY)
    (src / "introduction.md").write_text(
        "# Introduction\n"
        "\n"
        "Start with Chapter 1.\n"
    )
    (src / "ch01-getting-started.md").write_text(
        "# Getting Started\n"
        "\n"
        "Read [Chapter 2](./ch02-basics.md) next, then Chapter 3.\n"
    )
    (src / "ch02-basics.md").write_text(
        "# Basics\n"
        "\n"
        "Builds on Chapter 1. See [advanced](./ch03-advanced.md).\n"
    )
    (src / "ch03-advanced.md").write_text(
        "# Advanced\n"
        "\n"
        "Recap of Chapter 2 and Chapter 1.\n"
        "\n"
        "```rust\n"
        "let chapter = 3;\n"
        "```\n"
    )

    return tmp_path


@pytest.fixture
def src_dir(sample_book):
    """Source directory of the sample book."""
    return sample_book / "book" / "src"
