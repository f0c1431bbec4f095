"""Chapters - keep a numbered book chapter set consistent.

This package provides tools for:
- Inserting a chapter at any position and shifting the ones after it
- Rewriting ``chNN-`` link prefixes and "Chapter N" phrases to match
- Adding the new chapter to SUMMARY.md next to its neighbour
- Checking that numbering and the manifest order agree

Usage:
    python -m scripts.chapters insert 6 my-new-topic "My New Topic"
    python -m scripts.chapters insert 1 preface --dry-run
    python -m scripts.chapters list
    python -m scripts.chapters check
"""

__version__ = "1.0.0"
