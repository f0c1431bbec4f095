"""Module entry point for running scripts.chapters as a package.

Allows: python -m scripts.chapters <command>
"""

from scripts.chapters.cli import main
import sys

if __name__ == '__main__':
    sys.exit(main())
