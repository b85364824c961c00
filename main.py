"""Main entry point for loadcompare."""

import sys

from src.loadcompare.cli import main


if __name__ == "__main__":
    sys.exit(main())
