"""Main entry point for the Apocaliptyx scenario duplicate detector.

Equivalent to the ``apocaliptyx-dedup`` console script.
"""
import sys

from apocaliptyx.cli import main

if __name__ == "__main__":
    sys.exit(main())
