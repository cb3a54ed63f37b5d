"""
Entry point for running the package as a module.

Usage: python -m alias_sorter [arguments]
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
