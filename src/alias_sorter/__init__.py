"""
Alias Sorter - A CLI tool for sorting loose files into alias-named folders.

This package provides functionality to:
- Derive aliases from the subfolder names of a target directory
- Scan source directories for loose files
- Match normalized file names against aliases on word boundaries
- Move matched files into their alias folder (or preview the moves)
- Handle naming collisions with " (N)" suffixes
- Generate CSV or XLSX reports of operations
"""

__version__ = "0.1.0"
__author__ = "Alias Sorter Team"
