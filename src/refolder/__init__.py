"""
Refolder - move files matching a glob into N evenly sized subfolders.

This package provides functionality to:
- Discover matching files under a directory, optionally recursively
- Collect files back out of output folders of a previous run (redo)
- Partition the files so folder sizes differ by at most one
- Name folders with numeric, alphabetic or no suffixes
- Move files with an overwrite guard and a verified copy fallback
- Preview every action with --dry-run
"""

__version__ = "0.1.0"
__author__ = "Refolder Team"
