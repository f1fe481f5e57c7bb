"""Repository scanning and markdown parsing."""

from .scanner import IGNORED_DIRS, scan_repository

__all__ = ["IGNORED_DIRS", "scan_repository"]
