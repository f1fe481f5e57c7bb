"""Repository scanning: locate files of interest and build a snapshot."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import frontmatter
import yaml

from ..config import DEFAULT_SETTINGS, Settings
from ..errors import PathNotFoundError
from ..models import FILES_OF_INTEREST, FileEntry, RepoSnapshot

logger = logging.getLogger(__name__)

# Directories never descended into
IGNORED_DIRS: frozenset[str] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        ".venv",
        "venv",
        "__pycache__",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
        ".ruff_cache",
        "dist",
        "build",
        ".idea",
        ".vscode",
    }
)


def _raise_walk_error(error: OSError) -> None:
    # os.walk swallows errors unless onerror re-raises them
    raise error


def _relative_or_absolute(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def _parse_metadata(text: str, relative_path: str) -> dict[str, Any]:
    """Parse YAML front matter; malformed front matter yields no metadata."""
    if not relative_path.endswith(".md"):
        return {}
    try:
        return dict(frontmatter.loads(text).metadata)
    except (yaml.YAMLError, ValueError) as e:
        logger.debug("Ignoring malformed front matter in %s: %s", relative_path, e)
        return {}


def load_entry(path: Path, root: Path) -> FileEntry:
    """Record one file of interest. `root` must already be resolved."""
    relative_path = path.relative_to(root).as_posix()
    is_symlink = path.is_symlink()

    symlink_target = None
    resolved_path = None
    if is_symlink:
        symlink_target = os.readlink(path)
        try:
            resolved_path = _relative_or_absolute(path.resolve(), root)
        except (OSError, RuntimeError) as e:
            # Symlink loops raise RuntimeError before Python 3.13, OSError after
            logger.debug("Cannot resolve %s: %s", relative_path, e)

    content = None
    metadata: dict[str, Any] = {}
    if path.is_file():
        content = path.read_text(encoding="utf-8", errors="replace")
        metadata = _parse_metadata(content, relative_path)
    elif is_symlink:
        logger.debug("%s -> %s does not point to a readable file", relative_path, symlink_target)

    return FileEntry(
        relative_path=relative_path,
        content=content,
        is_symlink=is_symlink,
        symlink_target=symlink_target,
        resolved_path=resolved_path,
        metadata=metadata,
    )


def scan_repository(root_path: Path, settings: Settings = DEFAULT_SETTINGS) -> RepoSnapshot:
    """Walk a repository and snapshot its files of interest.

    Args:
        root_path: Directory to scan
        settings: Run settings (extra ignored directories)

    Returns:
        RepoSnapshot with entries in deterministic (sorted, top-down) order

    Raises:
        PathNotFoundError: root_path is missing or not a directory
        PermissionError: root_path or a directory below it can't be read
    """
    if not root_path.exists():
        raise PathNotFoundError(str(root_path))
    if not root_path.is_dir():
        raise PathNotFoundError(str(root_path), "is not a directory")
    if not os.access(root_path, os.R_OK | os.X_OK):
        raise PermissionError(f"Permission denied: '{root_path}'")

    root = root_path.resolve()
    ignored = IGNORED_DIRS | set(settings.ignore_dirs)
    wanted = set(FILES_OF_INTEREST)
    logger.debug("Scanning %s", root)

    entries: list[FileEntry] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current = Path(dirpath)
        # os.walk lists symlinks to directories under dirnames
        linked_dirs = [d for d in dirnames if d in wanted and (current / d).is_symlink()]
        dirnames[:] = sorted(d for d in dirnames if d not in ignored)
        for filename in sorted(set(filenames).union(linked_dirs)):
            if filename not in wanted:
                continue
            entry = load_entry(current / filename, root)
            logger.debug("Found %s%s", entry.relative_path, " (symlink)" if entry.is_symlink else "")
            entries.append(entry)

    return RepoSnapshot(root_path=root, files=tuple(entries))
