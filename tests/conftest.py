"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from doctrine_check.config import DEFAULT_SETTINGS
from doctrine_check.models import RepoSnapshot
from doctrine_check.repo.scanner import scan_repository
from doctrine_check.rules.catalog import RuleCatalog, build_catalog
from repo_builders import KEEP_A_CHANGELOG, STANDARDS_SECTION, agents_text, symlink, write


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    """An empty repository root."""
    root = tmp_path / "repo"
    root.mkdir()
    return root


@pytest.fixture
def conforming_repo(repo: Path) -> Path:
    """A repository that passes every rule."""
    write(repo / "AGENTS.md", agents_text(20, STANDARDS_SECTION))
    symlink(repo / "CLAUDE.md", "AGENTS.md")
    symlink(repo / "GEMINI.md", "AGENTS.md")
    write(repo / "CHANGELOG.md", KEEP_A_CHANGELOG)
    return repo


@pytest.fixture
def catalog() -> RuleCatalog:
    return build_catalog(DEFAULT_SETTINGS)


@pytest.fixture
def snapshot_of() -> Callable[[Path], RepoSnapshot]:
    """Scan a repository root with default settings."""
    return lambda root: scan_repository(root, DEFAULT_SETTINGS)
