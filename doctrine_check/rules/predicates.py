"""Rule predicates.

Every predicate is a pure function of a RepoSnapshot (plus fixed
parameters bound when the catalog is built) and returns a Check.
"""

from __future__ import annotations

import re

from ..models import AGENT_FILES, Check, FileEntry, RepoSnapshot, split_lines
from ..repo.markdown import extract_section, extract_links, is_external_link
from .secrets import find_secrets

AGENTS_FILE = "AGENTS.md"
CHANGELOG_FILE = "CHANGELOG.md"

STANDARDS_HEADING = re.compile(r"\bstandards\b", re.IGNORECASE)
KEEP_A_CHANGELOG_MARKER = re.compile(r"keep\s+a\s+changelog|keepachangelog\.com", re.IGNORECASE)


def _root_agents(snapshot: RepoSnapshot) -> FileEntry | None:
    entry = snapshot.get(AGENTS_FILE)
    if entry is None or entry.content is None:
        return None
    return entry


def _more(count: int) -> str:
    return f" (+{count} more)" if count > 0 else ""


def _sibling(entry: FileEntry, name: str) -> str:
    return f"{entry.parent}/{name}" if entry.parent else name


def agents_file_exists(snapshot: RepoSnapshot) -> Check:
    entry = snapshot.get(AGENTS_FILE)
    if entry is None:
        return Check("fail", "AGENTS.md not found at repository root")
    if entry.content is None:
        return Check(
            "fail",
            f"AGENTS.md is a symlink to '{entry.symlink_target}', which is not a readable file",
            AGENTS_FILE,
        )
    return Check("pass", "AGENTS.md found at repository root", AGENTS_FILE)


def symlinked_to_agents(snapshot: RepoSnapshot, filename: str) -> Check:
    """Every `filename` in the tree must be a symlink to its sibling AGENTS.md."""
    entries = snapshot.named(filename)
    if not entries:
        return Check("skip", f"No {filename} present")

    problems: list[tuple[str, str]] = []
    for entry in entries:
        expected = _sibling(entry, AGENTS_FILE)
        agents = snapshot.get(expected)

        if not entry.is_symlink:
            problems.append((entry.relative_path, f"{entry.relative_path} is a regular file, not a symlink to {expected}"))
            continue

        accepted = {expected}
        if agents is not None and agents.resolved_path:
            accepted.add(agents.resolved_path)

        if entry.resolved_path not in accepted:
            problems.append(
                (
                    entry.relative_path,
                    f"{entry.relative_path} points to '{entry.symlink_target}', expected {expected}",
                )
            )
        elif agents is None or agents.content is None:
            problems.append((entry.relative_path, f"{entry.relative_path} points to {expected}, which does not exist"))

    if problems:
        file_ref, message = problems[0]
        return Check("fail", message + _more(len(problems) - 1), file_ref)

    linked = ", ".join(f"{e.relative_path} -> {e.symlink_target}" for e in entries)
    return Check("pass", linked, entries[0].relative_path)


def agents_line_count(snapshot: RepoSnapshot, warn_above: int, fail_above: int) -> Check:
    entry = _root_agents(snapshot)
    if entry is None:
        return Check("skip", "No readable AGENTS.md at repository root")

    lines = entry.line_count
    if lines > fail_above:
        return Check("fail", f"AGENTS.md has {lines} lines (maximum {fail_above})", AGENTS_FILE)
    if lines > warn_above:
        return Check("warn", f"AGENTS.md has {lines} lines (recommended at most {warn_above})", AGENTS_FILE)
    return Check("pass", f"AGENTS.md has {lines} lines", AGENTS_FILE)


def _secret_scan_targets(snapshot: RepoSnapshot) -> list[FileEntry]:
    targets = []
    for entry in snapshot.files:
        if entry.name not in AGENT_FILES or entry.content is None:
            continue
        # Symlinks are covered by scanning the file they point to
        if entry.is_symlink and entry.relative_path != AGENTS_FILE:
            continue
        targets.append(entry)
    return targets


def no_committed_secrets(snapshot: RepoSnapshot) -> Check:
    targets = _secret_scan_targets(snapshot)
    if not targets:
        return Check("skip", "No readable agent context files to scan")

    findings = []
    for entry in targets:
        for match in find_secrets(entry.content or ""):
            findings.append((entry, match))

    if findings:
        entry, match = findings[0]
        return Check(
            "fail",
            f"Possible secret ({match.kind}): {match.preview}" + _more(len(findings) - 1),
            f"{entry.relative_path}:{match.line}",
        )

    scanned = ", ".join(e.relative_path for e in targets)
    return Check("pass", f"No secret-like patterns in {scanned}")


def standards_section(snapshot: RepoSnapshot) -> Check:
    entry = _root_agents(snapshot)
    if entry is None:
        return Check("skip", "No readable AGENTS.md at repository root")

    found = extract_section(entry.content or "", STANDARDS_HEADING)
    if found is None:
        return Check("fail", "AGENTS.md has no Standards section", AGENTS_FILE)

    body, line = found
    external = [link for link in extract_links(body) if is_external_link(link)]
    # A front matter `doctrine: <url>` key also counts as the reference
    declared = entry.metadata.get("doctrine")
    if isinstance(declared, str) and is_external_link(declared.strip()):
        external.append(declared.strip())
    if not external:
        return Check(
            "fail",
            "Standards section does not link to an external doctrine source",
            f"{AGENTS_FILE}:{line}",
        )
    return Check("pass", f"Standards section references {external[0]}", f"{AGENTS_FILE}:{line}")


def changelog_preamble(snapshot: RepoSnapshot, scan_lines: int) -> Check:
    entry = snapshot.get(CHANGELOG_FILE)
    if entry is None:
        return Check("fail", "CHANGELOG.md not found at repository root")
    if entry.content is None:
        return Check("fail", "CHANGELOG.md is not a readable file", CHANGELOG_FILE)

    head = "\n".join(split_lines(entry.content)[:scan_lines])
    if not KEEP_A_CHANGELOG_MARKER.search(head):
        return Check(
            "fail",
            f"CHANGELOG.md does not reference Keep a Changelog in its first {scan_lines} lines",
            CHANGELOG_FILE,
        )
    return Check("pass", "CHANGELOG.md follows Keep a Changelog", CHANGELOG_FILE)
