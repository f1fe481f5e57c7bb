"""
Rule catalog: the checkable MUST/SHOULD statements of the doctrine guide.

The catalog is an embedded table. Settings may tune thresholds before it is
built, but rules can't be added, removed, or reordered at runtime. Report
order follows declaration order.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from functools import partial
from typing import Iterator

from ..config import DEFAULT_SETTINGS, Settings
from ..models import Rule, Severity
from . import predicates

# Canonical rule order (part of the report contract)
RULE_ORDER = ["R1", "R2", "R3", "R4", "R5", "R6", "R7"]

RULE_EXPLANATIONS = {
    "R1": """
AGENTS.md is the single canonical context file for AI coding assistants.
It lives at the repository root so every tool finds it without configuration.

Fix: create AGENTS.md at the repository root.
""",
    "R2": """
Tool-specific filenames are symlinks to AGENTS.md so the content can't drift.
Every CLAUDE.md in the tree must be a symlink whose target resolves to the
AGENTS.md in the same directory, and that AGENTS.md must exist.

Fix: rm CLAUDE.md && ln -s AGENTS.md CLAUDE.md
""",
    "R3": """
AGENTS.md is loaded into every assistant session, so its length is bounded.
Above the warn threshold (default 500 lines) the rule warns; above the hard
maximum (default 1000 lines) it fails. Both are configurable.

Fix: move reference material into linked documents.
""",
    "R4": """
AGENTS.md must not contain anything resembling a committed secret: provider
API keys (sk_live_, sk-, AKIA, ghp_, AIza, xox?-), PEM private key headers,
or literal password assignments. Placeholders such as <your-password>,
${PASSWORD} or changeme are allowed. Other agent context files that are
regular files (GEMINI.md, .cursorrules, nested AGENTS.md) are scanned too.

Fix: remove the value, rotate the credential, and reference it by name.
""",
    "R5": """
AGENTS.md should contain a Standards section that links to the external
doctrine repository the project follows, so conventions have one source.

Fix: add '## Standards' with a link to the doctrine source.
""",
    "R6": """
CHANGELOG.md should exist at the repository root and open with the
Keep a Changelog preamble (https://keepachangelog.com).

Fix: start CHANGELOG.md with the standard Keep a Changelog header.
""",
    "R7": """
GEMINI.md follows the same symlink convention as CLAUDE.md: if present it
must be a symlink to the sibling AGENTS.md.

Fix: rm GEMINI.md && ln -s AGENTS.md GEMINI.md
""",
}


@dataclass(frozen=True)
class RuleCatalog:
    """Ordered, immutable collection of rules."""

    rules: tuple[Rule, ...]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def ids(self) -> list[str]:
        return [rule.id for rule in self.rules]


def build_catalog(settings: Settings = DEFAULT_SETTINGS) -> RuleCatalog:
    """Build the rule catalog with thresholds from settings."""
    table = {
        "R1": Rule(
            id="R1",
            description="AGENTS.md exists at repository root",
            severity=Severity.MUST,
            predicate=predicates.agents_file_exists,
        ),
        "R2": Rule(
            id="R2",
            description="CLAUDE.md is a symlink to AGENTS.md",
            severity=Severity.MUST,
            predicate=partial(predicates.symlinked_to_agents, filename="CLAUDE.md"),
        ),
        "R3": Rule(
            id="R3",
            description=f"AGENTS.md is at most {settings.line_max} lines (warn above {settings.line_warn})",
            severity=Severity.MUST,
            predicate=partial(
                predicates.agents_line_count,
                warn_above=settings.line_warn,
                fail_above=settings.line_max,
            ),
        ),
        "R4": Rule(
            id="R4",
            description="AGENTS.md must not contain committed secrets",
            severity=Severity.MUST,
            predicate=predicates.no_committed_secrets,
        ),
        "R5": Rule(
            id="R5",
            description="AGENTS.md has a Standards section referencing the doctrine source",
            severity=Severity.SHOULD,
            predicate=predicates.standards_section,
        ),
        "R6": Rule(
            id="R6",
            description="CHANGELOG.md exists and follows Keep a Changelog",
            severity=Severity.SHOULD,
            predicate=partial(predicates.changelog_preamble, scan_lines=settings.changelog_scan_lines),
        ),
        "R7": Rule(
            id="R7",
            description="GEMINI.md is a symlink to AGENTS.md",
            severity=Severity.MUST,
            predicate=partial(predicates.symlinked_to_agents, filename="GEMINI.md"),
        ),
    }

    return RuleCatalog(
        rules=tuple(replace(table[rule_id], explanation=RULE_EXPLANATIONS[rule_id].strip()) for rule_id in RULE_ORDER)
    )
