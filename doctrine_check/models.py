"""Data models for repository snapshots and rule results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Literal


class Severity(str, Enum):
    """RFC 2119 requirement strength of a rule."""

    MUST = "MUST"
    SHOULD = "SHOULD"
    MAY = "MAY"


class Status(str, Enum):
    """Outcome of evaluating one rule."""

    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"
    SKIP = "SKIP"


# Canonical orderings (report grouping and summary lines depend on these)
SEVERITY_ORDER = (Severity.MUST, Severity.SHOULD, Severity.MAY)
STATUS_ORDER = (Status.PASS, Status.FAIL, Status.WARN, Status.SKIP)

# Basenames the scanner records
AGENT_FILES = ("AGENTS.md", "CLAUDE.md", "GEMINI.md", ".cursorrules")
FILES_OF_INTEREST = AGENT_FILES + ("CHANGELOG.md",)


def split_lines(text: str) -> list[str]:
    """Split on LF only; a trailing newline does not start another line.

    str.splitlines() also breaks on form feeds, lone CR and Unicode line
    separators, which editors and git do not count as line breaks.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


@dataclass(frozen=True)
class FileEntry:
    """A file of interest found during the scan."""

    relative_path: str  # posix-style, relative to the scan root
    content: str | None  # None if the entry can't be read as a file
    is_symlink: bool = False
    symlink_target: str | None = None  # raw link text
    resolved_path: str | None = None  # relative to root if inside it, else absolute
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def name(self) -> str:
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def parent(self) -> str:
        """Directory part of relative_path ('' for the root)."""
        if "/" not in self.relative_path:
            return ""
        return self.relative_path.rsplit("/", 1)[0]

    @property
    def line_count(self) -> int:
        if self.content is None:
            return 0
        return len(split_lines(self.content))


@dataclass(frozen=True)
class RepoSnapshot:
    """Read-only view of the files of interest in one repository."""

    root_path: Path
    files: tuple[FileEntry, ...] = ()

    def get(self, relative_path: str) -> FileEntry | None:
        for entry in self.files:
            if entry.relative_path == relative_path:
                return entry
        return None

    def named(self, name: str) -> list[FileEntry]:
        """All entries with the given basename, in scan order."""
        return [entry for entry in self.files if entry.name == name]


CheckOutcome = Literal["pass", "fail", "warn", "skip"]


@dataclass(frozen=True)
class Check:
    """What a predicate observed; the evaluator turns this into a RuleResult."""

    outcome: CheckOutcome
    message: str
    file_ref: str | None = None


@dataclass(frozen=True)
class Rule:
    """A checkable MUST/SHOULD/MAY statement."""

    id: str
    description: str
    severity: Severity
    predicate: Callable[[RepoSnapshot], Check] = field(compare=False)
    explanation: str = ""


@dataclass(frozen=True)
class RuleResult:
    """A single rule outcome."""

    rule_id: str
    severity: Severity
    status: Status
    message: str
    file_ref: str | None = None

    def __str__(self) -> str:
        loc = f" {self.file_ref} -" if self.file_ref else ""
        return f"{self.status.value}: [{self.rule_id}]{loc} {self.message}"


@dataclass(frozen=True)
class Report:
    """Ordered rule results for one run."""

    results: tuple[RuleResult, ...] = ()

    @property
    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in STATUS_ORDER}
        for result in self.results:
            counts[result.status.value] += 1
        return counts

    @property
    def has_failures(self) -> bool:
        return any(r.status is Status.FAIL for r in self.results)

    def by_rule(self) -> dict[str, RuleResult]:
        return {r.rule_id: r for r in self.results}
