"""
Secret-like pattern detection for agent context files.

Looks for strings that resemble committed credentials:
- provider API key prefixes (Stripe, OpenAI, AWS, GitHub, Google, Slack)
- PEM private key headers
- literal password assignments whose value isn't an obvious placeholder

Output is observational: a list of SecretMatch with line numbers. Matched
values are never echoed back in full.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from ..models import split_lines


SECRET_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("stripe-key", re.compile(r"(?:sk|rk)_(?:live|test)_[0-9A-Za-z]{20,}")),
    ("openai-key", re.compile(r"\bsk-(?:proj-|svcacct-)?[A-Za-z0-9_\-]{20,}")),
    ("aws-access-key-id", re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b")),
    ("github-token", re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{36,}|github_pat_[A-Za-z0-9_]{22,})")),
    ("google-api-key", re.compile(r"\bAIza[0-9A-Za-z_\-]{35}")),
    ("slack-token", re.compile(r"\bxox[abposr]-[0-9A-Za-z\-]{10,}")),
    ("private-key", re.compile(r"-----BEGIN (?:[A-Z]+ )*PRIVATE KEY(?: BLOCK)?-----")),
)

# password = value, PASSWORD: "value", "db_password": 'value'
# A colon only counts with a quoted value so prose like "password: never" passes.
PASSWORD_ASSIGNMENT = re.compile(
    r"""(?ix)
    \b[a-z_]*(?:password|passwd|pwd)\b["']?
    \s*
    (?:
        =(?!=)\s*
        (?:
            "(?P<dq>[^"\n]*)"
          | '(?P<sq>[^'\n]*)'
          | (?P<bare>[^\s,;#]+)
        )
      | :\s*
        (?:
            "(?P<colon_dq>[^"\n]*)"
          | '(?P<colon_sq>[^'\n]*)'
        )
    )
    """
)

PLACEHOLDER_PATTERN = re.compile(
    r"""(?ix)^(?:
        <[^>]*>                      # <your-password>
      | \$\{?[a-z0-9_]+\}?           # $PASSWORD, ${PASSWORD}
      | \{\{.*\}\}                   # {{ password }}
      | %\(?[a-z0-9_]+\)?s?          # %(password)s
      | x+ | \*+ | \.{3,} | -+       # xxxx, ****, ...
      | (?:your|my)[-_]\w*           # your_password
      | changeme | change[-_]me | placeholder | example\w* | sample | dummy
      | redacted | secret | password | passwd | none | null | true | false
      | env:\w+                      # env:NAME references
    )$"""
)

# Bare values that are code, not literals (os.environ["X"], get_secret())
EXPRESSION_PATTERN = re.compile(r"^[A-Za-z_][\w.]*[\(\[]")


@dataclass(frozen=True)
class SecretMatch:
    """A detected secret-like string."""

    kind: str
    line: int
    preview: str  # redacted excerpt, safe to print


def _redact(text: str) -> str:
    if len(text) <= 8:
        return text[:2] + "…"
    return text[:8] + "…"


def is_placeholder(value: str) -> bool:
    """True for values that are obviously not real credentials."""
    value = value.strip()
    if not value:
        return True
    return bool(PLACEHOLDER_PATTERN.match(value) or EXPRESSION_PATTERN.match(value))


def _password_value(match: re.Match[str]) -> tuple[str, bool]:
    """Return (value, quoted) for a password assignment match."""
    for group in ("dq", "sq", "colon_dq", "colon_sq"):
        if match.group(group) is not None:
            return match.group(group), True
    return match.group("bare"), False


def iter_secret_matches(content: str) -> Iterator[SecretMatch]:
    """Yield secret-like matches in line order."""
    for line_number, line in enumerate(split_lines(content), start=1):
        for kind, pattern in SECRET_PATTERNS:
            match = pattern.search(line)
            if match:
                yield SecretMatch(kind=kind, line=line_number, preview=_redact(match.group(0)))

        for match in PASSWORD_ASSIGNMENT.finditer(line):
            value, quoted = _password_value(match)
            if is_placeholder(value):
                continue
            if not quoted and len(value) < 4:
                continue
            yield SecretMatch(kind="password-assignment", line=line_number, preview=_redact(match.group(0)))


def find_secrets(content: str) -> list[SecretMatch]:
    return list(iter_secret_matches(content))
