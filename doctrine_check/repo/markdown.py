"""Markdown parsing utilities for headings, sections, and links."""

import re

from ..models import split_lines

# ATX headings: "## Title" (up to 3 leading spaces, optional closing hashes)
HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)[ \t#\r]*$", re.MULTILINE)

# [text](target) and <https://...> autolinks
MARKDOWN_LINK_PATTERN = re.compile(r"\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)")
AUTOLINK_PATTERN = re.compile(r"<(https?://[^>\s]+)>")
BARE_URL_PATTERN = re.compile(r"\bhttps?://[^\s)>\]]+")

# Fenced code blocks are masked before heading detection
FENCE_PATTERN = re.compile(r"^ {0,3}(```|~~~).*?^ {0,3}\1[^\n]*$", re.MULTILINE | re.DOTALL)


def _mask_fences(content: str) -> str:
    """Blank out fenced code blocks, keeping line structure intact."""
    return FENCE_PATTERN.sub(lambda m: "\n" * m.group(0).count("\n"), content)


def extract_headings(content: str) -> list[tuple[int, str, int]]:
    """Return (level, text, line_number) for each ATX heading outside code fences."""
    masked = _mask_fences(content)
    headings = []
    for match in HEADING_PATTERN.finditer(masked):
        line_number = masked.count("\n", 0, match.start()) + 1
        headings.append((len(match.group(1)), match.group(2).strip(), line_number))
    return headings


def extract_section(content: str, title: "str | re.Pattern[str]") -> tuple[str, int] | None:
    """Extract the body under the first heading matching `title`.

    A string title matches the whole heading text case-insensitively; a
    compiled pattern is searched within it. The section runs until the
    next heading of the same or higher level, or EOF.

    Returns:
        (section body, heading line number) or None if not found
    """
    headings = extract_headings(content)
    lines = split_lines(content)
    for index, (level, text, line_number) in enumerate(headings):
        if isinstance(title, str):
            if text.lower() != title.strip().lower():
                continue
        elif not title.search(text):
            continue
        end = len(lines)
        for next_level, _, next_line in headings[index + 1 :]:
            if next_level <= level:
                end = next_line - 1
                break
        body = "\n".join(lines[line_number:end])
        return body.strip(), line_number
    return None


def extract_links(content: str) -> list[str]:
    """Extract link targets (markdown links, autolinks, bare URLs).

    Deduplicated, in order of first appearance.
    """
    found: list[tuple[int, str]] = []
    for pattern in (MARKDOWN_LINK_PATTERN, AUTOLINK_PATTERN, BARE_URL_PATTERN):
        for match in pattern.finditer(content):
            target = match.group(1) if pattern.groups else match.group(0)
            found.append((match.start(), target.rstrip(".,;:")))

    seen = set()
    result = []
    for _, target in sorted(found):
        if target not in seen:
            seen.add(target)
            result.append(target)
    return result


def is_external_link(target: str) -> bool:
    """True for links that leave the repository (http(s) URLs)."""
    return target.lower().startswith(("http://", "https://"))
