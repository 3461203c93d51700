from __future__ import annotations

import re

from timeblock.rules import CLEANUP_RULES, RULES, apply_rules

# Lines that are never rewritten:
#   - [ ]            (empty task, nothing to format)
#   - [c] ...        (calendar import, times already formatted upstream)
EMPTY_TASK_RE = re.compile(r"^- \[.\]\s*$")
CALENDAR_TASK_RE = re.compile(r"^- \[c\]")


def is_skipped_line(line: str) -> bool:
    return bool(EMPTY_TASK_RE.match(line) or CALENDAR_TASK_RE.match(line))


def format_line(line: str) -> str:
    """Normalize every time expression in one line to "HH:MM - HH:MM".

    Runs the rule chain, then drops extra timeblocks and moves the remaining
    one to the front of task lines. Already-canonical lines come back unchanged.
    """
    result = apply_rules(line, RULES)
    return apply_rules(result, CLEANUP_RULES)


def format_content(content: str) -> str:
    """Format a whole note line by line; skipped lines are kept byte-for-byte."""
    out = []
    for line in content.split("\n"):
        eol = ""
        if line.endswith("\r"):
            line, eol = line[:-1], "\r"
        if not is_skipped_line(line):
            line = format_line(line)
        out.append(line + eol)
    return "\n".join(out)
