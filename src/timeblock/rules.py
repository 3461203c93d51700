"""Ordered rewrite rules for timeblock normalization.

Each rule is a compiled pattern plus a replace callback used with ``re.sub``.
A callback that cannot produce a valid timeblock returns the matched text
unchanged, so a failed parse never writes a partial result.

Order matters: later rules see the output of earlier ones, and the cleanup
rules run after the whole chain.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from re import Match, Pattern
from typing import Callable, Iterable, Optional

from timeblock.timeparse import (
    default_block,
    format_hhmm,
    infer_hour,
    parse_compact_time,
    parse_time,
)

# =========================
# Shared patterns
# =========================

TIMEBLOCK = r"\d{2}:\d{2} - \d{2}:\d{2}"
TIMEBLOCK_PREFIX_RE = re.compile(rf"^{TIMEBLOCK}", re.ASCII)
TIMEBLOCK_ANY_RE = re.compile(rf"{TIMEBLOCK}\s*", re.ASCII)

# Looks like the tail of "2026-" in "2026-01-19"
DATE_FRAGMENT_RE = re.compile(r"\d{4}-$", re.ASCII)
PERIOD_RE = re.compile(r"(am?|pm?)", re.IGNORECASE | re.ASCII)

MERIDIEM_TIME = r"\d{1,2}(?::\d{2})?\s*(?:am?|pm?)"

# A range start never sits mid-number, right after "HH:MM - ", or at the head
# of a canonical block that is followed by a word ("09:00 - 10:00 a meeting")
RANGE_START = rf"(?<![\d:])(?<!\d\d:\d\d - )(?!{TIMEBLOCK}(?:\s|$))"

# "... 09:00 -" : what follows is the end of a range, not a single time
RANGE_DASH_END_RE = re.compile(r"[-–]\s*$")


@dataclass(frozen=True)
class Rule:
    name: str
    pattern: Pattern[str]
    replace: Callable[[Match[str]], str]

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replace, text)


def apply_rules(text: str, rules: Iterable[Rule]) -> str:
    for rule in rules:
        text = rule.apply(text)
    return text


def starts_with_timeblock(s: str) -> bool:
    return TIMEBLOCK_PREFIX_RE.match(s.strip()) is not None


def _looks_like_date(m: Match[str], lookback: int) -> bool:
    before = m.string[max(0, m.start() - lookback):m.start()]
    return DATE_FRAGMENT_RE.search(before) is not None


def _range_or_original(m: Match[str], start: Optional[str], end: Optional[str], prefix: str = "",
                       suffix: str = "") -> str:
    if start and end:
        return f"{prefix}{start} - {end}{suffix}"
    return m.group(0)


# =========================
# Rule chain
# =========================

def _strip_highlight_markup(m: Match[str]) -> str:
    return m.group(1)


def _compact_range(m: Match[str]) -> str:
    return _range_or_original(m, parse_time(m.group(1)), parse_time(m.group(2)))


def _meridiem_range(m: Match[str]) -> str:
    if _looks_like_date(m, 5):
        return m.group(0)
    return _range_or_original(m, parse_time(m.group(1)), parse_time(m.group(2)))


def _mixed_meridiem_range(m: Match[str]) -> str:
    # "2026-01-10 am" is a date, not 01-10am
    if _looks_like_date(m, 5):
        return m.group(0)
    # "3-4pm": the start borrows the end's am/pm
    t1, t2 = m.group(1), m.group(2)
    pm = PERIOD_RE.search(t2)
    period = pm.group(1) if pm else ""
    return _range_or_original(m, parse_time(t1 + period), parse_time(t2))


def _trailing_digit_range(m: Match[str]) -> str:
    if _looks_like_date(m, 5):
        return m.group(0)

    time1 = parse_compact_time(m.group(1))
    time2 = parse_compact_time(m.group(2))
    if not time1 or not time2:
        return m.group(0)
    h1, m1 = time1
    h2, m2 = time2
    if m1 > 59 or m2 > 59:
        return m.group(0)

    if h1 <= 12:
        h1 = infer_hour(h1)
    if h2 <= 12:
        h2 = infer_hour(h2)
    if not (0 <= h1 <= 23 and 0 <= h2 <= 23):
        return m.group(0)

    return f"{format_hhmm(h1, m1)} - {format_hhmm(h2, m2)}{m.group(3)}"


def _colon_range(m: Match[str]) -> str:
    return _range_or_original(m, parse_time(m.group(1)), parse_time(m.group(2)))


def _bare_hour_range(m: Match[str]) -> str:
    if _looks_like_date(m, 6):
        return m.group(0)
    return _range_or_original(
        m,
        parse_time(m.group(2), True),
        parse_time(m.group(3), True),
        prefix=m.group(1),
        suffix=m.group(4),
    )


def _bare_to_colon_range(m: Match[str]) -> str:
    return _range_or_original(
        m,
        parse_time(m.group(2), True),
        parse_time(m.group(3), True),
        prefix=m.group(1),
    )


def _leading_single_time(m: Match[str]) -> str:
    checkbox, time_str, rest = m.group(1), m.group(2), m.group(3)
    if starts_with_timeblock(rest):
        return m.group(0)
    start = parse_time(time_str, True)
    if not start:
        return m.group(0)
    return f"{checkbox}{default_block(start)} {rest.strip()}"


def _trailing_single_time(m: Match[str]) -> str:
    checkbox, task_text, time_str = m.group(1), m.group(2), m.group(3)
    if starts_with_timeblock(task_text) or RANGE_DASH_END_RE.search(task_text):
        return m.group(0)
    # Bigger numbers are ids, amounts, years...
    if time_str.isdigit() and int(time_str) > 2359:
        return m.group(0)
    start = parse_time(time_str, True)
    if not start:
        return m.group(0)
    return f"{checkbox}{default_block(start)} {task_text.strip()}"


RULES = (
    Rule(
        "strip_highlight_markup",
        re.compile(rf'<span class="timeblock">({TIMEBLOCK})</span>', re.ASCII),
        _strip_highlight_markup,
    ),
    # 1400-1500, 0900 – 1030
    Rule(
        "compact_range",
        re.compile(r"\b(\d{4})\s*[-–]\s*(\d{4})\b", re.ASCII),
        _compact_range,
    ),
    # 3pm - 4:30pm, 9a-11a
    Rule(
        "meridiem_range",
        re.compile(
            rf"{RANGE_START}({MERIDIEM_TIME})\s*[-–]\s*({MERIDIEM_TIME})(?![a-z])",
            re.IGNORECASE | re.ASCII,
        ),
        _meridiem_range,
    ),
    # 3-4pm, 10:30 - 11a
    Rule(
        "mixed_meridiem_range",
        re.compile(
            rf"\b{RANGE_START}(\d{{1,2}}(?::\d{{2}})?)\s*[-–]\s*({MERIDIEM_TIME})(?![a-z])",
            re.IGNORECASE | re.ASCII,
        ),
        _mixed_meridiem_range,
    ),
    # "... 2-3" / "... 930-1045" at end of line, never "2026-01-19"
    Rule(
        "trailing_digit_range",
        re.compile(r"\b(\d{1,4})[-–](\d{1,4})(\s*$)", re.MULTILINE | re.ASCII),
        _trailing_digit_range,
    ),
    # 9:00 - 10:30
    Rule(
        "colon_range",
        re.compile(r"(\d{1,2}:\d{2})\s*[-–]\s*(\d{1,2}:\d{2})", re.ASCII),
        _colon_range,
    ),
    # "] 1-3 ..." / "#2-4"
    Rule(
        "bare_hour_range",
        re.compile(r"([\]#]\s*)(\d{1,2})\s*[-–]\s*(\d{1,2})(\s*$|\s+)", re.MULTILINE | re.ASCII),
        _bare_hour_range,
    ),
    # "] 1-2:30 ..."
    Rule(
        "bare_to_colon_range",
        re.compile(r"([\]#]\s*)(\d{1,2})\s*[-–]\s*(\d{1,2}:\d{2})", re.ASCII),
        _bare_to_colon_range,
    ),
    # - [ ] 3p standup
    Rule(
        "leading_single_time",
        re.compile(
            r"^(- \[.\] )(\d{1,2}(?::\d{2})?\s*(?:am?|pm?)?)\s+(?!\s*[-–]\s*\d)(.+)$",
            re.IGNORECASE | re.MULTILINE | re.ASCII,
        ),
        _leading_single_time,
    ),
    # - [ ] call the bank 1600
    Rule(
        "trailing_compact_time",
        re.compile(r"^(- \[.\] )(.+)\s+(\d{3,4})\s*$", re.MULTILINE | re.ASCII),
        _trailing_single_time,
    ),
    # - [ ] call the bank 4pm
    Rule(
        "trailing_meridiem_time",
        re.compile(
            rf"^(- \[.\] )(.+)\s+({MERIDIEM_TIME})\s*$",
            re.IGNORECASE | re.MULTILINE | re.ASCII,
        ),
        _trailing_single_time,
    ),
)


# =========================
# Cleanup
# =========================

def _dedupe_timeblocks(m: Match[str]) -> str:
    checkbox, first, rest = m.group(1), m.group(2), m.group(3)
    cleaned = TIMEBLOCK_ANY_RE.sub("", rest).strip()
    return f"{checkbox}{first} {cleaned}"


def _move_timeblock_to_front(m: Match[str]) -> str:
    checkbox, before, timeblock, after = m.group(1), m.group(2), m.group(3), m.group(4)
    if starts_with_timeblock(before):
        return m.group(0)
    trimmed = before.strip()
    if not trimmed:
        return m.group(0)
    content = (trimmed + after).strip()
    return f"{checkbox}{timeblock} {content}"


DEDUPE_RULE = Rule(
    "dedupe_timeblocks",
    re.compile(rf"^(- \[.\] )({TIMEBLOCK}) (.*)$", re.MULTILINE | re.ASCII),
    _dedupe_timeblocks,
)

MOVE_TO_FRONT_RULE = Rule(
    "move_timeblock_to_front",
    re.compile(rf"^(- \[.\] )(.+?)({TIMEBLOCK})(.*)$", re.MULTILINE | re.ASCII),
    _move_timeblock_to_front,
)

# Dedupe runs again after the move so a relocated block never leaves a twin behind.
CLEANUP_RULES = (DEDUPE_RULE, MOVE_TO_FRONT_RULE, DEDUPE_RULE)


def rule_named(name: str) -> Rule:
    for rule in RULES + CLEANUP_RULES:
        if rule.name == name:
            return rule
    raise KeyError(name)
