from __future__ import annotations

import re
from typing import Optional, Tuple

# =========================
# Constants
# =========================

DEFAULT_BLOCK_MINUTES = 30

COMPACT_RE = re.compile(r"^\d{3,4}$", re.ASCII)
COLON_RE = re.compile(r"^\d{1,2}:\d{2}$", re.ASCII)
MERIDIEM_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am?|pm?)$", re.IGNORECASE | re.ASCII)
BARE_HOUR_RE = re.compile(r"^\d{1,2}$", re.ASCII)


# =========================
# Helpers
# =========================

def infer_hour(hour: int) -> int:
    """Guess the 24h hour for a bare hour written without am/pm.

    1-5 are afternoon and 6-8 evening; 9-12 (and 0) are taken as written.
    """
    if 1 <= hour <= 5:
        return hour + 12
    if 6 <= hour <= 8:
        return hour + 12
    return hour


def format_hhmm(hours: int, minutes: int) -> str:
    return f"{hours:02d}:{minutes:02d}"


def parse_compact_time(s: str) -> Optional[Tuple[int, int]]:
    """Split "930" / "0930" / "9" into (hours, minutes) without range checks."""
    if not (s.isascii() and s.isdigit()):
        return None
    num = int(s)
    if len(s) in (3, 4):
        return num // 100, num % 100
    if len(s) <= 2:
        return num, 0
    return None


def parse_time(token: str, apply_inference: bool = False) -> Optional[str]:
    """Parse one time token into canonical "HH:MM".

    Accepts: "1430", "930", "9:30", "14:30", "3pm", "3:30 p", "12a", "9".
    Returns None when the token has no recognized shape or is out of range.
    """
    s = token.strip().lower()
    minutes = 0
    explicit_period = False

    if COMPACT_RE.match(s):
        num = s.zfill(4)
        hours = int(num[:2])
        minutes = int(num[2:])
        explicit_period = True
    elif COLON_RE.match(s):
        h, m = s.split(":", 1)
        hours = int(h)
        minutes = int(m)
        if hours >= 13:
            explicit_period = True
    elif MERIDIEM_RE.match(s):
        m = MERIDIEM_RE.match(s)
        hours = int(m.group(1))
        minutes = int(m.group(2)) if m.group(2) else 0
        # am/pm only goes with a 12-hour clock value
        if hours < 1 or hours > 12:
            return None
        is_pm = m.group(3).startswith("p")
        if is_pm and hours != 12:
            hours += 12
        if not is_pm and hours == 12:
            hours = 0
        explicit_period = True
    elif BARE_HOUR_RE.match(s):
        hours = int(s)
        if apply_inference and hours <= 12:
            hours = infer_hour(hours)
    else:
        return None

    if not explicit_period and apply_inference and hours <= 12:
        hours = infer_hour(hours)

    if hours < 0 or hours > 23 or minutes < 0 or minutes > 59:
        return None

    return format_hhmm(hours, minutes)


def add_minutes(canonical: str, minutes: int = DEFAULT_BLOCK_MINUTES) -> str:
    """Shift a canonical "HH:MM" forward, wrapping past midnight."""
    h, m = canonical.split(":", 1)
    total = (int(h) * 60 + int(m) + minutes) % (24 * 60)
    return format_hhmm(total // 60, total % 60)


def default_block(start: str) -> str:
    """Build "start - end" for a start time with no explicit end."""
    return f"{start} - {add_minutes(start)}"
