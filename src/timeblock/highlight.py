"""Timeblock recognition for renderers.

Live editors get decoration ranges (``timeblock_ranges``); static views get
plain/highlighted spans (``split_spans``) or ready-made HTML (``render_html``).
Both use the same canonical pattern the formatter writes.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from re import Pattern
from typing import List, Tuple

from timeblock.rules import TIMEBLOCK

TIMEBLOCK_RE = re.compile(TIMEBLOCK, re.ASCII)
HIGHLIGHT_CLASS = "timeblock"


@dataclass(frozen=True)
class Span:
    text: str
    highlighted: bool = False


def is_timeblock(text: str) -> bool:
    return TIMEBLOCK_RE.fullmatch(text) is not None


def timeblock_ranges(text: str, offset: int = 0) -> List[Tuple[int, int]]:
    """(start, end) of each timeblock, shifted by ``offset`` (viewport start)."""
    return [(offset + m.start(), offset + m.end()) for m in TIMEBLOCK_RE.finditer(text)]


def split_spans(text: str, recognizer: Pattern[str] = TIMEBLOCK_RE) -> List[Span]:
    """Cut ``text`` into ordered spans; joining their text gives ``text`` back."""
    spans: List[Span] = []
    last = 0
    for m in recognizer.finditer(text):
        if m.start() > last:
            spans.append(Span(text[last:m.start()]))
        spans.append(Span(m.group(0), highlighted=True))
        last = m.end()
    if last < len(text):
        spans.append(Span(text[last:]))
    return spans


def render_html(text: str) -> str:
    parts = []
    for span in split_spans(text):
        if span.highlighted:
            parts.append(f'<span class="{HIGHLIGHT_CLASS}">{html.escape(span.text)}</span>')
        else:
            parts.append(html.escape(span.text))
    return "".join(parts)
