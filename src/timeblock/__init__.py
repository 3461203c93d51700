from timeblock.formatter import format_content, format_line
from timeblock.highlight import split_spans, timeblock_ranges
from timeblock.timeparse import parse_time

__version__ = "1.0.0"

__all__ = [
    "format_content",
    "format_line",
    "parse_time",
    "split_spans",
    "timeblock_ranges",
]
