"""
Label Measurement

Pure function from display name to node box size.
No fonts are consulted: width is a fixed per-character estimate so the
result is identical on every platform.
"""

from __future__ import annotations
from functools import lru_cache
from typing import List, Optional

from ..config import MeasureConfig
from ..contracts.base import NodeDimensions


_DEFAULT_CONFIG = MeasureConfig()


def wrap_label(name: str, max_chars_per_line: int) -> List[str]:
    """
    Greedy word wrap.

    A word longer than the budget gets its own line and is not split.
    """
    lines: List[str] = []
    current = ""

    for word in name.split():
        if len(current) + len(word) <= max_chars_per_line:
            current = f"{current} {word}" if current else word
        else:
            if current:
                lines.append(current)
            current = word

    if current:
        lines.append(current)
    return lines


@lru_cache(maxsize=4096)
def _measure(name: str, config: MeasureConfig) -> NodeDimensions:
    lines = wrap_label(name, config.max_chars_per_line)
    longest = max((len(line) for line in lines), default=0)

    width = max(longest * config.char_width + config.padding, config.min_width)
    height = max(len(lines) * config.line_height + config.padding, config.min_height)
    return NodeDimensions(width=width, height=height, lines=tuple(lines))


def measure(name: str, config: Optional[MeasureConfig] = None) -> NodeDimensions:
    """Width, height and wrapped lines for a display name."""
    return _measure(name, config or _DEFAULT_CONFIG)
