"""
Engine Configuration

All tunables of the layout engine as frozen dataclasses.
Defaults reproduce the geometry of the web client the engine was
extracted from.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import os


@dataclass(frozen=True)
class MeasureConfig:
    """Word-wrap and box sizing for node labels."""
    max_chars_per_line: int = 14
    char_width: float = 7.0
    line_height: float = 14.0
    padding: float = 16.0
    min_width: float = 80.0
    min_height: float = 40.0

    def __post_init__(self):
        if self.max_chars_per_line < 1:
            raise ValueError("max_chars_per_line must be at least 1")


@dataclass(frozen=True)
class GlobalLayoutConfig:
    """Grid geometry of the global (all topics) view."""
    canvas_width: float = 800.0
    canvas_height: float = 600.0
    top_margin: float = 50.0
    min_row_pitch: float = 120.0
    min_column_pitch: float = 120.0
    row_gap: float = 60.0
    column_gap: float = 40.0


@dataclass(frozen=True)
class LocalLayoutConfig:
    """Zone geometry of the local (focal topic) view."""
    canvas_width: float = 800.0
    canvas_height: float = 600.0
    row_pitch: float = 150.0
    base_zone_width: float = 150.0
    zone_padding: float = 20.0
    child_spacing: float = 20.0
    min_sibling_spacing: float = 10.0
    center_zone_fraction: float = 0.8
    independent_spacing: float = 200.0
    independent_margin: float = 100.0

    def __post_init__(self):
        if not 0.0 < self.center_zone_fraction <= 1.0:
            raise ValueError("center_zone_fraction must be in (0, 1]")
        if self.min_sibling_spacing < 0:
            raise ValueError("min_sibling_spacing cannot be negative")


@dataclass(frozen=True)
class RoutingConfig:
    """Edge curve shape."""
    control_ratio: float = 0.4
    control_cap: float = 80.0


@dataclass
class EngineConfig:
    """Complete engine configuration."""
    measure: MeasureConfig = None
    global_layout: GlobalLayoutConfig = None
    local_layout: LocalLayoutConfig = None
    routing: RoutingConfig = None
    language: str = "uk"

    def __post_init__(self):
        self.measure = self.measure or MeasureConfig()
        self.global_layout = self.global_layout or GlobalLayoutConfig()
        self.local_layout = self.local_layout or LocalLayoutConfig()
        self.routing = self.routing or RoutingConfig()

    @staticmethod
    def from_env(environ: Optional[dict] = None) -> EngineConfig:
        """
        Build configuration with environment overrides.

        TOPICGRAPH_LANGUAGE, TOPICGRAPH_CANVAS_WIDTH, TOPICGRAPH_CANVAS_HEIGHT
        """
        env = os.environ if environ is None else environ

        width = float(env.get("TOPICGRAPH_CANVAS_WIDTH", 800))
        height = float(env.get("TOPICGRAPH_CANVAS_HEIGHT", 600))

        return EngineConfig(
            global_layout=GlobalLayoutConfig(canvas_width=width, canvas_height=height),
            local_layout=LocalLayoutConfig(canvas_width=width, canvas_height=height),
            language=env.get("TOPICGRAPH_LANGUAGE", "uk"),
        )
