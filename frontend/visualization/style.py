"""
Visual Tables

Colours and glyphs for topic nodes. Status drives the border, kind
drives the icon, interaction state drives the fill.
"""

from typing import Optional

from topicgraph.contracts import LearningStatus, TopicKind


STATUS_COLORS = {
    LearningStatus.NOT_LEARNED: "#9CA3AF",
    LearningStatus.WANT_TO_LEARN: "#3B82F6",
    LearningStatus.LEARNING: "#F59E0B",
    LearningStatus.LEARNED: "#10B981",
    LearningStatus.LEARNED_AND_VALIDATED: "#8B5CF6",
}

DEFAULT_BORDER = STATUS_COLORS[LearningStatus.NOT_LEARNED]

KIND_ICONS = {
    TopicKind.THEORY: "📚",
    TopicKind.PRACTICE: "⚙️",
    TopicKind.PROJECT: "🚀",
}

FILL_COLORS = {
    "selected": "#1F2937",
    "hovered": "#374151",
    "default": "#6B7280",
    "dimmed": "#9CA3AF",
}

# Opacity of nodes outside an active highlight
DIMMED_OPACITY = 0.4


def border_color(status: Optional[LearningStatus]) -> str:
    if status is None:
        return DEFAULT_BORDER
    return STATUS_COLORS.get(status, DEFAULT_BORDER)


def kind_icon(kind: TopicKind) -> str:
    return KIND_ICONS.get(kind, KIND_ICONS[TopicKind.THEORY])


def fill_color(selected: bool = False, hovered: bool = False, dimmed: bool = False) -> str:
    """Selected wins over hovered, hovered over dimmed."""
    if selected:
        return FILL_COLORS["selected"]
    if hovered:
        return FILL_COLORS["hovered"]
    if dimmed:
        return FILL_COLORS["dimmed"]
    return FILL_COLORS["default"]
