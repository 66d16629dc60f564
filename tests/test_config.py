"""
Configuration and Diagnostics Tests
"""

import logging

import pytest

from topicgraph.config import EngineConfig, LocalLayoutConfig, MeasureConfig
from topicgraph.contracts import Error, ErrorCode, Result, Viewport
from topicgraph.observability import DiagnosticsCollector, DiagnosticType


class TestEngineConfig:

    def test_defaults_are_filled(self):
        config = EngineConfig()
        assert config.local_layout.row_pitch == 150.0
        assert config.measure.max_chars_per_line == 14
        assert config.routing.control_cap == 80.0
        assert config.language == "uk"

    def test_from_env_overrides(self):
        config = EngineConfig.from_env({
            "TOPICGRAPH_CANVAS_WIDTH": "1200",
            "TOPICGRAPH_CANVAS_HEIGHT": "900",
            "TOPICGRAPH_LANGUAGE": "en",
        })
        assert config.global_layout.canvas_width == 1200.0
        assert config.local_layout.canvas_height == 900.0
        assert config.language == "en"

    def test_from_env_without_overrides(self):
        assert EngineConfig.from_env({}).local_layout == LocalLayoutConfig()

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            LocalLayoutConfig(center_zone_fraction=0.0)
        with pytest.raises(ValueError):
            LocalLayoutConfig(min_sibling_spacing=-1.0)
        with pytest.raises(ValueError):
            MeasureConfig(max_chars_per_line=0)


class TestDiagnosticsCollector:

    def test_append_only_sequence(self):
        diagnostics = DiagnosticsCollector("test")
        first = diagnostics.report(DiagnosticType.DANGLING_EDGE, "one", ("a", "b"))
        second = diagnostics.report(DiagnosticType.CYCLE_DETECTED, "two")

        assert (first.sequence, second.sequence) == (1, 2)
        assert diagnostics.entry_count == 2
        assert first.component == "test"

    def test_filter_by_type(self):
        diagnostics = DiagnosticsCollector()
        diagnostics.report(DiagnosticType.DANGLING_EDGE, "one")
        diagnostics.report(DiagnosticType.CYCLE_DETECTED, "two")

        assert [e.message for e in diagnostics.get_entries(DiagnosticType.CYCLE_DETECTED)] == ["two"]
        assert not diagnostics.has(DiagnosticType.FETCH_FAILED)

    def test_entries_are_mirrored_to_logging(self, caplog):
        diagnostics = DiagnosticsCollector("local_session")
        with caplog.at_level(logging.WARNING, logger="topicgraph.diagnostics"):
            diagnostics.report(DiagnosticType.UNREACHABLE_NODE, "lost node")

        assert "lost node" in caplog.text
        assert "unreachable_node" in caplog.text

    def test_collectors_are_independent(self):
        a, b = DiagnosticsCollector(), DiagnosticsCollector()
        a.report(DiagnosticType.DANGLING_EDGE, "only a")
        assert b.entry_count == 0


class TestResultAndViewport:

    def test_result_either_value_or_error(self):
        ok = Result.success(3)
        bad = Result.failure(Error.create(ErrorCode.FETCH_FAILED, "down"))
        assert ok.is_success and not ok.is_failure
        assert bad.is_failure and bad.value is None

    def test_error_context_is_immutable(self):
        error = Error.create(ErrorCode.NODE_NOT_FOUND, "missing")
        extended = error.with_context("topic_id", "x")
        assert error.context == ()
        assert extended.context == (("topic_id", "x"),)

    def test_viewport_zoom_is_clamped(self):
        assert Viewport().zoomed(10.0).scale == 4.0
        assert Viewport().zoomed(0.01).scale == 0.1

    def test_viewport_pan_accumulates(self):
        viewport = Viewport().panned(10, 5).panned(-4, 1)
        assert (viewport.translate_x, viewport.translate_y) == (6, 6)
