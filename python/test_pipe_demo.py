"""Tests for the demo's results rows."""

from rich.text import Text

from pipe_demo import LAYOUTS, analyze_layout


class TestAnalyzeLayout:
    """Tests for building one table row per layout."""

    def test_square_row(self) -> None:
        row = analyze_layout("square", LAYOUTS["square"])

        assert row[:4] == ["square", "5x5", "4", "1"]
        assert isinstance(row[4], Text)
        assert row[4].plain == "ok"

    def test_failure_reported_inline(self) -> None:
        """A broken layout yields a row naming the error instead of raising."""
        row = analyze_layout("broken", LAYOUTS["broken"])

        assert row[1:4] == ["-", "-", "-"]
        assert "MalformedLoopError" in row[4].plain

    def test_every_layout_produces_a_row(self) -> None:
        for name, text in LAYOUTS.items():
            assert len(analyze_layout(name, text)) == 5
