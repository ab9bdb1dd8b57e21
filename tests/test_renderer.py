"""Tests for glance.source.renderer — Markdown to HTML."""

from __future__ import annotations

import pytest

from glance._errors import SourceError
from glance.source import renderer
from glance.source.renderer import render_markdown


class TestRenderMarkdown:
    """render_markdown — a pure function over Patitas."""

    def test_heading(self) -> None:
        html = render_markdown("# Hello")
        assert "<h1" in html
        assert "Hello</h1>" in html

    def test_paragraph(self) -> None:
        assert "<p>Some text</p>" in render_markdown("Some text\n")

    def test_empty_document(self) -> None:
        assert render_markdown("").strip() == ""

    def test_same_input_renders_identically(self) -> None:
        source = "# Title\n\n- one\n- two\n\n| a | b |\n|---|---|\n| 1 | 2 |\n"
        assert render_markdown(source) == render_markdown(source)

    def test_tables_enabled(self) -> None:
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table" in html

    def test_footnotes_enabled(self) -> None:
        html = render_markdown("Text[^1]\n\n[^1]: The note.\n")
        assert "footnotes" in html

    def test_renderer_failure_becomes_source_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from patitas.errors import ParseError

        class _Broken:
            def parse(self, source: str) -> object:
                raise ParseError("nesting too deep", lineno=3)

        monkeypatch.setattr(renderer, "_markdown", lambda: _Broken())

        with pytest.raises(SourceError, match="nesting too deep"):
            render_markdown("> > > deep")


class TestMathOutput:
    """Math keeps the TeX delimiters MathJax scans for."""

    def test_inline_math_keeps_dollar_delimiters(self) -> None:
        html = render_markdown("Area is $x^2$ here.\n")
        assert '<span class="math math-inline">$x^2$</span>' in html

    def test_inline_math_not_parsed_as_emphasis(self) -> None:
        html = render_markdown("Sum $a_1 + b_1$ done.\n")
        assert "$a_1 + b_1$" in html
        assert "<em>" not in html

    def test_display_math_keeps_double_dollars(self) -> None:
        html = render_markdown("$$\nE = mc^2\n$$\n")
        assert '<div class="math math-display">$$' in html
        assert "E = mc^2" in html
        assert "$$</div>" in html

    def test_math_content_escaped(self) -> None:
        html = render_markdown("Order $a < b$ holds.\n")
        assert "$a &lt; b$" in html


class TestLineBreaks:
    """Soft line breaks in the source are kept as visible breaks."""

    def test_soft_break_becomes_br(self) -> None:
        html = render_markdown("line one\nline two\n")
        assert "line one<br />\nline two" in html

    def test_paragraph_break_unchanged(self) -> None:
        html = render_markdown("first\n\nsecond\n")
        assert "<p>first</p>" in html
        assert "<p>second</p>" in html
        assert "<br" not in html
