"""Tests for generated-template validation (kitgen.validator).

Covers:
- valid templates pass
- unclosed block constructs are reported at the opening tag's line
- other syntax errors are reported at the engine's line
- source_context windows and markers
- extract_line_number message formats
- unreadable files
"""

from __future__ import annotations

import textwrap

import pytest

from kitgen.errors import TemplateValidationError
from kitgen.validator import (
    LINE_MARKER,
    extract_line_number,
    source_context,
    validate_template,
    validate_template_file,
)


pytestmark = pytest.mark.unit


class TestValidateTemplate:
    def test_valid_template(self, tmp_path):
        content = "{% for item in items %}<li>{{ item.title }}</li>{% endfor %}\n"
        assert validate_template(tmp_path / "ok.html", content) is None

    def test_unclosed_if_reported_at_opening_line(self, tmp_path):
        content = textwrap.dedent("""\
            <ul>
            {% for item in items %}
              <li>{{ item.title }}</li>
            {% endfor %}
            {% if items %}
              <p>done</p>
            </ul>
        """)
        error = validate_template(tmp_path / "posts.html", content)
        assert isinstance(error, TemplateValidationError)
        assert error.line == 5
        assert f"{LINE_MARKER}   5 | {{% if items %}}" in error.snippet

    def test_innermost_unclosed_block_wins(self, tmp_path):
        content = "{% if a %}\n{% for x in y %}\n{{ x }}\n"
        error = validate_template(tmp_path / "t.html", content)
        assert error.line == 2

    def test_syntax_error_line(self, tmp_path):
        content = "<p>one</p>\n<p>{{ item. }}</p>\n<p>three</p>\n"
        error = validate_template(tmp_path / "t.html", content)
        assert error.line == 2
        assert error.detail

    def test_message_contains_path_line_and_snippet(self, tmp_path):
        path = tmp_path / "posts.html"
        error = validate_template(path, "a\nb\n{% if x %}\nc\n")
        text = str(error)
        assert str(path) in text
        assert "(line 3)" in text
        assert "{% if x %}" in text
        assert "error:" in text

    def test_file_variant(self, tmp_path):
        path = tmp_path / "t.html"
        path.write_text("{% block content %}\n", encoding="utf-8")
        error = validate_template_file(path)
        assert error.line == 1

    def test_unreadable_file(self, tmp_path):
        error = validate_template_file(tmp_path / "missing.html")
        assert error.line == 0
        assert "cannot read template" in error.detail


class TestSourceContext:
    CONTENT = "\n".join(f"line {n}" for n in range(1, 11))

    def test_window_and_marker(self):
        text = source_context(self.CONTENT, 5)
        lines = text.splitlines()
        assert len(lines) == 5
        assert lines[0] == f"  {' ' * len(LINE_MARKER)}   3 | line 3"
        assert lines[2] == f"  {LINE_MARKER}   5 | line 5"

    def test_window_clipped_at_edges(self):
        assert len(source_context(self.CONTENT, 1).splitlines()) == 3
        assert len(source_context(self.CONTENT, 10).splitlines()) == 3

    def test_custom_radius_and_marker(self):
        text = source_context(self.CONTENT, 4, radius=0, marker=">> ")
        assert text == "  >>    4 | line 4"

    @pytest.mark.parametrize("line", [0, -1, 11])
    def test_out_of_range(self, line):
        assert source_context(self.CONTENT, line) == ""


class TestExtractLineNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("posts.html:12: unexpected '}'", 12),
            ("posts.html:12:5: unexpected '}'", 12),
            ("unexpected end of template, line 7", 7),
            ("something went wrong", 0),
        ],
    )
    def test_formats(self, text, expected):
        assert extract_line_number(text) == expected
