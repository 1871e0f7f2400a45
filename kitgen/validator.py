"""Post-generation validation of rendered UI templates.

Generated UI templates are Jinja2 templates that the generated application
parses at runtime.  A syntax error there normally surfaces only when a page is
first requested, with a position that means little to the user.  This module
parses each freshly written template with the same engine and turns a failure
into a :class:`~kitgen.errors.TemplateValidationError` holding the line number
and a marked window of the surrounding source.
"""

from __future__ import annotations

import re
from pathlib import Path

from jinja2 import Environment, TemplateSyntaxError
from jinja2.lexer import TOKEN_BLOCK_BEGIN, TOKEN_BLOCK_END, TOKEN_NAME, TOKEN_WHITESPACE

from kitgen.errors import TemplateValidationError


CONTEXT_RADIUS = 2
LINE_MARKER = "→ "

# ``name:12: msg`` / ``name:12:5: msg`` and ``line 12``.
_COLON_POSITION_RE = re.compile(r"[^\s:]+:(\d+)(?::\d+)?:")
_LINE_WORD_RE = re.compile(r"\bline (\d+)\b")

# Block tags that open a construct closed by ``end<tag>``.
_BLOCK_TAGS = frozenset(
    {"if", "for", "block", "macro", "call", "filter", "with", "autoescape"}
)


def _runtime_environment() -> Environment:
    """An environment configured like the one generated apps use."""
    return Environment(autoescape=True)


# ---------------------------------------------------------------------------
# Position helpers
# ---------------------------------------------------------------------------


def extract_line_number(text: str) -> int:
    """Pull a 1-based line number out of an engine error message.

    Recognises ``name:line[:column]: message`` and ``line N``; returns 0 when
    the message carries no position.
    """
    match = _COLON_POSITION_RE.search(text)
    if match:
        return int(match.group(1))
    match = _LINE_WORD_RE.search(text)
    if match:
        return int(match.group(1))
    return 0


def source_context(
    content: str,
    line: int,
    radius: int = CONTEXT_RADIUS,
    marker: str = LINE_MARKER,
) -> str:
    """Render lines ``line - radius .. line + radius`` with *line* marked.

    Returns an empty string when *line* is outside the content.
    """
    lines = content.splitlines()
    if line < 1 or line > len(lines):
        return ""
    pad = " " * len(marker)
    start = max(1, line - radius)
    end = min(len(lines), line + radius)
    window = []
    for number in range(start, end + 1):
        prefix = marker if number == line else pad
        window.append(f"  {prefix}{number:4d} | {lines[number - 1]}")
    return "\n".join(window)


def _unclosed_block_line(env: Environment, content: str) -> int:
    """Line of the innermost block tag that is never closed, or 0."""
    stack: list[tuple[str, int]] = []
    expect_tag = False
    try:
        for lineno, token_type, value in env.lex(content):
            if token_type == TOKEN_BLOCK_BEGIN:
                expect_tag = True
                continue
            if token_type == TOKEN_BLOCK_END:
                expect_tag = False
                continue
            if not expect_tag or token_type != TOKEN_NAME:
                if token_type != TOKEN_WHITESPACE:
                    expect_tag = False
                continue
            expect_tag = False
            if value in _BLOCK_TAGS:
                stack.append((value, lineno))
            elif value.startswith("end") and stack and stack[-1][0] == value[3:]:
                stack.pop()
    except TemplateSyntaxError:
        return 0
    return stack[-1][1] if stack else 0


def _is_unclosed_error(exc: TemplateSyntaxError) -> bool:
    message = str(exc.message or "")
    return "Unexpected end of template" in message or "missing end of" in message


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_template(path: str | Path, content: str | None = None) -> TemplateValidationError | None:
    """Parse a generated template and describe the first syntax error.

    Args:
        path: The template file; read when *content* is not given.
        content: The template body, if already in memory.

    Returns:
        ``None`` when the template parses, else a populated
        :class:`TemplateValidationError` (returned, not raised).
    """
    path = Path(path)
    if content is None:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            return TemplateValidationError(path, 0, "", f"cannot read template: {exc}")

    env = _runtime_environment()
    try:
        env.parse(content, name=path.name, filename=str(path))
    except TemplateSyntaxError as exc:
        line = exc.lineno or extract_line_number(str(exc))
        if _is_unclosed_error(exc):
            line = _unclosed_block_line(env, content) or line
        snippet = source_context(content, line)
        return TemplateValidationError(path, line if snippet else 0, snippet, exc.message or str(exc))
    return None


def validate_template_file(path: str | Path) -> TemplateValidationError | None:
    """Read and validate the template at *path*."""
    return validate_template(path)
