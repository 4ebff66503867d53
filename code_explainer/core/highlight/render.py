"""
Renderers that turn a highlighted document into displayable text.

- HTML for Qt rich-text views
- 24-bit ANSI escapes for terminals
"""

from __future__ import annotations

import html
from typing import Optional

from code_explainer.core.highlight.schemes import ColorScheme, ColorSchemes
from code_explainer.core.models import ColoredSpan, HighlightedDocument, SpanStyle


# Shown instead of an empty placeholder so the code pane is never blank
EMPTY_PLACEHOLDER = "No text recognized."

ANSI_RESET = "\033[0m"


def display_text(span: ColoredSpan) -> str:
    """Text to display for a span."""
    if span.style == SpanStyle.ERROR and not span.text:
        return EMPTY_PLACEHOLDER
    return span.text


def span_css(span: ColoredSpan, scheme: ColorScheme) -> str:
    """Inline CSS for a span."""
    parts = [f"color: {scheme.color_for(span.style)}"]
    if scheme.is_bold(span.style):
        parts.append("font-weight: bold")
    if scheme.is_italic(span.style):
        parts.append("font-style: italic")
    return "; ".join(parts)


def render_html(
    document: HighlightedDocument,
    scheme: Optional[ColorScheme] = None,
    font_family: str = "monospace",
    font_size: int = 11
) -> str:
    """
    Render a document as an HTML ``<pre>`` block.

    Args:
        document: Highlighted document
        scheme: Color scheme (defaults to the dark scheme)
        font_family: CSS font family
        font_size: Font size in points

    Returns:
        HTML string
    """
    scheme = scheme or ColorSchemes.default_dark()

    rendered_lines = []
    for line in document:
        rendered_lines.append(''.join(
            f'<span style="{span_css(span, scheme)}">{html.escape(display_text(span))}</span>'
            for span in line
        ))

    body = '\n'.join(rendered_lines)
    return (
        f'<pre style="background-color: {scheme.background}; '
        f'color: {scheme.foreground}; font-family: {font_family}; '
        f'font-size: {font_size}pt; margin: 0;">{body}</pre>'
    )


def _hex_to_rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip('#')
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def ansi_prefix(style: SpanStyle, scheme: ColorScheme) -> str:
    """ANSI escape sequence that starts a span of the given style."""
    r, g, b = _hex_to_rgb(scheme.color_for(style))
    codes = []
    if scheme.is_bold(style):
        codes.append("1")
    if scheme.is_italic(style):
        codes.append("3")
    codes.append(f"38;2;{r};{g};{b}")
    return f"\033[{';'.join(codes)}m"


def render_ansi(
    document: HighlightedDocument,
    scheme: Optional[ColorScheme] = None
) -> str:
    """
    Render a document with ANSI color escapes.

    Plain spans are written without escapes.
    """
    scheme = scheme or ColorSchemes.default_dark()

    rendered_lines = []
    for line in document:
        parts = []
        for span in line:
            text = display_text(span)
            if span.is_plain or not text:
                parts.append(text)
            else:
                parts.append(f"{ansi_prefix(span.style, scheme)}{text}{ANSI_RESET}")
        rendered_lines.append(''.join(parts))

    return '\n'.join(rendered_lines)
