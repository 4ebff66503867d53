"""
Tests for color schemes and the HTML / ANSI renderers.
"""

from code_explainer.core.highlight import (
    ColorSchemes,
    get_available_schemes,
    get_scheme_by_name,
    highlight,
    render_ansi,
    render_html,
)
from code_explainer.core.highlight.render import ANSI_RESET, EMPTY_PLACEHOLDER, ansi_prefix
from code_explainer.core.models import SpanStyle


class TestSchemes:
    def test_available_schemes(self):
        assert get_available_schemes() == ["Default Dark", "Default Light", "Monokai"]

    def test_unknown_scheme_falls_back_to_dark(self):
        assert get_scheme_by_name("Solarized").name == "Default Dark"
        assert get_scheme_by_name(None).name == "Default Dark"

    def test_plain_uses_foreground(self):
        scheme = ColorSchemes.default_dark()

        assert scheme.color_for(SpanStyle.PLAIN) == scheme.foreground
        assert scheme.color_for(SpanStyle.TYPE) == "#80d8ff"


class TestHtml:
    def test_spans_are_colored(self):
        html = render_html(highlight("int x"))

        assert html.startswith("<pre ")
        assert '<span style="color: #80d8ff">int</span>' in html
        assert '<span style="color: #ffffff"> x</span>' in html

    def test_text_is_escaped(self):
        html = render_html(highlight("a < b && c"))

        assert "&lt;" in html
        assert "&amp;&amp;" in html
        assert "a < b" not in html

    def test_lines_are_joined(self):
        html = render_html(highlight("int a;\nint b;"))

        assert "</span>\n<span" in html

    def test_font_settings(self):
        html = render_html(highlight("x"), font_family="Consolas", font_size=12)

        assert "font-family: Consolas; font-size: 12pt" in html

    def test_empty_placeholder_is_shown(self):
        html = render_html(highlight(""))

        assert EMPTY_PLACEHOLDER in html
        assert "#ff5252" in html

    def test_bold_and_italic(self):
        html = render_html(highlight("int x; // c"), ColorSchemes.default_light())

        assert "font-weight: bold" in html
        assert "font-style: italic" in html


class TestAnsi:
    def test_plain_text_has_no_escapes(self):
        assert render_ansi(highlight("x y")) == "x y"

    def test_colored_span(self):
        rendered = render_ansi(highlight("int"))

        assert rendered == f"\033[38;2;128;216;255mint{ANSI_RESET}"

    def test_bold_prefix(self):
        prefix = ansi_prefix(SpanStyle.KEYWORD, ColorSchemes.default_light())

        assert prefix == "\033[1;38;2;0;0;200m"

    def test_lines_are_joined(self):
        rendered = render_ansi(highlight("a\nb"))

        assert rendered == "a\nb"

    def test_empty_placeholder(self):
        rendered = render_ansi(highlight(""))

        assert EMPTY_PLACEHOLDER in rendered
        assert rendered.endswith(ANSI_RESET)
