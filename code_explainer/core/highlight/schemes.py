"""
Color schemes for highlighted code.

Colors are kept as hex strings so the schemes can be used by any renderer
(Qt rich text, HTML, terminal).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from code_explainer.core.models import SpanStyle


@dataclass(frozen=True)
class ColorScheme:
    """Color scheme for highlighted code."""
    name: str
    background: str
    foreground: str

    # Span colors; styles without an entry use the foreground
    colors: Dict[SpanStyle, str] = field(default_factory=dict)

    bold: frozenset[SpanStyle] = frozenset()
    italic: frozenset[SpanStyle] = frozenset()

    def color_for(self, style: SpanStyle) -> str:
        """Get the text color for a span style."""
        return self.colors.get(style, self.foreground)

    def is_bold(self, style: SpanStyle) -> bool:
        return style in self.bold

    def is_italic(self, style: SpanStyle) -> bool:
        return style in self.italic


class ColorSchemes:
    """Predefined color schemes."""

    @staticmethod
    def default_dark() -> ColorScheme:
        """Default dark color scheme."""
        return ColorScheme(
            name="Default Dark",
            background="#212121",
            foreground="#ffffff",
            colors={
                SpanStyle.BLOCK_COMMENT: "#757575",
                SpanStyle.LINE_COMMENT: "#757575",
                SpanStyle.STRING: "#76ff03",
                SpanStyle.NUMBER: "#ffd180",
                SpanStyle.KEYWORD: "#ff80ab",
                SpanStyle.TYPE: "#80d8ff",
                SpanStyle.ERROR: "#ff5252",
            },
        )

    @staticmethod
    def default_light() -> ColorScheme:
        """Default light color scheme."""
        return ColorScheme(
            name="Default Light",
            background="#ffffff",
            foreground="#000000",
            colors={
                SpanStyle.BLOCK_COMMENT: "#008000",
                SpanStyle.LINE_COMMENT: "#008000",
                SpanStyle.STRING: "#a31515",
                SpanStyle.NUMBER: "#098658",
                SpanStyle.KEYWORD: "#0000c8",
                SpanStyle.TYPE: "#008080",
                SpanStyle.ERROR: "#ff0000",
            },
            bold=frozenset({SpanStyle.KEYWORD, SpanStyle.TYPE}),
            italic=frozenset({SpanStyle.BLOCK_COMMENT, SpanStyle.LINE_COMMENT}),
        )

    @staticmethod
    def monokai() -> ColorScheme:
        """Monokai color scheme."""
        return ColorScheme(
            name="Monokai",
            background="#272822",
            foreground="#f8f8f2",
            colors={
                SpanStyle.BLOCK_COMMENT: "#75715e",
                SpanStyle.LINE_COMMENT: "#75715e",
                SpanStyle.STRING: "#e6db74",
                SpanStyle.NUMBER: "#ae81ff",
                SpanStyle.KEYWORD: "#f92672",
                SpanStyle.TYPE: "#66d9ef",
                SpanStyle.ERROR: "#f44747",
            },
            italic=frozenset({SpanStyle.BLOCK_COMMENT, SpanStyle.LINE_COMMENT}),
        )


_SCHEMES = {
    "Default Dark": ColorSchemes.default_dark,
    "Default Light": ColorSchemes.default_light,
    "Monokai": ColorSchemes.monokai,
}


def get_available_schemes() -> List[str]:
    """Get list of available color scheme names."""
    return list(_SCHEMES)


def get_scheme_by_name(name: Optional[str]) -> ColorScheme:
    """Get a color scheme by name, falling back to the default dark scheme."""
    factory = _SCHEMES.get(name or "", ColorSchemes.default_dark)
    return factory()
