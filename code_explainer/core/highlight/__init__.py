"""
Highlight module for recognized source code.

Provides:
- Immutable per-category pattern tables
- The match / merge highlighter
- Color schemes and HTML / ANSI renderers
"""

from code_explainer.core.highlight.highlighter import (
    Highlighter,
    highlight,
    merge_matches,
    is_placeholder_text,
)
from code_explainer.core.highlight.patterns import (
    DEFAULT_PATTERN_TABLE,
    PatternRule,
    PatternTable,
    build_pattern_table,
)
from code_explainer.core.highlight.render import (
    render_ansi,
    render_html,
)
from code_explainer.core.highlight.schemes import (
    ColorScheme,
    ColorSchemes,
    get_available_schemes,
    get_scheme_by_name,
)

__all__ = [
    # Highlighter
    'Highlighter',
    'highlight',
    'merge_matches',
    'is_placeholder_text',
    # Patterns
    'DEFAULT_PATTERN_TABLE',
    'PatternRule',
    'PatternTable',
    'build_pattern_table',
    # Rendering
    'render_ansi',
    'render_html',
    'ColorScheme',
    'ColorSchemes',
    'get_available_schemes',
    'get_scheme_by_name',
]
