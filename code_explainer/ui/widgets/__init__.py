"""
Custom widgets for the code explainer UI.
"""

from code_explainer.ui.widgets.code_view import CodeView, char_format
from code_explainer.ui.widgets.drop_area import DropArea

__all__ = [
    'CodeView',
    'char_format',
    'DropArea',
]
