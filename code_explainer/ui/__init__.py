"""
PyQt6 User Interface module.

Provides the main application window with the capture buttons,
the highlighted code pane and the explanation pane.
"""

from code_explainer.ui.main_window import MainWindow

__all__ = [
    'MainWindow',
]
