"""
Read-only view that shows highlighted code.
"""

from __future__ import annotations

from typing import Dict, Optional

from PyQt6.QtGui import QColor, QFont, QTextCharFormat, QTextCursor, QPalette
from PyQt6.QtWidgets import QPlainTextEdit, QWidget

from code_explainer.core.highlight import ColorScheme, ColorSchemes
from code_explainer.core.highlight.render import display_text, render_html
from code_explainer.core.models import HighlightedDocument, SpanStyle


def char_format(scheme: ColorScheme, style: SpanStyle, font: QFont) -> QTextCharFormat:
    """Get QTextCharFormat for a span style."""
    fmt = QTextCharFormat()
    fmt.setFont(font)
    fmt.setForeground(QColor(scheme.color_for(style)))

    if scheme.is_bold(style):
        fmt.setFontWeight(QFont.Weight.Bold)

    if scheme.is_italic(style):
        fmt.setFontItalic(True)

    return fmt


class CodeView(QPlainTextEdit):
    """
    Shows a HighlightedDocument with one text format per span.

    The text stays selectable so recognized code can be copied.
    """

    def __init__(
        self,
        color_scheme: Optional[ColorScheme] = None,
        font_family: str = "Consolas",
        font_size: int = 11,
        parent: Optional[QWidget] = None
    ):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.NoWrap)

        self._font = QFont(font_family, font_size)
        self._font.setStyleHint(QFont.StyleHint.Monospace)
        self.setFont(self._font)

        self._scheme = color_scheme or ColorSchemes.default_dark()
        self._formats: Dict[SpanStyle, QTextCharFormat] = {}
        self._document: Optional[HighlightedDocument] = None
        self._apply_scheme()

    def _apply_scheme(self) -> None:
        self._formats = {
            style: char_format(self._scheme, style, self._font)
            for style in SpanStyle
        }
        palette = self.palette()
        palette.setColor(QPalette.ColorRole.Base, QColor(self._scheme.background))
        palette.setColor(QPalette.ColorRole.Text, QColor(self._scheme.foreground))
        self.setPalette(palette)

    def set_color_scheme(self, scheme: ColorScheme) -> None:
        """Set the color scheme and repaint the current document."""
        self._scheme = scheme
        self._apply_scheme()
        if self._document is not None:
            self.set_document(self._document)

    def set_document(self, document: HighlightedDocument) -> None:
        """Show an already highlighted document."""
        self._document = document
        self.clear()

        cursor = self.textCursor()
        cursor.beginEditBlock()
        for index, line in enumerate(document):
            if index:
                cursor.insertText('\n', self._formats[SpanStyle.PLAIN])
            for span in line:
                cursor.insertText(display_text(span), self._formats[span.style])
        cursor.endEditBlock()

        cursor.movePosition(QTextCursor.MoveOperation.Start)
        self.setTextCursor(cursor)

    def show_message(self, text: str) -> None:
        """Show an unhighlighted status message instead of a document."""
        self._document = None
        self.setPlainText(text)

    @property
    def document_model(self) -> Optional[HighlightedDocument]:
        """The highlighted document currently shown."""
        return self._document

    def to_html(self) -> Optional[str]:
        """The current document as styled HTML, or None while a message is shown."""
        if self._document is None:
            return None
        return render_html(
            self._document,
            self._scheme,
            font_family=self._font.family(),
            font_size=self._font.pointSize(),
        )
