"""
Heuristic syntax highlighter for recognized source code.

Colors arbitrary, possibly malformed text by lexical category without a real
parser:
- Every category matcher runs independently over a line
- All matches are pooled and sorted by start offset, longest first
- A left-to-right sweep keeps the first claim and drops overlapping matches
- Gaps between claimed matches become plain spans

The highlighter never changes text; joining the emitted spans reproduces the
input exactly.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from code_explainer.core.highlight.patterns import (
    BLOCK_COMMENT_CLOSE,
    BLOCK_COMMENT_TO_EOL,
    DEFAULT_PATTERN_TABLE,
    PatternTable,
)
from code_explainer.core.models import (
    NO_TEXT_MARKER,
    ColoredSpan,
    HighlightedDocument,
    HighlightedLine,
    Match,
    SpanStyle,
    TokenCategory,
)


_BLOCK_CLOSE_RE = re.compile(BLOCK_COMMENT_CLOSE)


def is_placeholder_text(text: str) -> bool:
    """Check whether text is empty or the "no readable text" sentinel."""
    return not text.strip() or NO_TEXT_MARKER in text


def placeholder_document(text: str) -> HighlightedDocument:
    """The whole input as a single error-styled span."""
    line = HighlightedLine((ColoredSpan(text, SpanStyle.ERROR),))
    return HighlightedDocument((line,), is_placeholder=True)


def merge_matches(
    line: str,
    matches: Iterable[Match],
    cursor: int = 0
) -> list[ColoredSpan]:
    """
    Resolve overlapping matches into contiguous spans.

    Args:
        line: The line the matches were found on
        matches: Pooled matches from all categories, in any order
        cursor: Offset where the sweep starts; text before it is not emitted

    Returns:
        Spans covering line[cursor:] exactly
    """
    spans: list[ColoredSpan] = []

    for match in sorted(matches, key=Match.sort_key):
        if match.length == 0 or match.start < cursor:
            continue

        if match.start > cursor:
            spans.append(ColoredSpan(line[cursor:match.start]))

        spans.append(ColoredSpan(
            line[match.start:match.end],
            SpanStyle.for_category(match.category)
        ))
        cursor = match.end

    if cursor < len(line):
        spans.append(ColoredSpan(line[cursor:]))

    return spans


class Highlighter:
    """
    Regex-driven highlighter.

    Lines are tokenized in isolation by default, so a block comment spanning
    several lines is only colored where it is closed on the same line. With
    ``carry_block_comments`` an unterminated ``/*`` colors the rest of its
    line and continues on following lines up to the first ``*/``.
    """

    def __init__(
        self,
        table: Optional[PatternTable] = None,
        carry_block_comments: bool = False
    ):
        if table is None:
            table = DEFAULT_PATTERN_TABLE
        if carry_block_comments and TokenCategory.BLOCK_COMMENT in table:
            table = table.replace(TokenCategory.BLOCK_COMMENT, BLOCK_COMMENT_TO_EOL)

        self._table = table
        self._carry_block_comments = carry_block_comments

    def collect_matches(self, line: str) -> list[Match]:
        """Run every category matcher over the line and pool the hits."""
        matches: list[Match] = []
        for rule in self._table.values():
            for found in rule.finditer(line):
                matches.append(Match(found.start(), found.end(), rule.category))
        return matches

    def highlight_line(self, line: str) -> HighlightedLine:
        """Highlight a single line in isolation."""
        return HighlightedLine(tuple(merge_matches(line, self.collect_matches(line))))

    def highlight(self, text: str) -> HighlightedDocument:
        """
        Highlight a block of text.

        Empty input and the "no readable text" sentinel produce a single
        error span without tokenizing.
        """
        if is_placeholder_text(text):
            return placeholder_document(text)

        if not self._carry_block_comments:
            return HighlightedDocument(tuple(
                self.highlight_line(line) for line in text.split('\n')
            ))

        lines: list[HighlightedLine] = []
        in_comment = False
        for line in text.split('\n'):
            highlighted, in_comment = self._highlight_carried(line, in_comment)
            lines.append(highlighted)

        return HighlightedDocument(tuple(lines))

    def _highlight_carried(
        self,
        line: str,
        in_comment: bool
    ) -> tuple[HighlightedLine, bool]:
        """Highlight a line that may start inside an open block comment."""
        spans: list[ColoredSpan] = []
        cursor = 0

        if in_comment:
            close = _BLOCK_CLOSE_RE.search(line)
            if close is None:
                if line:
                    spans.append(ColoredSpan(line, SpanStyle.BLOCK_COMMENT))
                return HighlightedLine(tuple(spans)), True

            cursor = close.end()
            spans.append(ColoredSpan(line[:cursor], SpanStyle.BLOCK_COMMENT))

        merged = merge_matches(line, self.collect_matches(line), cursor)
        spans.extend(merged)
        return HighlightedLine(tuple(spans)), _is_open_comment(merged)


def _is_open_comment(spans: list[ColoredSpan]) -> bool:
    """Check whether the last span is a block comment left open at end of line."""
    if not spans or spans[-1].style != SpanStyle.BLOCK_COMMENT:
        return False

    last = spans[-1].text
    return not (len(last) >= 4 and last.endswith('*/'))


_default_highlighter = Highlighter()


def highlight(text: str, table: Optional[PatternTable] = None) -> HighlightedDocument:
    """
    Highlight text with the default pattern table.

    Args:
        text: Recognized text, possibly empty or malformed
        table: Optional custom pattern table

    Returns:
        HighlightedDocument whose text equals the input
    """
    if table is None:
        return _default_highlighter.highlight(text)
    return Highlighter(table).highlight(text)
