"""
Pattern tables for the heuristic highlighter.

A pattern table maps every token category to exactly one compiled regular
expression. Tables are immutable and built once; the default table is shared
process-wide and never mutated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from collections.abc import Mapping
from typing import Iterable, Iterator, Optional, Pattern

from code_explainer.core.models import TokenCategory


KEYWORDS: tuple[str, ...] = (
    'import', 'class', 'extends', 'with', 'void', 'Future', 'async', 'await',
    'late', 'final', 'const', 'var', 'if', 'else', 'for', 'while', 'return',
    'new', 'super', 'this', 'true', 'false', 'null', 'override', 'setState',
    'build', 'widget', 'context', 'debugPrint', 'try', 'catch', 'finally',
    'throw', 'rethrow',
)

TYPES: tuple[str, ...] = (
    'String', 'int', 'double', 'bool', 'List', 'Map', 'Set', 'dynamic',
    'Object', 'State', 'Widget', 'MaterialApp', 'Scaffold', 'AppBar', 'Text',
    'Column', 'Row', 'Container', 'Card', 'Padding', 'ElevatedButton',
    'CircularProgressIndicator', 'SingleChildScrollView', 'SelectableText',
    'Expanded', 'SizedBox', 'ImageSource', 'TextRecognizer', 'GenerativeModel',
    'ExplanationResult', 'AiService', 'BuildContext', 'Key',
)

BLOCK_COMMENT = r'/\*[\s\S]*?\*/'
LINE_COMMENT = r'//[^\n]*'
STRING = r'''("|')([^"'\\]*(\\.[^"'\\]*)*)("|')'''
NUMBER = r'\b\d+\.?\d*\b'

# Block comment that may stay open until the end of the line
BLOCK_COMMENT_TO_EOL = r'/\*[\s\S]*?(?:\*/|$)'
BLOCK_COMMENT_CLOSE = r'\*/'


def word_pattern(words: Iterable[str]) -> str:
    """Build a whole-word alternation pattern."""
    return r'\b(' + '|'.join(re.escape(word) for word in words) + r')\b'


@dataclass(frozen=True)
class PatternRule:
    """One category matcher."""
    category: TokenCategory
    pattern: Pattern[str]

    def finditer(self, line: str) -> Iterator[re.Match[str]]:
        return self.pattern.finditer(line)


class PatternTable(Mapping[TokenCategory, PatternRule]):
    """
    Read-only mapping from token category to its matcher.

    Iteration follows category priority order regardless of the order the
    rules were given in.
    """

    def __init__(self, rules: Iterable[PatternRule]):
        ordered: dict[TokenCategory, PatternRule] = {}
        for rule in sorted(rules, key=lambda r: r.category.priority):
            if rule.category in ordered:
                raise ValueError(f"Duplicate matcher for {rule.category.name}")
            ordered[rule.category] = rule
        self._rules = MappingProxyType(ordered)

    def __getitem__(self, category: TokenCategory) -> PatternRule:
        return self._rules[category]

    def __iter__(self) -> Iterator[TokenCategory]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        names = ', '.join(category.name for category in self)
        return f"PatternTable({names})"

    def replace(self, category: TokenCategory, pattern: str) -> 'PatternTable':
        """Return a copy with the matcher for one category replaced."""
        rules = [rule for rule in self._rules.values() if rule.category != category]
        rules.append(PatternRule(category, re.compile(pattern)))
        return PatternTable(rules)


def build_pattern_table(
    keywords: Optional[Iterable[str]] = None,
    types: Optional[Iterable[str]] = None,
    overrides: Optional[Mapping[TokenCategory, str]] = None,
) -> PatternTable:
    """
    Build a pattern table.

    Args:
        keywords: Keyword list (defaults to KEYWORDS)
        types: Type name list (defaults to TYPES)
        overrides: Raw regex per category, replacing the default matcher

    Returns:
        A new immutable PatternTable
    """
    sources: dict[TokenCategory, str] = {
        TokenCategory.BLOCK_COMMENT: BLOCK_COMMENT,
        TokenCategory.LINE_COMMENT: LINE_COMMENT,
        TokenCategory.STRING: STRING,
        TokenCategory.NUMBER: NUMBER,
        TokenCategory.KEYWORD: word_pattern(KEYWORDS if keywords is None else keywords),
        TokenCategory.TYPE: word_pattern(TYPES if types is None else types),
    }
    if overrides:
        sources.update(overrides)

    return PatternTable(
        PatternRule(category, re.compile(source))
        for category, source in sources.items()
    )


DEFAULT_PATTERN_TABLE = build_pattern_table()
