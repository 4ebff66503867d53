import re

import pytest

from code_explainer.core.highlight import DEFAULT_PATTERN_TABLE, PatternRule, PatternTable, build_pattern_table
from code_explainer.core.highlight.patterns import KEYWORDS, TYPES, word_pattern
from code_explainer.core.models import TokenCategory


def test_default_table_has_one_matcher_per_category():
    assert len(DEFAULT_PATTERN_TABLE) == len(TokenCategory)
    assert set(DEFAULT_PATTERN_TABLE) == set(TokenCategory)


def test_iteration_follows_priority():
    rules = [
        PatternRule(TokenCategory.TYPE, re.compile("t")),
        PatternRule(TokenCategory.BLOCK_COMMENT, re.compile("b")),
        PatternRule(TokenCategory.NUMBER, re.compile("n")),
    ]
    table = PatternTable(rules)

    assert list(table) == [TokenCategory.BLOCK_COMMENT, TokenCategory.NUMBER, TokenCategory.TYPE]


def test_duplicate_category_is_rejected():
    with pytest.raises(ValueError):
        PatternTable([
            PatternRule(TokenCategory.STRING, re.compile("a")),
            PatternRule(TokenCategory.STRING, re.compile("b")),
        ])


def test_table_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_PATTERN_TABLE[TokenCategory.NUMBER] = None


def test_replace_returns_new_table():
    replaced = DEFAULT_PATTERN_TABLE.replace(TokenCategory.NUMBER, r"\d")

    assert replaced[TokenCategory.NUMBER].pattern.pattern == r"\d"
    assert DEFAULT_PATTERN_TABLE[TokenCategory.NUMBER].pattern.pattern != r"\d"
    assert len(replaced) == len(DEFAULT_PATTERN_TABLE)


def test_overrides():
    table = build_pattern_table(overrides={TokenCategory.LINE_COMMENT: r"#[^\n]*"})

    assert table[TokenCategory.LINE_COMMENT].pattern.pattern == r"#[^\n]*"
    assert table[TokenCategory.STRING].pattern.pattern == DEFAULT_PATTERN_TABLE[TokenCategory.STRING].pattern.pattern


def test_word_pattern_escapes_words():
    pattern = re.compile(word_pattern(["a.b"]))

    assert pattern.search("a.b")
    assert not pattern.search("axb")


def test_default_word_lists():
    assert "final" in KEYWORDS
    assert "setState" in KEYWORDS
    assert "String" in TYPES
    assert "BuildContext" in TYPES


def test_repr_names_categories():
    assert "BLOCK_COMMENT" in repr(DEFAULT_PATTERN_TABLE)
