"""
Tests for the match / merge highlighter.
"""

import pytest

from code_explainer.core.highlight import Highlighter, build_pattern_table, highlight, merge_matches
from code_explainer.core.highlight.highlighter import is_placeholder_text
from code_explainer.core.models import Match, SpanStyle, TokenCategory


def pairs(line):
    return [(span.text, span.style) for span in line]


SAMPLES = [
    "",
    "   \n\t",
    "final String x = 5; // five",
    "/* header */\nimport 'package:flutter/material.dart';\n\nvoid main() {\n  runApp(MyApp());\n}",
    'print("a \\"quoted\\" word", 3.14);',
    "/* never closed\nstill comment */ int y = 2;",
    "'unterminated string\n// ok",
    "x = 1/*2*/+3 // c /* d */",
    "\n\n\n",
    "No readable text detected in the image.",
]


@pytest.mark.parametrize("carry", [False, True])
@pytest.mark.parametrize("text", SAMPLES)
def test_joined_spans_reproduce_input(text, carry):
    document = Highlighter(carry_block_comments=carry).highlight(text)
    assert document.text == text


@pytest.mark.parametrize("text", SAMPLES)
def test_spans_do_not_overlap(text):
    for line in highlight(text):
        position = 0
        for start, end, span in line.offsets():
            assert start == position
            assert end >= start
            position = end
        assert position == len(line.text)


def test_highlighting_is_deterministic():
    text = SAMPLES[3]
    assert highlight(text) == highlight(text)
    assert Highlighter().highlight(text) == Highlighter().highlight(text)


def test_empty_input_is_single_error_span():
    document = highlight("")

    assert document.is_placeholder
    assert document.line_count == 1
    assert pairs(document.lines[0]) == [("", SpanStyle.ERROR)]


def test_whitespace_only_input_is_single_error_span():
    document = highlight("  \n  ")

    assert document.line_count == 1
    assert pairs(document.lines[0]) == [("  \n  ", SpanStyle.ERROR)]


def test_sentinel_text_is_single_error_span():
    document = highlight("No readable text detected")

    assert pairs(document.lines[0]) == [("No readable text detected", SpanStyle.ERROR)]
    assert len(list(document.spans())) == 1


def test_sentinel_anywhere_in_text_wins():
    text = "int x = 1;\nNo readable text here"
    document = highlight(text)

    assert document.is_placeholder
    assert pairs(document.lines[0]) == [(text, SpanStyle.ERROR)]


def test_is_placeholder_text():
    assert is_placeholder_text("")
    assert is_placeholder_text(" \t\n")
    assert is_placeholder_text("No readable text detected in the image.")
    assert not is_placeholder_text("int x;")


def test_line_comment_swallows_block_comment():
    line = highlight("// comment inside /* not a block */").lines[0]

    assert pairs(line) == [("// comment inside /* not a block */", SpanStyle.LINE_COMMENT)]


def test_declaration_with_trailing_comment():
    line = highlight("final String x = 5; // five").lines[0]

    assert pairs(line) == [
        ("final", SpanStyle.KEYWORD),
        (" ", SpanStyle.PLAIN),
        ("String", SpanStyle.TYPE),
        (" x = ", SpanStyle.PLAIN),
        ("5", SpanStyle.NUMBER),
        ("; ", SpanStyle.PLAIN),
        ("// five", SpanStyle.LINE_COMMENT),
    ]


def test_number_inside_string_is_not_colored():
    line = highlight('"abc 123"').lines[0]

    assert pairs(line) == [('"abc 123"', SpanStyle.STRING)]


def test_escaped_quotes_stay_inside_string():
    line = highlight(r'x = "a\"b";').lines[0]

    assert pairs(line) == [
        ("x = ", SpanStyle.PLAIN),
        (r'"a\"b"', SpanStyle.STRING),
        (";", SpanStyle.PLAIN),
    ]


def test_keywords_match_whole_words_only():
    line = highlight("imported builder var x1 = 10;").lines[0]

    assert pairs(line) == [
        ("imported builder ", SpanStyle.PLAIN),
        ("var", SpanStyle.KEYWORD),
        (" x1 = ", SpanStyle.PLAIN),
        ("10", SpanStyle.NUMBER),
        (";", SpanStyle.PLAIN),
    ]


def test_decimal_number():
    line = highlight("double pi = 3.14;").lines[0]

    assert ("3.14", SpanStyle.NUMBER) in pairs(line)
    assert ("double", SpanStyle.TYPE) in pairs(line)


def test_block_comment_on_one_line():
    line = highlight("a /* b */ c").lines[0]

    assert pairs(line) == [
        ("a ", SpanStyle.PLAIN),
        ("/* b */", SpanStyle.BLOCK_COMMENT),
        (" c", SpanStyle.PLAIN),
    ]


def test_block_comment_is_not_carried_by_default():
    document = highlight("/* start\nend */")

    assert pairs(document.lines[0]) == [("/* start", SpanStyle.PLAIN)]
    assert pairs(document.lines[1]) == [("end */", SpanStyle.PLAIN)]


def test_empty_lines_have_no_spans():
    document = highlight("int a;\n\nint b;")

    assert document.line_count == 3
    assert len(document.lines[1]) == 0


class TestCarriedBlockComments:
    """Tests for the multi-line block comment mode."""

    def setup_method(self):
        self.highlighter = Highlighter(carry_block_comments=True)

    def test_comment_continues_until_close(self):
        document = self.highlighter.highlight("/* start\nmiddle\nend */ int x")

        assert pairs(document.lines[0]) == [("/* start", SpanStyle.BLOCK_COMMENT)]
        assert pairs(document.lines[1]) == [("middle", SpanStyle.BLOCK_COMMENT)]
        assert pairs(document.lines[2]) == [
            ("end */", SpanStyle.BLOCK_COMMENT),
            (" ", SpanStyle.PLAIN),
            ("int", SpanStyle.TYPE),
            (" x", SpanStyle.PLAIN),
        ]

    def test_empty_line_inside_comment(self):
        document = self.highlighter.highlight("/* a\n\nb */")

        assert len(document.lines[1]) == 0
        assert pairs(document.lines[2]) == [("b */", SpanStyle.BLOCK_COMMENT)]

    def test_closed_comment_does_not_carry(self):
        document = self.highlighter.highlight("/* a */\nint b;")

        assert pairs(document.lines[0]) == [("/* a */", SpanStyle.BLOCK_COMMENT)]
        assert pairs(document.lines[1])[0] == ("int", SpanStyle.TYPE)

    def test_empty_comment_is_closed(self):
        document = self.highlighter.highlight("/**/\nint b;")

        assert pairs(document.lines[1])[0] == ("int", SpanStyle.TYPE)

    def test_slash_star_slash_stays_open(self):
        document = self.highlighter.highlight("/*/\nint b;")

        assert pairs(document.lines[1]) == [("int b;", SpanStyle.BLOCK_COMMENT)]

    def test_opener_inside_line_comment_is_ignored(self):
        document = self.highlighter.highlight("// see /* here\nint b;")

        assert pairs(document.lines[0]) == [("// see /* here", SpanStyle.LINE_COMMENT)]
        assert pairs(document.lines[1])[0] == ("int", SpanStyle.TYPE)

    def test_new_comment_after_close_on_same_line(self):
        document = self.highlighter.highlight("/* a\nb */ x /* c\nd */")

        assert pairs(document.lines[1]) == [
            ("b */", SpanStyle.BLOCK_COMMENT),
            (" x ", SpanStyle.PLAIN),
            ("/* c", SpanStyle.BLOCK_COMMENT),
        ]
        assert pairs(document.lines[2]) == [("d */", SpanStyle.BLOCK_COMMENT)]

    def test_placeholder_path_is_unchanged(self):
        assert self.highlighter.highlight("").is_placeholder


class TestMergeMatches:
    """Tests for overlap resolution."""

    def test_longest_match_wins_at_same_start(self):
        spans = merge_matches("abcde", [
            Match(0, 3, TokenCategory.KEYWORD),
            Match(0, 5, TokenCategory.TYPE),
        ])

        assert [(s.text, s.style) for s in spans] == [("abcde", SpanStyle.TYPE)]

    def test_priority_breaks_ties(self):
        spans = merge_matches("abc", [
            Match(0, 3, TokenCategory.TYPE),
            Match(0, 3, TokenCategory.KEYWORD),
        ])

        assert [(s.text, s.style) for s in spans] == [("abc", SpanStyle.KEYWORD)]

    def test_overlapping_later_match_is_dropped(self):
        spans = merge_matches("abcdefg", [
            Match(2, 6, TokenCategory.NUMBER),
            Match(0, 4, TokenCategory.STRING),
        ])

        assert [(s.text, s.style) for s in spans] == [
            ("abcd", SpanStyle.STRING),
            ("efg", SpanStyle.PLAIN),
        ]

    def test_zero_length_matches_are_ignored(self):
        spans = merge_matches("ab", [Match(1, 1, TokenCategory.NUMBER)])

        assert [(s.text, s.style) for s in spans] == [("ab", SpanStyle.PLAIN)]

    def test_cursor_skips_prefix(self):
        spans = merge_matches("xx int", [
            Match(0, 2, TokenCategory.NUMBER),
            Match(3, 6, TokenCategory.TYPE),
        ], cursor=2)

        assert [(s.text, s.style) for s in spans] == [
            (" ", SpanStyle.PLAIN),
            ("int", SpanStyle.TYPE),
        ]

    def test_no_matches(self):
        assert merge_matches("", []) == []


def test_custom_table_priority_between_keyword_and_type():
    table = build_pattern_table(keywords=["Foo"], types=["Foo"])
    line = highlight("Foo", table).lines[0]

    assert pairs(line) == [("Foo", SpanStyle.KEYWORD)]


def test_custom_keywords():
    table = build_pattern_table(keywords=["def"], types=[])
    line = Highlighter(table).highlight_line("def final")

    assert pairs(line) == [("def", SpanStyle.KEYWORD), (" final", SpanStyle.PLAIN)]
