"""
Core data models for the code explainer application.

This module defines the data structures shared across the application:
- Token categories and span styles
- Highlighter matches, spans, lines and documents
- Pipeline results and processing state

All models are designed to be:
- UI-agnostic (can be used with any frontend)
- Immutable (computed fresh on every call, never mutated)
- Type-hinted for IDE support
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator


# Marker used by the text recognizer when an image contains no text
NO_TEXT_SENTINEL = "No readable text detected in the image."

# Substring the highlighter looks for to detect the sentinel
NO_TEXT_MARKER = "No readable text"


# =============================================================================
# Enumerations
# =============================================================================

class TokenCategory(Enum):
    """
    Lexical classes the highlighter can color.

    Declaration order is the priority order; the value is the priority
    used to break ties between equally long matches (lower wins).
    """
    BLOCK_COMMENT = 1
    LINE_COMMENT = 2
    STRING = 3
    NUMBER = 4
    KEYWORD = 5
    TYPE = 6

    @property
    def priority(self) -> int:
        return self.value


class SpanStyle(Enum):
    """Visual style of an emitted span."""
    PLAIN = auto()          # No category matched
    ERROR = auto()          # Empty input or "no readable text" sentinel
    BLOCK_COMMENT = auto()
    LINE_COMMENT = auto()
    STRING = auto()
    NUMBER = auto()
    KEYWORD = auto()
    TYPE = auto()

    @classmethod
    def for_category(cls, category: TokenCategory) -> 'SpanStyle':
        """Get the span style for a token category."""
        return cls[category.name]


class ImageSource(Enum):
    """Where an image is acquired from."""
    CAMERA = "camera"
    GALLERY = "gallery"


class ProcessingState(Enum):
    """State of the capture / recognize / explain flow."""
    IDLE = auto()
    PROCESSING = auto()
    SUCCESS = auto()
    ERROR = auto()


# =============================================================================
# Highlighter Models
# =============================================================================

@dataclass(frozen=True)
class Match:
    """A single matcher hit on one line."""
    start: int                  # Start offset (inclusive)
    end: int                    # End offset (exclusive)
    category: TokenCategory

    @property
    def length(self) -> int:
        return self.end - self.start

    def sort_key(self) -> tuple[int, int, int]:
        """Ascending start, then longest first, then category priority."""
        return (self.start, -self.length, self.category.priority)


@dataclass(frozen=True)
class ColoredSpan:
    """A contiguous piece of a line tagged with exactly one style."""
    text: str
    style: SpanStyle = SpanStyle.PLAIN

    @property
    def is_plain(self) -> bool:
        return self.style == SpanStyle.PLAIN

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class HighlightedLine:
    """Ordered spans of a single line."""
    spans: tuple[ColoredSpan, ...] = ()

    @property
    def text(self) -> str:
        return ''.join(span.text for span in self.spans)

    def offsets(self) -> Iterator[tuple[int, int, ColoredSpan]]:
        """Yield (start, end, span) for every span in the line."""
        pos = 0
        for span in self.spans:
            yield pos, pos + len(span), span
            pos += len(span)

    def __iter__(self) -> Iterator[ColoredSpan]:
        return iter(self.spans)

    def __len__(self) -> int:
        return len(self.spans)


@dataclass(frozen=True)
class HighlightedDocument:
    """
    Ordered per-line spans, joined by line breaks.

    ``text`` always reproduces the highlighter input exactly.
    """
    lines: tuple[HighlightedLine, ...] = ()
    is_placeholder: bool = False  # Produced by the empty / sentinel path

    @property
    def text(self) -> str:
        return '\n'.join(line.text for line in self.lines)

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def spans(self) -> Iterator[ColoredSpan]:
        """Iterate over all spans of all lines."""
        for line in self.lines:
            yield from line.spans

    def __iter__(self) -> Iterator[HighlightedLine]:
        return iter(self.lines)


# =============================================================================
# Pipeline Models
# =============================================================================

@dataclass(frozen=True)
class RecognizedText:
    """Text produced by the OCR collaborator."""
    text: str = ""


@dataclass(frozen=True)
class ExplanationResult:
    """Extracted code together with its AI explanation."""
    extracted_code: str = ""
    explanation: str = ""

    @classmethod
    def empty(cls) -> 'ExplanationResult':
        """Initial state before anything has been processed."""
        return cls(
            extracted_code="No code extracted yet.",
            explanation="Pick an image to get an explanation.",
        )
