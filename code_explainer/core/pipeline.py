"""
Capture, recognize and explain pipeline.

Ties the three collaborators together:
- an image source that may return nothing (user cancelled)
- a text recognizer that may find no readable text
- an explainer that may fail with a service error
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from code_explainer.core.highlight.highlighter import is_placeholder_text
from code_explainer.core.models import (
    ExplanationResult,
    ImageSource,
    ProcessingState,
    RecognizedText,
)


logger = logging.getLogger(__name__)

NOTHING_TO_EXPLAIN = "No code to explain."
STATUS_PROCESSING = "Processing image..."
STATUS_EXPLAINING = "Generating explanation..."


class ImageProvider(Protocol):
    def pick_image(self, source: ImageSource) -> Optional[bytes]: ...


class TextRecognizerProtocol(Protocol):
    def recognize_text(self, image_bytes: bytes) -> RecognizedText: ...


class ExplainerProtocol(Protocol):
    def explain(self, code: str) -> str: ...


StatusCallback = Callable[[str], None]


class CodeExplainerPipeline:
    """
    Runs one capture / recognize / explain flow.

    The state moves IDLE -> PROCESSING -> SUCCESS or ERROR, and back to IDLE
    when the image source returns nothing. Errors from the collaborators
    propagate unchanged; nothing is retried.
    """

    def __init__(
        self,
        picker: ImageProvider,
        recognizer: TextRecognizerProtocol,
        explainer: ExplainerProtocol,
        status_callback: Optional[StatusCallback] = None
    ):
        self.picker = picker
        self.recognizer = recognizer
        self.explainer = explainer
        self.status_callback = status_callback
        self._state = ProcessingState.IDLE
        self._last_error: Optional[Exception] = None

    @property
    def state(self) -> ProcessingState:
        return self._state

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    def _report(self, message: str) -> None:
        logger.info(message)
        if self.status_callback:
            self.status_callback(message)

    def process(self, source: ImageSource) -> Optional[ExplanationResult]:
        """
        Acquire an image from ``source`` and explain the code in it.

        Returns:
            The result, or None if no image was acquired
        """
        self._last_error = None
        try:
            image_bytes = self.picker.pick_image(source)
        except Exception as e:
            self._state = ProcessingState.ERROR
            self._last_error = e
            raise

        if image_bytes is None:
            logger.info(f"No image acquired from {source.value}")
            self._state = ProcessingState.IDLE
            return None

        return self.process_bytes(image_bytes)

    def process_bytes(self, image_bytes: bytes) -> ExplanationResult:
        """Recognize and explain an already acquired image."""
        self._state = ProcessingState.PROCESSING
        self._last_error = None

        try:
            self._report(STATUS_PROCESSING)
            recognized = self.recognizer.recognize_text(image_bytes)
            result = self.explain_text(recognized.text)
        except Exception as e:
            self._state = ProcessingState.ERROR
            self._last_error = e
            raise

        self._state = ProcessingState.SUCCESS
        return result

    def explain_text(self, text: str) -> ExplanationResult:
        """Explain recognized text, skipping the explainer when there is none."""
        if is_placeholder_text(text):
            logger.info("Recognized text is empty; skipping explanation")
            return ExplanationResult(extracted_code=text, explanation=NOTHING_TO_EXPLAIN)

        self._report(STATUS_EXPLAINING)
        explanation = self.explainer.explain(text)
        return ExplanationResult(extracted_code=text, explanation=explanation)
