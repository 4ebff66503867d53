"""
Workers for the explain flow and for highlighting large inputs.
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QObject

from code_explainer.core.highlight import Highlighter
from code_explainer.core.models import ExplanationResult, HighlightedDocument, ImageSource
from code_explainer.core.pipeline import CodeExplainerPipeline
from code_explainer.workers.base_worker import BaseWorker


class ExplainWorker(BaseWorker):
    """
    Runs the capture / recognize / explain pipeline in the background.

    Finishes with an ExplanationResult, or None when no image was acquired.
    """

    def __init__(
        self,
        pipeline: CodeExplainerPipeline,
        source: ImageSource,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.pipeline = pipeline
        self.source = source

    def do_work(self) -> Optional[ExplanationResult]:
        self.pipeline.status_callback = self.report_status
        return self.pipeline.process(self.source)


class ImageExplainWorker(BaseWorker):
    """Runs recognition and explanation for an image that is already loaded."""

    def __init__(
        self,
        pipeline: CodeExplainerPipeline,
        image_bytes: bytes,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.pipeline = pipeline
        self.image_bytes = image_bytes

    def do_work(self) -> ExplanationResult:
        self.pipeline.status_callback = self.report_status
        return self.pipeline.process_bytes(self.image_bytes)


class HighlightWorker(BaseWorker):
    """Highlights very large text off the UI thread."""

    def __init__(
        self,
        text: str,
        highlighter: Optional[Highlighter] = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.text = text
        self.highlighter = highlighter or Highlighter()

    def do_work(self) -> HighlightedDocument:
        self.report_status(f"Highlighting {len(self.text)} characters...")
        return self.highlighter.highlight(self.text)
