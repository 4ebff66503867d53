"""
Tests for the background workers.

Workers are run synchronously by calling ``run()`` directly; signals are
delivered through direct connections on the test thread.
"""

import pytest

from code_explainer.core.highlight import Highlighter
from code_explainer.core.models import ExplanationResult, HighlightedDocument, ImageSource
from code_explainer.core.pipeline import STATUS_EXPLAINING, STATUS_PROCESSING, CodeExplainerPipeline
from code_explainer.services.errors import RecognitionError
from code_explainer.workers import (
    ExplainWorker,
    HighlightWorker,
    ImageExplainWorker,
    WorkerState,
)

from fakes import FakeExplainer, FakePicker, FakeRecognizer


pytestmark = pytest.mark.usefixtures("qt_app")


class SignalRecorder:
    def __init__(self, worker):
        self.finished = []
        self.errors = []
        self.statuses = []
        worker.signals.finished.connect(self.finished.append)
        worker.signals.error.connect(lambda error_type, message: self.errors.append((error_type, message)))
        worker.signals.status.connect(self.statuses.append)


def test_explain_worker_success(pipeline):
    worker = ExplainWorker(pipeline, ImageSource.GALLERY)
    recorder = SignalRecorder(worker)

    worker.run()

    assert recorder.finished == [ExplanationResult("int x = 1;", "Declares x.")]
    assert recorder.statuses == [STATUS_PROCESSING, STATUS_EXPLAINING]
    assert recorder.errors == []
    assert worker.state == WorkerState.COMPLETED


def test_explain_worker_nothing_picked():
    pipeline = CodeExplainerPipeline(FakePicker(None), FakeRecognizer(), FakeExplainer())
    worker = ExplainWorker(pipeline, ImageSource.CAMERA)
    recorder = SignalRecorder(worker)

    worker.run()

    assert recorder.finished == [None]


def test_service_error_reports_user_message():
    error = RecognitionError("tesseract exploded", user_message="Text recognition failed.")
    pipeline = CodeExplainerPipeline(FakePicker(), FakeRecognizer(error=error), FakeExplainer())
    worker = ImageExplainWorker(pipeline, b"png")
    recorder = SignalRecorder(worker)

    worker.run()

    assert recorder.errors == [("RecognitionError", "Text recognition failed.")]
    assert recorder.finished == []
    assert worker.state == WorkerState.FAILED
    assert worker.error == ("RecognitionError", "Text recognition failed.")


def test_unexpected_error_is_reported():
    pipeline = CodeExplainerPipeline(
        FakePicker(), FakeRecognizer(), FakeExplainer(error=RuntimeError("boom"))
    )
    worker = ImageExplainWorker(pipeline, b"png")
    recorder = SignalRecorder(worker)

    worker.run()

    assert recorder.errors == [("RuntimeError", "boom")]


def test_cancelled_worker_does_not_finish(pipeline):
    worker = ImageExplainWorker(pipeline, b"png")
    recorder = SignalRecorder(worker)
    cancelled = []
    worker.signals.cancelled.connect(lambda: cancelled.append(True))

    worker.cancel()
    worker.run()

    assert cancelled == [True]
    assert recorder.finished == []
    assert worker.state == WorkerState.CANCELLED


def test_highlight_worker():
    worker = HighlightWorker("int x;", Highlighter(carry_block_comments=True))
    recorder = SignalRecorder(worker)

    worker.run()

    document = recorder.finished[0]
    assert isinstance(document, HighlightedDocument)
    assert document.text == "int x;"
    assert worker.result is document
