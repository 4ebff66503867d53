"""
Shared fixtures.
"""

from __future__ import annotations

import io
import os

import pytest
from PIL import Image

from code_explainer.core.pipeline import CodeExplainerPipeline

from fakes import FakeExplainer, FakePicker, FakeRecognizer


@pytest.fixture
def picker():
    return FakePicker()


@pytest.fixture
def recognizer():
    return FakeRecognizer()


@pytest.fixture
def explainer():
    return FakeExplainer()


@pytest.fixture
def pipeline(picker, recognizer, explainer):
    return CodeExplainerPipeline(picker, recognizer, explainer)


@pytest.fixture
def png_bytes():
    image = Image.new("RGB", (40, 20), "white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture(scope="session")
def qt_app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
