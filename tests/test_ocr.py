import pytest
import pytesseract
from PIL import Image

from code_explainer.core.highlight import is_placeholder_text
from code_explainer.core.models import NO_TEXT_SENTINEL
from code_explainer.services.errors import RecognitionError
from code_explainer.services.ocr import TextRecognizer, clean_recognized_text
from code_explainer.services.settings import OcrSettings


def test_clean_recognized_text():
    raw = "\r\n\n  int x = 1;   \r\n\f  return x;\t\n\n"

    assert clean_recognized_text(raw) == "  int x = 1;\n  return x;"


def test_clean_keeps_inner_blank_lines():
    assert clean_recognized_text("a\n\nb") == "a\n\nb"


def test_config():
    assert TextRecognizer().config == "--psm 6 -c preserve_interword_spaces=1"
    settings = OcrSettings(page_segmentation_mode=4, preserve_interword_spaces=False)
    assert TextRecognizer(settings).config == "--psm 4"


def test_preprocess_upscales_small_images():
    image = Image.new("RGB", (40, 20), "white")

    prepared = TextRecognizer().preprocess(image)

    assert prepared.size == (80, 40)
    assert prepared.mode == "L"


def test_preprocess_keeps_large_images():
    image = Image.new("RGB", (1200, 30), "white")

    assert TextRecognizer().preprocess(image).size == (1200, 30)


def test_recognized_text(monkeypatch, png_bytes):
    calls = []

    def fake_image_to_string(image, lang, config):
        calls.append((lang, config))
        return "void main() {}\n\f"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)

    result = TextRecognizer().recognize_text(png_bytes)

    assert result.text == "void main() {}"
    assert calls == [("eng", "--psm 6 -c preserve_interword_spaces=1")]


def test_blank_output_becomes_sentinel(monkeypatch, png_bytes):
    monkeypatch.setattr(pytesseract, "image_to_string", lambda image, lang, config: " \n\f")

    result = TextRecognizer().recognize_text(png_bytes)

    assert result.text == NO_TEXT_SENTINEL
    assert is_placeholder_text(result.text)


def test_undecodable_image():
    with pytest.raises(RecognitionError) as excinfo:
        TextRecognizer().recognize_text(b"not an image")

    assert excinfo.value.user_message == "The image could not be read."


def test_tesseract_missing(monkeypatch, png_bytes):
    def missing(image, lang, config):
        raise pytesseract.TesseractNotFoundError()

    monkeypatch.setattr(pytesseract, "image_to_string", missing)

    with pytest.raises(RecognitionError) as excinfo:
        TextRecognizer().recognize_text(png_bytes)

    assert "Tesseract" in excinfo.value.user_message
