"""
Text recognition with Tesseract.
"""

from __future__ import annotations

import io
import logging
from typing import Optional

import pytesseract
from PIL import Image, ImageOps, UnidentifiedImageError

from code_explainer.core.models import NO_TEXT_SENTINEL, RecognizedText
from code_explainer.services.errors import RecognitionError
from code_explainer.services.settings import OcrSettings


logger = logging.getLogger(__name__)


class TextRecognizer:
    """
    Recognizes text in code screenshots and photos.

    Images are converted to grayscale and small images are upscaled before
    being handed to Tesseract. Blank results are reported as the
    "no readable text" sentinel rather than as an error.
    """

    def __init__(self, settings: Optional[OcrSettings] = None):
        self.settings = settings or OcrSettings()
        if self.settings.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.settings.tesseract_cmd

    @property
    def config(self) -> str:
        """Tesseract command line options."""
        options = [f"--psm {self.settings.page_segmentation_mode}"]
        if self.settings.preserve_interword_spaces:
            options.append("-c preserve_interword_spaces=1")
        return " ".join(options)

    def preprocess(self, image: Image.Image) -> Image.Image:
        """Prepare an image for recognition."""
        image = ImageOps.exif_transpose(image)
        gray = ImageOps.grayscale(image)

        width, height = gray.size
        if 0 < width < self.settings.upscale_below_width:
            gray = gray.resize((width * 2, height * 2), Image.Resampling.LANCZOS)

        return ImageOps.autocontrast(gray)

    def recognize_text(self, image_bytes: bytes) -> RecognizedText:
        """
        Recognize text in an encoded image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...)

        Returns:
            RecognizedText; the sentinel text when nothing was readable

        Raises:
            RecognitionError: If the image cannot be decoded or Tesseract fails
        """
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                prepared = self.preprocess(image)
        except (UnidentifiedImageError, OSError) as e:
            raise RecognitionError(
                f"Cannot decode image: {e}",
                user_message="The image could not be read."
            ) from e

        try:
            raw = pytesseract.image_to_string(
                prepared,
                lang=self.settings.language,
                config=self.config
            )
        except pytesseract.TesseractNotFoundError as e:
            raise RecognitionError(
                str(e),
                user_message="Tesseract OCR is not installed or not on PATH."
            ) from e
        except pytesseract.TesseractError as e:
            raise RecognitionError(f"Tesseract failed: {e}") from e

        text = clean_recognized_text(raw or "")
        if not text:
            logger.info("No readable text found in image")
            return RecognizedText(NO_TEXT_SENTINEL)

        logger.info(f"Recognized {len(text.splitlines())} lines of text")
        return RecognizedText(text)


def clean_recognized_text(text: str) -> str:
    """
    Normalize raw OCR output.

    Line endings become ``\\n``, trailing whitespace and form feeds are
    removed and leading / trailing blank lines are dropped. Indentation is
    preserved.
    """
    text = text.replace('\r\n', '\n').replace('\r', '\n').replace('\f', '')
    lines = [line.rstrip() for line in text.split('\n')]

    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()

    return '\n'.join(lines)
