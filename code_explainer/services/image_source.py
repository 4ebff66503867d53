"""
Image acquisition from the camera or an image file.

Both sources return PNG-encoded bytes, or None when the user cancelled or
nothing was captured.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Optional

import cv2
from PIL import Image, UnidentifiedImageError

from code_explainer.core.models import ImageSource
from code_explainer.services.errors import ImageAcquisitionError


logger = logging.getLogger(__name__)

# Returns the chosen image path, or None if the user cancelled
PathProvider = Callable[[], Optional[str]]


def encode_png(image: Image.Image) -> bytes:
    """Encode a Pillow image as PNG bytes."""
    if image.mode not in ("RGB", "RGBA", "L"):
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class ImagePicker:
    """Acquires images from the camera or the file system."""

    def __init__(
        self,
        path_provider: Optional[PathProvider] = None,
        camera_index: int = 0,
        max_dimension: int = 4096
    ):
        self.path_provider = path_provider
        self.camera_index = camera_index
        self.max_dimension = max_dimension

    def pick_image(self, source: ImageSource) -> Optional[bytes]:
        """
        Acquire an image.

        Args:
            source: Camera or gallery

        Returns:
            PNG bytes, or None if nothing was picked

        Raises:
            ImageAcquisitionError: If the file or camera cannot be read
        """
        if source == ImageSource.CAMERA:
            return self.capture_frame()
        return self.load_from_gallery()

    def load_from_gallery(self) -> Optional[bytes]:
        """Ask the path provider for a file and load it."""
        if self.path_provider is None:
            logger.warning("No path provider configured for gallery images")
            return None

        path = self.path_provider()
        if not path:
            logger.info("Image selection cancelled")
            return None

        return self.load_file(path)

    def load_file(self, path: Path | str) -> bytes:
        """Load an image file and re-encode it as PNG."""
        path = Path(path)
        if not path.is_file():
            raise ImageAcquisitionError(
                f"Image not found: {path}",
                user_message=f"The file {path.name} does not exist."
            )

        try:
            with Image.open(path) as image:
                image.load()
                image = self._limit_size(image)
                data = encode_png(image)
        except UnidentifiedImageError as e:
            raise ImageAcquisitionError(
                f"Not an image: {path}: {e}",
                user_message=f"{path.name} is not a supported image."
            ) from e
        except OSError as e:
            raise ImageAcquisitionError(f"Failed to read {path}: {e}") from e

        logger.info(f"Loaded image {path} ({len(data)} bytes)")
        return data

    def capture_frame(self) -> Optional[bytes]:
        """Grab a single frame from the camera."""
        capture = cv2.VideoCapture(self.camera_index)
        try:
            if not capture.isOpened():
                raise ImageAcquisitionError(
                    f"Cannot open camera {self.camera_index}",
                    user_message="The camera is not available."
                )

            ok, frame = capture.read()
        finally:
            capture.release()

        if not ok or frame is None:
            logger.info("Camera returned no frame")
            return None

        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        image = self._limit_size(Image.fromarray(rgb))
        data = encode_png(image)
        logger.info(f"Captured camera frame {image.size[0]}x{image.size[1]}")
        return data

    def _limit_size(self, image: Image.Image) -> Image.Image:
        """Downscale very large images, keeping the aspect ratio."""
        if max(image.size) <= self.max_dimension:
            return image
        resized = image.copy()
        resized.thumbnail((self.max_dimension, self.max_dimension), Image.Resampling.LANCZOS)
        return resized
