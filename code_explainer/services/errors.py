"""
Errors raised by the external service wrappers.
"""

from __future__ import annotations

from typing import Optional


class ServiceError(Exception):
    """
    Base class for failures of an external collaborator.

    ``user_message`` is safe to show in the UI; the exception string may
    carry more technical detail for the logs.
    """

    default_message = "The service request failed."

    def __init__(self, message: Optional[str] = None, user_message: Optional[str] = None):
        super().__init__(message or self.default_message)
        self.user_message = user_message or message or self.default_message


class ConfigurationError(ServiceError):
    """A required setting or secret is missing."""
    default_message = "The application is not configured correctly."


class ImageAcquisitionError(ServiceError):
    """The camera or the selected file could not provide an image."""
    default_message = "Could not load the image."


class RecognitionError(ServiceError):
    """Text recognition failed (as opposed to finding no text)."""
    default_message = "Text recognition failed."


class ExplanationServiceError(ServiceError):
    """The AI explanation request failed."""
    default_message = "Could not get an explanation for the code."
