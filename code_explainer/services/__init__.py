"""
Services wrapping the external collaborators.

Provides:
- Image acquisition (camera, image files)
- Text recognition (Tesseract)
- Code explanation (Gemini)
- Settings management
"""

from code_explainer.services.errors import (
    ServiceError,
    ConfigurationError,
    ImageAcquisitionError,
    RecognitionError,
    ExplanationServiceError,
)
from code_explainer.services.settings import (
    ApplicationSettings,
    SettingsManager,
    Theme,
    load_api_key,
)

__all__ = [
    # Errors
    'ServiceError',
    'ConfigurationError',
    'ImageAcquisitionError',
    'RecognitionError',
    'ExplanationServiceError',
    # Settings
    'ApplicationSettings',
    'SettingsManager',
    'Theme',
    'load_api_key',
]
