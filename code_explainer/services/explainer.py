"""
Code explanation with Google Gemini.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors

from code_explainer.services.errors import ConfigurationError, ExplanationServiceError
from code_explainer.services.settings import ExplainerSettings


logger = logging.getLogger(__name__)

NO_EXPLANATION = "No explanation was returned."


def classify_api_error(error: genai_errors.APIError) -> str:
    """Human-readable message for a Gemini API error."""
    code = getattr(error, 'code', None) or 0

    if code in (401, 403):
        return "The Gemini API key was rejected. Check GEMINI_API_KEY."
    if code == 429:
        return "The Gemini quota is exhausted. Try again later."
    if code >= 500:
        return "The Gemini service is temporarily unavailable. Try again later."
    if code == 400 and 'API key' in (getattr(error, 'message', None) or str(error)):
        return "The Gemini API key is invalid. Check GEMINI_API_KEY."
    return f"The Gemini request failed ({code or 'unknown error'})."


class CodeExplainer:
    """
    Sends recognized code to Gemini and returns the explanation.

    A client can be injected; otherwise one is created lazily from the API
    key on first use.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        settings: Optional[ExplainerSettings] = None,
        client: Any = None
    ):
        self.settings = settings or ExplainerSettings()
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self._api_key:
                raise ConfigurationError(
                    "Gemini API key is not set",
                    user_message="Set GEMINI_API_KEY in the environment or a .env file."
                )
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def build_prompt(self, code: str) -> str:
        """Build the explanation prompt for a piece of code."""
        limit = self.settings.max_code_chars
        if limit and len(code) > limit:
            logger.warning(f"Code truncated from {len(code)} to {limit} characters")
            code = code[:limit]
        return self.settings.prompt_template.format(code=code)

    def explain(self, code: str) -> str:
        """
        Get an explanation for a piece of code.

        Raises:
            ConfigurationError: If no API key is configured
            ExplanationServiceError: On network, authentication or quota failures
        """
        prompt = self.build_prompt(code)
        client = self.client

        logger.info(f"Requesting explanation from {self.settings.model}")
        try:
            response = client.models.generate_content(
                model=self.settings.model,
                contents=prompt,
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error: {e}")
            raise ExplanationServiceError(str(e), user_message=classify_api_error(e)) from e
        except (httpx.TransportError, ConnectionError, TimeoutError) as e:
            logger.error(f"Network error while contacting Gemini: {e}")
            raise ExplanationServiceError(
                str(e),
                user_message="Could not reach the Gemini service. Check your network connection."
            ) from e

        text = (getattr(response, 'text', None) or '').strip()
        if not text:
            logger.warning("Gemini returned an empty explanation")
            return NO_EXPLANATION
        return text
