"""Gemini gateway: one generateContent call per prompt."""
import logging
from typing import Optional

from google import genai
from google.genai import types
from google.genai.errors import APIError
from google.genai.types import HttpOptions

from mock_interview.config import settings
from mock_interview.errors import GatewayError

logger = logging.getLogger(__name__)

_genai_client = None


def get_genai_client():
    """Build the shared Gemini client on first use."""
    global _genai_client
    if _genai_client is None:
        settings.validate_config()
        if settings.USE_VERTEX == "1":
            _genai_client = genai.Client(
                vertexai=True,
                project=settings.PROJECT_ID,
                location=settings.LOCATION,
                http_options=HttpOptions(api_version="v1", timeout=settings.GEMINI_TIMEOUT_MS),
            )
            logger.info("[GENAI] Using Vertex AI (v1) via ADC")
        else:
            _genai_client = genai.Client(
                api_key=settings.API_KEY,
                http_options=HttpOptions(timeout=settings.GEMINI_TIMEOUT_MS),
            )
            logger.info("[GENAI] Using AI Studio API key (v1beta)")
    return _genai_client


class GeminiGateway:
    """Sends a prompt to Gemini and returns the first candidate's text.

    No retry is attempted: API failures surface as GatewayError, transport
    errors propagate unchanged.
    """

    def __init__(self, client=None, model: Optional[str] = None):
        self._client = client
        self.model = model or settings.GEMINI_MODEL

    @property
    def client(self):
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    def send(self, prompt: str, temperature: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
        config = None
        if temperature is not None or max_tokens is not None:
            config = types.GenerateContentConfig(temperature=temperature, max_output_tokens=max_tokens)

        try:
            resp = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except APIError as e:
            logger.error("[GENAI] %s returned %s: %s", self.model, getattr(e, "code", "?"), e)
            raise GatewayError(f"Gemini API error: {getattr(e, 'status', None) or e}") from e

        return self._candidate_text(resp)

    @staticmethod
    def _candidate_text(resp) -> str:
        try:
            text = resp.candidates[0].content.parts[0].text
        except (AttributeError, IndexError, TypeError) as e:
            feedback = getattr(resp, "prompt_feedback", None)
            logger.error("[GENAI] response without candidate text (prompt_feedback=%s)", feedback)
            raise GatewayError("Gemini API returned no candidate text") from e
        if text is None:
            raise GatewayError("Gemini API returned no candidate text")
        return text

    def ping(self) -> str:
        return self.send("Say OK.", temperature=0.1, max_tokens=10).strip()
