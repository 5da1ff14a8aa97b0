"""
Google Gemini advisor.
"""
import json
import logging
from typing import List

from google import genai
from google.genai import types

from skyhigh.exceptions import AdvisorUnavailable, AdvisoryError
from .base import BaseAdvisor, Insight

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Analyze this aviator game history: [{history}]. "
    "Provide a playful \"AI Strategy Insight\" for a simulation. "
    "Do not give real financial advice. "
    "Include a sentiment, a recommendation, and a risk level."
)

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        'sentiment': types.Schema(type=types.Type.STRING),
        'recommendation': types.Schema(type=types.Type.STRING),
        'riskLevel': types.Schema(type=types.Type.STRING, description="One of: Low, Medium, High"),
    },
    required=['sentiment', 'recommendation', 'riskLevel'],
)


def build_prompt(multipliers: List[float]) -> str:
    return PROMPT_TEMPLATE.format(history=", ".join(f"{m:.2f}" for m in multipliers))


class GeminiAdvisor(BaseAdvisor):
    """Google Gemini advisor (structured JSON output)."""

    def __init__(self, api_key: str = '', model: str = 'gemini-2.5-flash',
                 timeout: float = 5.0, client=None):
        self.api_key = api_key
        self.model_name = model
        self.timeout = timeout
        self.client = client
        if self.client is None:
            self._init_client()

    def _init_client(self):
        """Initialize the Gemini client."""
        if not self.api_key:
            logger.warning("[advisor] GEMINI_API_KEY not set")
            return
        try:
            self.client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=int(self.timeout * 1000)),
            )
        except Exception as exc:
            logger.warning(f"[advisor] failed to initialize Gemini client: {exc}")
            self.client = None

    @property
    def name(self) -> str:
        return "gemini"

    def is_available(self) -> bool:
        return self.client is not None

    def advise(self, multipliers: List[float]) -> Insight:
        if not self.is_available():
            raise AdvisorUnavailable(self.name)

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=build_prompt(multipliers),
                config=types.GenerateContentConfig(
                    response_mime_type='application/json',
                    response_schema=RESPONSE_SCHEMA,
                    temperature=0.7,
                ),
            )
        except Exception as exc:
            raise AdvisoryError(f"Gemini API error: {exc}") from exc

        text = getattr(response, 'text', None)
        if not text:
            raise AdvisoryError("Gemini returned an empty response")
        try:
            payload = json.loads(text)
        except ValueError as exc:
            raise AdvisoryError(f"Gemini returned invalid JSON: {exc}") from exc
        return Insight.from_dict(payload)
