"""
Language model access using Google Gemini.
The pipeline only needs generate(system_prompt, user_prompt) -> text.
"""
from __future__ import annotations

import logging
from typing import Protocol

from google import genai
from google.genai import types

from .errors import InferenceError

logger = logging.getLogger(__name__)


class LanguageModel(Protocol):
    def generate(self, system_prompt: str, user_prompt: str) -> str: ...


class GeminiModel:
    def __init__(
        self,
        *,
        api_key: str | None,
        model: str = "gemini-2.5-flash",
        timeout_s: float = 30.0,
        temperature: float = 0.2,
        max_output_tokens: int = 1024,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout_s = timeout_s
        self._temperature = temperature
        self._max_output_tokens = max_output_tokens
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if not self._api_key:
            logger.error("GEMINI_API_KEY not configured")
            raise InferenceError("Language model API key is not configured")
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                # HttpOptions.timeout is in milliseconds.
                http_options=types.HttpOptions(timeout=int(self._timeout_s * 1000)),
            )
        return self._client

    def generate(self, system_prompt: str, user_prompt: str) -> str:
        client = self._get_client()

        contents = [
            types.Content(
                role="user",
                parts=[types.Part.from_text(text=user_prompt)],
            )
        ]
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self._temperature,
            max_output_tokens=self._max_output_tokens,
        )

        try:
            resp = client.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except Exception as e:
            raise InferenceError(f"Gemini call failed: {e}") from e

        text = (getattr(resp, "text", None) or "").strip()
        if not text:
            raise InferenceError("Gemini returned an empty response")
        return text
