from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Sequence

from dotenv import load_dotenv
from google import genai
from google.genai import types

from ..llm_input.input_builder import ImageInput
from .client_base import LLMClient, LLMResponse
from .registry import register_client

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash-8b"


@register_client("gemini")
@dataclass
class GeminiLLMClient(LLMClient):
    """
    Google Gemini client (google-genai SDK).

    Reads GEMINI_API_KEY (or GOOGLE_API_KEY) and optionally GEMINI_MODEL.
    Images are sent inline as JPEG bytes after the prompt.
    """
    model_name: str = "gemini"
    model: Optional[str] = None
    temperature: float = 0.2

    def __post_init__(self):
        load_dotenv()

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise RuntimeError(
                "Missing Gemini API key. Set GEMINI_API_KEY (or GOOGLE_API_KEY)."
            )

        self._model = self.model or os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL
        self._client = genai.Client(api_key=api_key)

    def generate(
        self,
        *,
        prompt: str,
        images: Optional[Sequence[ImageInput]] = None,
    ) -> LLMResponse:
        contents = [types.Part.from_text(text=prompt)]
        for image in images or []:
            contents.append(types.Part.from_bytes(data=image.to_bytes(), mime_type=image.mime_type))

        resp = self._client.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(temperature=self.temperature),
        )

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            raw_text=resp.text or "",
            model_name=self._model,
            usage=usage.model_dump(exclude_none=True) if usage is not None else None,
        )
