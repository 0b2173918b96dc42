from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from dotenv import load_dotenv
from openai import AzureOpenAI, RateLimitError

from ..llm_input.input_builder import ImageInput
from .client_base import LLMClient, LLMResponse
from .registry import register_client

logger = logging.getLogger(__name__)


@register_client("azure")
@dataclass
class AzureOpenAIClient(LLMClient):
    """
    Azure OpenAI client implementation.

    Uses text + optional image inputs.
    Assumes environment variables are set (a .env file is honored).
    """
    model_name: str = "azure-openai"
    temperature: float = 0.2
    max_attempts: int = 3
    rate_limit_wait_seconds: float = 60.0

    def __post_init__(self):
        load_dotenv()

        endpoint = os.getenv("AZURE_OPENAI_ENDPOINT")
        api_key = os.getenv("AZURE_OPENAI_API_KEY")
        deployment = os.getenv("AZURE_OPENAI_DEPLOYMENT_NAME")
        api_version = os.getenv("AZURE_OPENAI_API_VERSION")

        if not all([endpoint, api_key, deployment, api_version]):
            raise RuntimeError(
                "Missing Azure OpenAI environment variables. "
                "Check AZURE_OPENAI_ENDPOINT, AZURE_OPENAI_API_KEY, "
                "AZURE_OPENAI_DEPLOYMENT_NAME, AZURE_OPENAI_API_VERSION."
            )

        self._deployment = deployment

        self._client = AzureOpenAI(
            api_key=api_key,
            api_version=api_version,
            azure_endpoint=endpoint,
        )

    def generate(
        self,
        *,
        prompt: str,
        images: Optional[Sequence[ImageInput]] = None,
    ) -> LLMResponse:
        """
        Send prompt + optional images to Azure OpenAI.

        Images are attached as base64 data URLs.
        """
        content = [{"type": "text", "text": prompt}]
        for image in images or []:
            content.append({"type": "image_url", "image_url": {"url": image.data_url}})

        messages = [{"role": "user", "content": content}]

        for attempt in range(self.max_attempts):
            try:
                resp = self._client.chat.completions.create(
                    model=self._deployment,
                    messages=messages,
                    temperature=self.temperature,
                )
                break
            except RateLimitError:
                if attempt == self.max_attempts - 1:
                    raise
                logger.warning(
                    "[AzureOpenAI] Rate limit hit. Sleeping %ss and retrying (attempt %d/%d)...",
                    self.rate_limit_wait_seconds,
                    attempt + 1,
                    self.max_attempts,
                )
                time.sleep(self.rate_limit_wait_seconds)

        text = resp.choices[0].message.content or ""
        usage = getattr(resp, "usage", None)

        return LLMResponse(
            raw_text=text,
            model_name=self.model_name,
            usage=usage.model_dump() if usage is not None else None,
        )
