from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from ..llm_input.input_builder import ImageInput


@dataclass(frozen=True)
class LLMResponse:
    """
    Standard response object returned by any LLM client implementation.
    """
    raw_text: str
    model_name: str
    usage: Optional[dict] = None  # keep flexible (tokens, cost, etc.)


class LLMClient(Protocol):
    """
    Protocol / interface for multimodal LLM clients.

    A client takes the instruction text plus zero or more JPEG images and
    returns the model's text answer untouched. Parsing is not its job.
    """
    model_name: str

    def generate(
        self,
        *,
        prompt: str,
        images: Optional[Sequence[ImageInput]] = None,
    ) -> LLMResponse:
        ...
