from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

from ..llm_input.input_builder import ImageInput
from .client_base import LLMClient, LLMResponse
from .registry import register_client


def _default_payload() -> Dict[str, Any]:
    return {
        "objects": [
            {
                "name": "Spiral notebook",
                "carbon_footprint": {
                    "lifetime_total_kg_co2": 1.2,
                    "manufacturing_kg_co2": 1.2,
                    "daily_operation_kg_co2": 0,
                    "unit": "kg_co2",
                    "confidence_score": 0.8,
                    "calculation_basis": "Paper production and binding",
                    "sources": [
                        {
                            "name": "Environmental Paper Network",
                            "reliability_score": 0.85,
                            "year_published": "2022",
                            "url": "https://environmentalpaper.org/",
                        }
                    ],
                    "trees_required": 1,
                },
                "metadata": {
                    "assumed_lifespan_years": 2,
                    "usage_assumptions": "Used for notes until filled",
                    "data_source": "Paper industry lifecycle assessments",
                    "geographical_region": "Global",
                },
            },
            {
                "name": "Desk lamp",
                "carbon_footprint": {
                    "lifetime_total_kg_co2": 40,
                    "manufacturing_kg_co2": 12.5,
                    "daily_operation_kg_co2": 0.02,
                    "unit": "kg_co2",
                    "confidence_score": 0.7,
                    "calculation_basis": "LED lamp, 4 hours per day",
                    "sources": [],
                    "trees_required": 1,
                },
                "metadata": {
                    "assumed_lifespan_years": 5,
                    "usage_assumptions": "4 hours of use per day",
                    "data_source": "Manufacturer product environmental reports",
                    "geographical_region": "Global",
                },
            },
        ],
        "analysis_metadata": {
            "image_quality": "good",
            "number_of_objects_detected": 2,
            "default_region": "Global",
            "model_version": "mock-1",
            "data_sources": [],
        },
    }


@register_client("mock")
@dataclass
class MockLLMClient(LLMClient):
    """
    Offline backend. Answers every request with the same canned analysis,
    optionally wrapped in prose the way chatty models answer.
    """
    model_name: str = "mock-llm"
    payload: Dict[str, Any] = field(default_factory=_default_payload)
    wrap_in_prose: bool = False

    def generate(
        self, *, prompt: str, images: Optional[Sequence[ImageInput]] = None
    ) -> LLMResponse:
        body = json.dumps(self.payload, indent=2)
        text = body
        if self.wrap_in_prose:
            text = f"Here is the analysis you asked for:\n{body}\nLet me know if you need more."
        return LLMResponse(raw_text=text, model_name=self.model_name, usage=None)
