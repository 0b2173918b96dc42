from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .analysis.constants import DEFAULT_CONSTANTS, FootprintConstants
from .analysis.errors import AnalysisError, ExternalCallError
from .analysis.models import AnalysisResult
from .analysis.normalizer import Clock, normalize_response
from .llm.client_base import LLMClient
from .llm.registry import create_client
from .llm_input.input_builder import build_image_input, decode_image_b64, load_image_b64
from .llm_input.quality_checks import run_quality_checks
from .prompts.prompt_builder import build_prompt_text

logger = logging.getLogger(__name__)


def _analyze_with_artifacts(
    image_b64: str,
    *,
    client: LLMClient,
    constants: FootprintConstants,
    max_side: int,
    now: Optional[Clock],
) -> Dict:
    try:
        image = build_image_input(image_b64, max_side=max_side)
        report = run_quality_checks(decode_image_b64(image.data_b64))
    except ValueError as e:
        raise AnalysisError(f"Unusable image: {e}") from e

    for warning in report.warnings:
        logger.info("Image quality: %s", warning)

    prompt_text = build_prompt_text(image_quality_hint=report.label)

    backend = getattr(client, "model_name", type(client).__name__)
    try:
        resp = client.generate(prompt=prompt_text, images=[image])
    except Exception as e:
        raise ExternalCallError(backend, f"Image analysis failed: {e}") from e

    result = normalize_response(resp.raw_text, constants=constants, now=now)
    logger.info(
        "Analyzed image with %s: %d objects, %.2f kg CO2 total",
        resp.model_name,
        result.analysis_metadata.number_of_objects_detected,
        result.total_lifetime_kg_co2,
    )
    return {"prompt": prompt_text, "raw_text": resp.raw_text, "result": result}


def analyze(
    image_b64: str,
    *,
    client: LLMClient,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
    max_side: int = 1024,
    now: Optional[Clock] = None,
) -> AnalysisResult:
    """
    base64 image -> prompt -> model -> validated AnalysisResult.

    Raises:
        ResponseFormatError: the model answer is not a usable analysis
        ExternalCallError: the model call itself failed
        AnalysisError: the image could not be decoded
    """
    out = _analyze_with_artifacts(
        image_b64, client=client, constants=constants, max_side=max_side, now=now
    )
    return out["result"]


def analyze_many(
    images_b64: Sequence[str],
    *,
    client: LLMClient,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
    max_side: int = 1024,
    max_workers: int = 4,
    now: Optional[Clock] = None,
) -> List[AnalysisResult]:
    """
    Independent analyses run concurrently (the model call is I/O bound).
    Results are returned in input order; the first failure is raised.
    """
    if not images_b64:
        return []

    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(images_b64)))) as executor:
        futures = [
            executor.submit(
                analyze, b64, client=client, constants=constants, max_side=max_side, now=now
            )
            for b64 in images_b64
        ]
        return [f.result() for f in futures]


def run_pipeline(
    *,
    image_path: str,
    out_dir: Optional[str] = None,
    llm_backend: str = "mock",
    max_side: int = 1024,
) -> Dict:
    """
    End-to-end run on an image file:
      image -> prompt -> llm -> normalized analysis

    When out_dir is given, saves prompt.txt, llm_output.txt and analysis.json
    there. Returns a summary dict.
    """
    client = create_client(llm_backend)
    out = _analyze_with_artifacts(
        load_image_b64(image_path),
        client=client,
        constants=DEFAULT_CONSTANTS,
        max_side=max_side,
        now=None,
    )
    result: AnalysisResult = out["result"]

    summary: Dict = {
        "image_path": image_path,
        "llm_backend": llm_backend,
        "number_of_objects_detected": result.analysis_metadata.number_of_objects_detected,
        "total_lifetime_kg_co2": result.total_lifetime_kg_co2,
        "total_trees_required": result.total_trees_required,
        "analysis": result.to_dict(),
    }

    if out_dir:
        out_path = Path(out_dir)
        out_path.mkdir(parents=True, exist_ok=True)

        prompt_path = out_path / "prompt.txt"
        prompt_path.write_text(out["prompt"], encoding="utf-8")

        llm_output_path = out_path / "llm_output.txt"
        llm_output_path.write_text(out["raw_text"], encoding="utf-8")

        analysis_path = out_path / "analysis.json"
        analysis_path.write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")

        summary["out_dir"] = str(out_path)
        summary["prompt_path"] = str(prompt_path)
        summary["llm_output_path"] = str(llm_output_path)
        summary["analysis_path"] = str(analysis_path)

    return summary
