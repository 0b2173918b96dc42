from __future__ import annotations

import logging
import math
import sys
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Tuple

from .constants import DEFAULT_CONSTANTS, HUMAN_FOOTPRINT, FootprintConstants, HumanFootprint
from .errors import ShapeError
from .extraction import extract_json_object
from .fields import FieldRule, apply_rules
from .models import (
    AnalysisMetadata,
    AnalysisResult,
    CarbonFootprint,
    DetectedObject,
    ObjectMetadata,
    Source,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

OBJECT_RULES = (FieldRule("name", "text", "Unidentified object"),)

FOOTPRINT_RULES = (
    FieldRule("manufacturing_kg_co2", "number"),
    FieldRule("daily_operation_kg_co2", "number"),
    FieldRule("confidence_score", "number", lo=0.0, hi=1.0),
)

METADATA_RULES = (
    FieldRule("assumed_lifespan_years", "number", lo=1.0),
    FieldRule("usage_assumptions", "text", "Standard usage patterns"),
    FieldRule("data_source", "text", "Verified environmental impact studies"),
    FieldRule("geographical_region", "text", "Global"),
)

ANALYSIS_METADATA_RULES = (
    FieldRule("image_quality", "text", "standard"),
    FieldRule("default_region", "text", "Global"),
    FieldRule("model_version", "text", "1.0"),
)


def _source_rules(current_year: str) -> Tuple[FieldRule, ...]:
    return (
        FieldRule("name", "text", "Unknown Source"),
        FieldRule("reliability_score", "number", lo=0.0, hi=1.0),
        FieldRule("year_published", "text", current_year),
        FieldRule("url", "url"),
        FieldRule("doi", "optional_text"),
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _fmt(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(value)


def lifetime_emissions(
    manufacturing_kg_co2: float,
    daily_operation_kg_co2: float,
    lifespan_years: float,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
) -> float:
    """
    manufacturing + daily * days_per_year * lifespan, capped at the largest
    finite float when huge inputs overflow.
    """
    total = manufacturing_kg_co2 + daily_operation_kg_co2 * constants.days_per_year * lifespan_years
    if math.isinf(total):
        logger.debug("Lifetime total overflowed; capped at %r", sys.float_info.max)
        return sys.float_info.max
    return total


def trees_required(
    lifetime_total_kg_co2: float,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
) -> int:
    """
    Trees needed to absorb the footprint over their lifetime, rounded up.
    Never below 1, even for a zero footprint.
    """
    if math.isnan(lifetime_total_kg_co2) or lifetime_total_kg_co2 <= 0:
        return 1
    trees = lifetime_total_kg_co2 / constants.absorption_per_tree
    if math.isinf(trees):
        logger.debug("Tree count overflowed for %r kg CO2; capped", lifetime_total_kg_co2)
        trees = sys.float_info.max
    return max(1, math.ceil(trees))


def is_standardized_human_record(metadata: Mapping[str, Any]) -> bool:
    """
    True when the metadata text marks the object as a person.
    Matches on the phrases the prompt asks the model to use, so any other
    object whose metadata happens to contain them is treated as human too.
    """
    region = metadata.get("geographical_region")
    data_source = metadata.get("data_source")
    if isinstance(region, str) and "global standardized" in region.lower():
        return True
    if isinstance(data_source, str) and "standardized human" in data_source.lower():
        return True
    return False


def _require_mapping(value: Any, path: str) -> Mapping[str, Any]:
    if value is None:
        raise ShapeError(path, "required object is missing")
    if not isinstance(value, Mapping):
        raise ShapeError(path, f"expected an object, got {type(value).__name__}")
    return value


def _normalize_source(raw: Mapping[str, Any], path: str, current_year: str) -> Source:
    fields = apply_rules(raw, _source_rules(current_year), path=path)
    return Source(**fields)


def _normalize_sources(value: Any, path: str, current_year: str) -> Tuple[Source, ...]:
    if value is None:
        return ()
    if not isinstance(value, (list, tuple)):
        logger.debug("Field repaired: %s %r -> []", path, value)
        return ()

    sources = []
    for i, item in enumerate(value):
        if not isinstance(item, Mapping):
            logger.debug("Dropped non-object source entry %s[%d]: %r", path, i, item)
            continue
        sources.append(_normalize_source(item, f"{path}[{i}].", current_year))
    return tuple(sources)


def _normalize_metadata(raw: Mapping[str, Any], path: str, current_year: str) -> ObjectMetadata:
    fields = apply_rules(raw, METADATA_RULES, path=path)

    methodology = raw.get("methodology_source")
    if isinstance(methodology, Mapping):
        fields["methodology_source"] = _normalize_source(
            methodology, f"{path}methodology_source.", current_year
        )
    else:
        if methodology is not None:
            logger.debug("Field repaired: %smethodology_source %r -> None", path, methodology)
        fields["methodology_source"] = None

    return ObjectMetadata(**fields)


def _human_footprint(human: HumanFootprint, constants: FootprintConstants) -> CarbonFootprint:
    source = Source(
        name=human.source_name,
        reliability_score=human.source_reliability,
        year_published=human.source_year,
        url=human.source_url,
    )
    return CarbonFootprint(
        manufacturing_kg_co2=human.manufacturing_kg_co2,
        daily_operation_kg_co2=human.daily_operation_kg_co2,
        lifetime_total_kg_co2=human.lifetime_total_kg_co2,
        confidence_score=human.confidence_score,
        calculation_basis=human.calculation_basis,
        sources=(source,),
        trees_required=trees_required(human.lifetime_total_kg_co2, constants),
    )


def _normalize_footprint(
    raw: Mapping[str, Any],
    lifespan_years: float,
    path: str,
    current_year: str,
    constants: FootprintConstants,
) -> CarbonFootprint:
    fields = apply_rules(raw, FOOTPRINT_RULES, path=path)
    manufacturing = fields["manufacturing_kg_co2"]
    daily_operation = fields["daily_operation_kg_co2"]

    lifetime_total = lifetime_emissions(manufacturing, daily_operation, lifespan_years, constants)

    return CarbonFootprint(
        manufacturing_kg_co2=manufacturing,
        daily_operation_kg_co2=daily_operation,
        lifetime_total_kg_co2=lifetime_total,
        confidence_score=fields["confidence_score"],
        calculation_basis=(
            f"Based on {_fmt(lifespan_years)} years lifespan with manufacturing emissions of "
            f"{_fmt(manufacturing)} kg CO2 and daily operational emissions of "
            f"{_fmt(daily_operation)} kg CO2"
        ),
        sources=_normalize_sources(raw.get("sources"), f"{path}sources", current_year),
        trees_required=trees_required(lifetime_total, constants),
    )


def _normalize_object(
    raw: Any,
    index: int,
    current_year: str,
    constants: FootprintConstants,
    human: HumanFootprint,
) -> DetectedObject:
    path = f"objects[{index}]"
    obj = _require_mapping(raw, path)
    footprint_raw = _require_mapping(obj.get("carbon_footprint"), f"{path}.carbon_footprint")
    metadata_raw = _require_mapping(obj.get("metadata"), f"{path}.metadata")

    metadata = _normalize_metadata(metadata_raw, f"{path}.metadata.", current_year)

    if is_standardized_human_record(metadata_raw):
        logger.debug("%s treated as standardized human record", path)
        footprint = _human_footprint(human, constants)
    else:
        footprint = _normalize_footprint(
            footprint_raw,
            metadata.assumed_lifespan_years,
            f"{path}.carbon_footprint.",
            current_year,
            constants,
        )

    name = apply_rules(obj, OBJECT_RULES, path=f"{path}.")["name"]
    return DetectedObject(name=name, carbon_footprint=footprint, metadata=metadata)


def normalize_payload(
    payload: Any,
    *,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
    human: HumanFootprint = HUMAN_FOOTPRINT,
    now: Optional[Clock] = None,
) -> AnalysisResult:
    """
    Turn an already-parsed model payload into a validated AnalysisResult.

    Present-but-bad fields are defaulted or clamped; missing structures
    (objects list, analysis_metadata, an object's carbon_footprint or
    metadata) raise ShapeError.
    """
    root = _require_mapping(payload, "$")
    raw_objects = root.get("objects")
    if not isinstance(raw_objects, (list, tuple)):
        raise ShapeError("objects", "expected a list of detected objects")
    raw_meta = _require_mapping(root.get("analysis_metadata"), "analysis_metadata")

    moment = (now or _utcnow)()
    current_year = str(moment.year)

    objects = tuple(
        _normalize_object(raw, i, current_year, constants, human)
        for i, raw in enumerate(raw_objects)
    )

    meta_fields = apply_rules(raw_meta, ANALYSIS_METADATA_RULES, path="analysis_metadata.")
    analysis_metadata = AnalysisMetadata(
        timestamp=moment.isoformat(),
        number_of_objects_detected=len(objects),
        data_sources=_normalize_sources(
            raw_meta.get("data_sources"), "analysis_metadata.data_sources", current_year
        ),
        **meta_fields,
    )
    return AnalysisResult(objects=objects, analysis_metadata=analysis_metadata)


def normalize_response(
    raw_text: Optional[str],
    *,
    constants: FootprintConstants = DEFAULT_CONSTANTS,
    human: HumanFootprint = HUMAN_FOOTPRINT,
    now: Optional[Clock] = None,
) -> AnalysisResult:
    """
    raw model text -> AnalysisResult.

    Raises ParseError if no JSON object can be found, ShapeError if one is
    found but lacks a required structure.
    """
    payload = extract_json_object(raw_text)
    return normalize_payload(payload, constants=constants, human=human, now=now)
