from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Source:
    """
    A claimed citation backing a numeric estimate.
    reliability_score is always within [0, 1]; url is None or a usable URL.
    """
    name: str
    reliability_score: float
    year_published: str
    url: Optional[str] = None
    doi: Optional[str] = None


@dataclass(frozen=True)
class CarbonFootprint:
    manufacturing_kg_co2: float
    daily_operation_kg_co2: float
    lifetime_total_kg_co2: float  # derived, never taken from the model
    confidence_score: float
    calculation_basis: str
    sources: Tuple[Source, ...] = ()
    trees_required: int = 1
    unit: str = "kg_co2"


@dataclass(frozen=True)
class ObjectMetadata:
    assumed_lifespan_years: float
    usage_assumptions: str
    data_source: str
    geographical_region: str
    methodology_source: Optional[Source] = None


@dataclass(frozen=True)
class DetectedObject:
    name: str
    carbon_footprint: CarbonFootprint
    metadata: ObjectMetadata


@dataclass(frozen=True)
class AnalysisMetadata:
    timestamp: str
    image_quality: str
    number_of_objects_detected: int
    default_region: str
    model_version: str
    data_sources: Tuple[Source, ...] = ()


@dataclass(frozen=True)
class AnalysisResult:
    """
    Validated output of one analysis call. Immutable once built.

    to_dict() returns the same JSON shape the model is asked to produce,
    so a serialized result can be normalized again.
    """
    objects: Tuple[DetectedObject, ...]
    analysis_metadata: AnalysisMetadata

    @property
    def total_lifetime_kg_co2(self) -> float:
        return sum(o.carbon_footprint.lifetime_total_kg_co2 for o in self.objects)

    @property
    def total_trees_required(self) -> int:
        return sum(o.carbon_footprint.trees_required for o in self.objects)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        # asdict keeps tuples as tuples; JSON wants lists
        for obj in data["objects"]:
            obj["carbon_footprint"]["sources"] = list(obj["carbon_footprint"]["sources"])
        data["objects"] = list(data["objects"])
        data["analysis_metadata"]["data_sources"] = list(data["analysis_metadata"]["data_sources"])
        return data
