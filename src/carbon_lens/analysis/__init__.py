from .errors import (
    AnalysisError,
    ExternalCallError,
    ParseError,
    ResponseFormatError,
    ShapeError,
)
from .models import (
    AnalysisMetadata,
    AnalysisResult,
    CarbonFootprint,
    DetectedObject,
    ObjectMetadata,
    Source,
)
from .normalizer import normalize_payload, normalize_response

__all__ = [
    "AnalysisError",
    "AnalysisMetadata",
    "AnalysisResult",
    "CarbonFootprint",
    "DetectedObject",
    "ExternalCallError",
    "ObjectMetadata",
    "ParseError",
    "ResponseFormatError",
    "ShapeError",
    "Source",
    "normalize_payload",
    "normalize_response",
]
