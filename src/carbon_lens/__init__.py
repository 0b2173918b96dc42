"""
Carbon Lens - photo object detection with carbon-footprint estimates from a multimodal LLM.
"""

__version__ = "0.1.0"

from .analysis.errors import AnalysisError, ExternalCallError, ResponseFormatError
from .pipeline import analyze, run_pipeline

__all__ = [
    "AnalysisError",
    "ExternalCallError",
    "ResponseFormatError",
    "analyze",
    "run_pipeline",
    "__version__",
]
