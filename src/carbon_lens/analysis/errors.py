from __future__ import annotations


class AnalysisError(RuntimeError):
    """
    Base class for every failure surfaced by an image analysis.
    """


class ResponseFormatError(AnalysisError):
    """
    The model answered, but the answer cannot be turned into an AnalysisResult.
    """


class ParseError(ResponseFormatError):
    """Raw text is not, and does not contain, a JSON object."""


class ShapeError(ResponseFormatError):
    """A required sub-structure is absent or has the wrong type."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class ExternalCallError(AnalysisError):
    """
    The model invocation itself failed (network, auth, quota...).
    The original exception is chained as __cause__.
    """

    def __init__(self, backend: str, message: str):
        super().__init__(f"[{backend}] {message}")
        self.backend = backend
