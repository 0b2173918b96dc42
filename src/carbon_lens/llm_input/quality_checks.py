from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import cv2
import numpy as np


@dataclass(frozen=True)
class QualityReport:
    warnings: List[str]
    stats: Dict[str, float]

    @property
    def label(self) -> str:
        """Short hint for the prompt: "good" or "poor"."""
        return "poor" if self.warnings else "good"


def _mean_brightness(image_bgr: np.ndarray) -> float:
    gray = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2GRAY)
    return float(np.mean(gray))


def _blur_score_laplacian(image_bgr: np.ndarray) -> float:
    """
    Higher = sharper (heuristic). Very low values mean blurry.
    """
    gray = cv2.cvtColor(image_bgr, cv2.COLOR_BGR2GRAY)
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())


def run_quality_checks(
    image_bgr: np.ndarray,
    *,
    min_resolution: Tuple[int, int] = (160, 160),
    brightness_range: Tuple[float, float] = (20.0, 235.0),
    min_blur_score: float = 20.0,
) -> QualityReport:
    """
    Lightweight sanity checks on a photo before it is sent.
    These only ever warn; a poor photo is still analyzed.
    """
    warnings: List[str] = []
    h, w = image_bgr.shape[:2]
    brightness = _mean_brightness(image_bgr)
    blur = _blur_score_laplacian(image_bgr)

    if w < min_resolution[0] or h < min_resolution[1]:
        warnings.append(f"Low resolution: {w}x{h} < {min_resolution[0]}x{min_resolution[1]}")
    if brightness < brightness_range[0]:
        warnings.append(f"Image too dark: mean brightness {brightness:.1f}")
    elif brightness > brightness_range[1]:
        warnings.append(f"Image too bright: mean brightness {brightness:.1f}")
    if blur < min_blur_score:
        warnings.append(f"Image may be blurry: laplacian variance {blur:.1f}")

    return QualityReport(
        warnings=warnings,
        stats={
            "width": float(w),
            "height": float(h),
            "mean_brightness": brightness,
            "blur_score": blur,
        },
    )
