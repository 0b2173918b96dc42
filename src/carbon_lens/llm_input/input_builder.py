from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np

_DATA_URL_RE = re.compile(r"^data:[\w/+.-]+;base64,", re.IGNORECASE)


@dataclass(frozen=True)
class ImageInput:
    """
    The image exactly as it is sent to the model: JPEG, base64 encoded.
    """
    data_b64: str
    mime_type: str
    width: int
    height: int
    original_width: int
    original_height: int

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data_b64}"

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data_b64)


def decode_image_b64(image_b64: str) -> np.ndarray:
    """
    Decode a base64 image (optionally a data: URL, as browsers produce)
    into a BGR array.

    Raises:
        ValueError: if the payload is not base64 or not a decodable image
    """
    payload = _DATA_URL_RE.sub("", (image_b64 or "").strip())
    if not payload:
        raise ValueError("Empty image payload.")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Image payload is not valid base64: {e}") from e

    buf = np.frombuffer(raw, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Image payload could not be decoded as an image.")
    return image


def _resize_keep_aspect(image_bgr: np.ndarray, max_side: int) -> np.ndarray:
    """
    Resize so that max(width,height) == max_side, preserving aspect ratio.
    If max_side <= 0, or already smaller, return original.
    """
    if max_side <= 0:
        return image_bgr

    h, w = image_bgr.shape[:2]
    m = max(h, w)
    if m <= max_side:
        return image_bgr

    scale = max_side / float(m)
    new_w = max(1, int(round(w * scale)))
    new_h = max(1, int(round(h * scale)))
    return cv2.resize(image_bgr, (new_w, new_h), interpolation=cv2.INTER_AREA)


def encode_jpeg_b64(image_bgr: np.ndarray, jpeg_quality: int = 90) -> str:
    params = [int(cv2.IMWRITE_JPEG_QUALITY), int(max(0, min(100, jpeg_quality)))]
    ok, buf = cv2.imencode(".jpg", image_bgr, params)
    if not ok:
        raise ValueError("Failed to encode image as JPEG.")
    return base64.b64encode(buf.tobytes()).decode("utf-8")


def build_image_input(
    image_b64: str,
    *,
    max_side: int = 1024,
    jpeg_quality: int = 90,
) -> ImageInput:
    """
    Normalize an uploaded/captured image for the model:
    decode, downsize to max_side, re-encode as JPEG.
    """
    image = decode_image_b64(image_b64)
    orig_h, orig_w = image.shape[:2]

    resized = _resize_keep_aspect(image, max_side)
    h, w = resized.shape[:2]

    return ImageInput(
        data_b64=encode_jpeg_b64(resized, jpeg_quality),
        mime_type="image/jpeg",
        width=int(w),
        height=int(h),
        original_width=int(orig_w),
        original_height=int(orig_h),
    )


def load_image_b64(image_path: str) -> str:
    p = Path(image_path)
    if not p.exists():
        raise FileNotFoundError(f"Image not found: {image_path}")
    with p.open("rb") as f:
        return base64.b64encode(f.read()).decode("utf-8")
