import base64
from datetime import datetime, timezone

import cv2
import numpy as np
import pytest

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


def encode_image_b64(image: np.ndarray) -> str:
    ok, buf = cv2.imencode(".jpg", image)
    assert ok
    return base64.b64encode(buf.tobytes()).decode("utf-8")


@pytest.fixture
def noise_image():
    rng = np.random.default_rng(0)
    return rng.integers(0, 256, size=(400, 600, 3), dtype=np.uint8)


@pytest.fixture
def image_b64(noise_image):
    return encode_image_b64(noise_image)
