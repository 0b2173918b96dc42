import base64

import cv2
import numpy as np
import pytest

from carbon_lens.llm_input.input_builder import (
    ImageInput,
    build_image_input,
    decode_image_b64,
    encode_jpeg_b64,
    load_image_b64,
)
from carbon_lens.llm_input.quality_checks import run_quality_checks


class TestDecodeImageB64:
    def test_decodes_plain_base64(self, image_b64):
        image = decode_image_b64(image_b64)
        assert image.shape == (400, 600, 3)

    def test_accepts_data_url(self, image_b64):
        image = decode_image_b64(f"data:image/jpeg;base64,{image_b64}")
        assert image.shape[:2] == (400, 600)

    def test_rejects_non_base64(self):
        with pytest.raises(ValueError, match="base64"):
            decode_image_b64("!!! not base64 !!!")

    def test_rejects_non_image_bytes(self):
        with pytest.raises(ValueError, match="decoded"):
            decode_image_b64(base64.b64encode(b"hello world").decode("utf-8"))

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="Empty"):
            decode_image_b64("")


class TestBuildImageInput:
    def test_downsizes_keeping_aspect(self, image_b64):
        image = build_image_input(image_b64, max_side=300)

        assert isinstance(image, ImageInput)
        assert (image.width, image.height) == (300, 200)
        assert (image.original_width, image.original_height) == (600, 400)
        assert image.mime_type == "image/jpeg"

    def test_small_image_not_upscaled(self, image_b64):
        image = build_image_input(image_b64, max_side=2048)
        assert (image.width, image.height) == (600, 400)

    def test_payload_is_decodable_jpeg(self, image_b64):
        image = build_image_input(image_b64, max_side=300)
        decoded = decode_image_b64(image.data_b64)
        assert decoded.shape[:2] == (200, 300)
        assert image.to_bytes()[:2] == b"\xff\xd8"

    def test_data_url(self, image_b64):
        image = build_image_input(image_b64)
        assert image.data_url.startswith("data:image/jpeg;base64,")

    def test_png_input_reencoded_as_jpeg(self, noise_image):
        ok, buf = cv2.imencode(".png", noise_image)
        assert ok
        image = build_image_input(base64.b64encode(buf.tobytes()).decode("utf-8"))
        assert image.to_bytes()[:2] == b"\xff\xd8"


class TestEncodeJpeg:
    def test_quality_is_clamped(self, noise_image):
        assert decode_image_b64(encode_jpeg_b64(noise_image, jpeg_quality=500)).shape == noise_image.shape


class TestLoadImageB64:
    def test_reads_file(self, tmp_path, noise_image):
        path = tmp_path / "photo.jpg"
        cv2.imwrite(str(path), noise_image)
        assert decode_image_b64(load_image_b64(str(path))).shape == noise_image.shape

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_image_b64(str(tmp_path / "nope.jpg"))


class TestQualityChecks:
    def test_noise_image_passes(self, noise_image):
        report = run_quality_checks(noise_image)
        assert report.warnings == []
        assert report.label == "good"
        assert report.stats["width"] == 600

    def test_black_image_warns(self):
        report = run_quality_checks(np.zeros((400, 400, 3), dtype=np.uint8))
        assert any("too dark" in w for w in report.warnings)
        assert any("blurry" in w for w in report.warnings)
        assert report.label == "poor"

    def test_white_image_warns(self):
        report = run_quality_checks(np.full((400, 400, 3), 255, dtype=np.uint8))
        assert any("too bright" in w for w in report.warnings)

    def test_low_resolution_warns(self, noise_image):
        report = run_quality_checks(noise_image[:50, :50])
        assert any("Low resolution" in w for w in report.warnings)
