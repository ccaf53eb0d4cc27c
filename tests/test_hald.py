"""Hald 래스터 LUT 테스트."""

import io

import pytest
import numpy as np
from PIL import Image as PILImage

from cinegrade.data.hald import (
    decode_pixel_index,
    encode_grid_index,
    extract_lut_from_hald,
    generate_hald_lut,
    hald_edge,
    pixel_position,
    serialize_hald,
)
from cinegrade.errors import LutSerializationError
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.lut import sample_grade_lut


class TestLayout:
    """픽셀 배치 테스트."""

    @pytest.mark.parametrize("n, edge", [(2, 3), (3, 6), (4, 8), (16, 64), (33, 190), (64, 512)])
    def test_edge(self, n, edge):
        """E = ceil(sqrt(N^3))."""
        assert hald_edge(n) == edge

    def test_decode_pixel_index(self):
        assert decode_pixel_index(0, 4) == (0, 0, 0)
        assert decode_pixel_index(1, 4) == (1, 0, 0)
        assert decode_pixel_index(4, 4) == (0, 1, 0)
        assert decode_pixel_index(16, 4) == (0, 0, 1)
        assert decode_pixel_index(63, 4) == (3, 3, 3)

    def test_encode_inverts_decode(self):
        n = 5
        for p in range(0, n**3, 7):
            assert encode_grid_index(*decode_pixel_index(p, n), n) == p

    def test_padding_index_rejected(self):
        with pytest.raises(ValueError):
            decode_pixel_index(8, 2)

    def test_pixel_position(self):
        """p = y * E + x."""
        assert pixel_position(7, 2) == (1, 2)


class TestGenerate:
    """Hald 생성 테스트."""

    def test_neutral_pixels(self):
        """중립 파라미터 N=2: 픽셀 p 는 항등 입력의 8비트 값."""
        hald = generate_hald_lut(GradeParameters.neutral(), 2)
        assert hald.shape == (3, 3, 3)
        assert hald.dtype == np.uint8
        np.testing.assert_array_equal(hald[0, 0], [0, 0, 0])
        np.testing.assert_array_equal(hald[0, 1], [255, 0, 0])
        np.testing.assert_array_equal(hald[0, 2], [0, 255, 0])
        np.testing.assert_array_equal(hald[2, 1], [255, 255, 255])

    def test_padding_is_black(self):
        """p >= N^3 인 꼬리 픽셀은 검정."""
        hald = generate_hald_lut(GradeParameters(contrast=-0.5, temperature=0.5), 3)
        flat = hald.reshape(-1, 3)
        assert (flat[27:] == 0).all()

    def test_matches_cube_samples(self):
        """Hald 픽셀 = 같은 그리드 샘플의 8비트 양자화."""
        params = GradeParameters(contrast=0.4, saturation=1.5, highlight_color=(0.7, 0.5, 0.3))
        n = 6
        recovered = extract_lut_from_hald(generate_hald_lut(params, n), n)
        np.testing.assert_allclose(recovered, sample_grade_lut(params, n), atol=0.5 / 255 + 1e-6)

    def test_unsupported_grid_size(self):
        with pytest.raises(LutSerializationError):
            generate_hald_lut(GradeParameters.neutral(), 1)


class TestSerialize:
    """PNG 인코딩 테스트."""

    def test_png_bytes(self):
        data = serialize_hald(GradeParameters(tint=0.3), 4)
        assert data.startswith(b"\x89PNG")
        img = PILImage.open(io.BytesIO(data))
        assert img.size == (8, 8)
        assert img.mode == "RGB"

    def test_extract_rejects_wrong_size(self):
        with pytest.raises(ValueError):
            extract_lut_from_hald(np.zeros((4, 4, 3), dtype=np.uint8), 2)
