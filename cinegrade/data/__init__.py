"""LUT 파일 포맷 및 검증용 차트 모듈."""

from cinegrade.data.cube_parser import CubeParser
from cinegrade.data.hald import extract_lut_from_hald, generate_hald_lut, serialize_hald
from cinegrade.data.test_pattern import generate_test_pattern

__all__ = [
    "CubeParser",
    "extract_lut_from_hald",
    "generate_hald_lut",
    "serialize_hald",
    "generate_test_pattern",
]
