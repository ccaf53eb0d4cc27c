"""
cinegrade - AI colour grade to 3D LUT engine.

색 보정 파라미터(GradeParameters)를 순수 함수로 적용하고,
같은 변환을 .cube / Hald PNG LUT 파일로 샘플링한다.

Example:
    >>> from cinegrade import GradeParameters, GradeSession, export_lut
    >>> session = GradeSession()
    >>> version = session.append(GradeParameters(contrast=0.2), "Warm vintage")
    >>> result = export_lut(version.params, version.display_name, "cube")
    >>> result.filename
    'Warm_vintage_v1.cube'
"""

__version__ = "0.1.0"

from cinegrade.grading.params import GradeParameters
from cinegrade.grading.session import GradeSession, GradeVersion, GradingMode
from cinegrade.grading.transform import apply_grade, transform_rgb
from cinegrade.data.cube_parser import CubeParser
from cinegrade.data.hald import generate_hald_lut, serialize_hald
from cinegrade.data.test_pattern import generate_test_pattern
from cinegrade.inference.export import LutFormat, export_lut, serialize_cube
from cinegrade.inference.preview import render_preview

__all__ = [
    "__version__",
    "GradeParameters",
    "GradeSession",
    "GradeVersion",
    "GradingMode",
    "apply_grade",
    "transform_rgb",
    "CubeParser",
    "generate_hald_lut",
    "serialize_hald",
    "generate_test_pattern",
    "LutFormat",
    "export_lut",
    "serialize_cube",
    "render_preview",
]
