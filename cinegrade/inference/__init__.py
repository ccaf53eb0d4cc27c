"""프리뷰 렌더링 및 LUT export 모듈."""

from cinegrade.inference.export import LutFormat, export_lut, serialize_cube
from cinegrade.inference.preview import render_preview

__all__ = ["LutFormat", "export_lut", "serialize_cube", "render_preview"]
