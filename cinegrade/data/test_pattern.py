"""검증용 표준 색상 차트 생성.

휘도 램프, 원색/보색 바, 피부톤 견본으로 구성된 고정 레이아웃 이미지.
외부 입력이 없으므로 항상 같은 결과를 만든다.
"""

import numpy as np
from PIL import Image as PILImage
from PIL import ImageDraw

CHART_WIDTH = 800
CHART_HEIGHT = 600
BACKGROUND = "#1a1a1a"
LABEL_COLOR = "#999999"

COLOR_BARS = ["#FF0000", "#FFFF00", "#00FF00", "#00FFFF", "#0000FF", "#FF00FF"]
SKIN_TONES = ["#5d4037", "#8d5524", "#c68642", "#e0ac69", "#f1c27d", "#ffdbac"]

# (x0, y0, width, height)
RAMP_BOX = (50, 50, 700, 150)
BARS_BOX = (50, 250, 700, 150)
SKIN_BOX = (50, 450, 700, 100)


def _draw_swatches(draw: ImageDraw.ImageDraw, colors: list[str], box: tuple[int, int, int, int]) -> None:
    x0, y0, width, height = box
    for i, color in enumerate(colors):
        left = x0 + (i * width) // len(colors)
        right = x0 + ((i + 1) * width) // len(colors)
        draw.rectangle([left, y0, right - 1, y0 + height - 1], fill=color)


def generate_test_pattern() -> np.ndarray:
    """표준 색상 차트 생성.

    Returns:
        차트 이미지 [600, 800, 3], uint8
    """
    img = PILImage.new("RGB", (CHART_WIDTH, CHART_HEIGHT), BACKGROUND)
    draw = ImageDraw.Draw(img)

    draw.text((RAMP_BOX[0], RAMP_BOX[1] - 14), "Luminance Ramp", fill=LABEL_COLOR)
    draw.text((BARS_BOX[0], BARS_BOX[1] - 14), "Standard Saturation", fill=LABEL_COLOR)
    draw.text((SKIN_BOX[0], SKIN_BOX[1] - 14), "Skin Tone Reference", fill=LABEL_COLOR)

    # 원색/보색 바
    _draw_swatches(draw, COLOR_BARS, BARS_BOX)

    # 피부톤
    _draw_swatches(draw, SKIN_TONES, SKIN_BOX)

    chart = np.array(img, dtype=np.uint8)

    # 휘도 램프 (밴딩/클리핑 확인용): 열 단위로 0 -> 255 선형 보간
    x0, y0, width, height = RAMP_BOX
    ramp = np.linspace(0.0, 255.0, width).round().astype(np.uint8)
    chart[y0 : y0 + height, x0 : x0 + width, :] = ramp[np.newaxis, :, np.newaxis]
    return chart
