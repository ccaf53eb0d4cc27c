"""이미지 I/O 헬퍼."""

import base64
import io
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image as PILImage

from cinegrade.constants import UPLOAD_JPEG_QUALITY, UPLOAD_MAX_WIDTH


def load_image(
    path: str | Path,
    size: Optional[tuple[int, int]] = None,
    as_float: bool = True,
) -> np.ndarray:
    """이미지 파일 로드.

    Args:
        path: 이미지 파일 경로
        size: 리사이즈 크기 (H, W). None이면 원본 크기 유지
        as_float: True이면 [0, 1] float32, False이면 [0, 255] uint8

    Returns:
        이미지 배열 [H, W, 3] RGB

    Raises:
        FileNotFoundError: 파일이 존재하지 않을 때
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"이미지 파일을 찾을 수 없음: {path}")

    img = PILImage.open(path).convert("RGB")  # 항상 RGB로 변환

    if size is not None:
        h, w = size
        img = img.resize((w, h), PILImage.BICUBIC)

    arr = np.asarray(img)  # [H, W, 3], uint8

    if as_float:
        return arr.astype(np.float32) / 255.0
    return arr.astype(np.uint8)


def decode_image(data: bytes) -> np.ndarray:
    """인코딩된 이미지 바이트(PNG/JPEG 등) -> [H, W, 3] uint8.

    Raises:
        ValueError: 이미지로 해석할 수 없을 때
    """
    try:
        img = PILImage.open(io.BytesIO(data))
        img.load()
    except (OSError, SyntaxError) as exc:
        raise ValueError(f"이미지 디코딩 실패: {exc}") from exc
    return np.asarray(img.convert("RGB"), dtype=np.uint8)


def to_uint8(image: np.ndarray) -> np.ndarray:
    """float [0, 1] 또는 uint8 이미지를 uint8로 변환."""
    if image.dtype == np.uint8:
        return image
    arr = np.clip(image, 0.0, 1.0)
    return (arr * 255.0).round().astype(np.uint8)


def encode_png(image: np.ndarray) -> bytes:
    """[H, W, 3] 이미지를 PNG 바이트로 인코딩."""
    buffer = io.BytesIO()
    PILImage.fromarray(to_uint8(np.asarray(image))).save(buffer, format="PNG")
    return buffer.getvalue()


def downscale_to_max_edge(image: np.ndarray, max_edge: int) -> np.ndarray:
    """긴 변이 max_edge를 넘으면 비율을 유지하며 축소.

    Args:
        image: [H, W, 3], uint8
        max_edge: 긴 변 상한 (px)

    Returns:
        축소된 이미지 (필요 없으면 입력 그대로)
    """
    h, w = image.shape[:2]
    longest = max(h, w)
    if longest <= max_edge:
        return image

    ratio = max_edge / longest
    new_w = max(1, round(w * ratio))
    new_h = max(1, round(h * ratio))
    img = PILImage.fromarray(image).resize((new_w, new_h), PILImage.BICUBIC)
    return np.asarray(img, dtype=np.uint8)


def to_jpeg_data_url(
    image: np.ndarray,
    max_width: int = UPLOAD_MAX_WIDTH,
    quality: int = UPLOAD_JPEG_QUALITY,
) -> str:
    """AI 서비스 전송용 JPEG data URL 생성.

    폭이 max_width를 넘으면 비율을 유지하며 축소한 뒤 JPEG로 압축한다.
    """
    img = PILImage.fromarray(to_uint8(np.asarray(image)))
    if img.width > max_width:
        new_h = round(img.height * max_width / img.width)
        img = img.resize((max_width, max(1, new_h)), PILImage.BICUBIC)

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=quality)
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"


def decode_data_url(data_url: str) -> np.ndarray:
    """"data:image/...;base64,..." 또는 순수 base64 문자열 -> [H, W, 3] uint8."""
    payload = data_url.split(",", 1)[1] if data_url.startswith("data:") else data_url
    try:
        raw = base64.b64decode(payload, validate=True)
    except ValueError as exc:
        raise ValueError(f"base64 디코딩 실패: {exc}") from exc
    return decode_image(raw)


def save_image(image: np.ndarray, path: str | Path) -> None:
    """이미지 파일 저장.

    Args:
        image: 이미지 배열 [H, W, 3], float32 [0, 1] 또는 uint8 [0, 255]
        path: 출력 파일 경로
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.fromarray(to_uint8(np.asarray(image))).save(path)
