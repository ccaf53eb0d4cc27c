"""공용 상수.

LUT 그리드 크기, 프리뷰 해상도 상한, 색 보정 단계별 계수를 한곳에 모은다.
.cube / Hald 두 시리얼라이저는 반드시 같은 그리드 크기를 사용해야 한다.
"""

# LUT 그리드 (.cube 와 Hald PNG가 공유)
DEFAULT_GRID_SIZE = 33
MIN_GRID_SIZE = 2
MAX_GRID_SIZE = 256

# .cube 데이터 행 소수점 자릿수
CUBE_DECIMALS = 6

# 프리뷰 긴 변 상한 (px)
PREVIEW_MAX_EDGE = 2048

# AI 서비스로 보내기 전 이미지 축소 폭 및 JPEG 품질
UPLOAD_MAX_WIDTH = 800
UPLOAD_JPEG_QUALITY = 70

# Rec.709 휘도 계수
LUMA_R = 0.2126
LUMA_G = 0.7152
LUMA_B = 0.0722

# 화이트 밸런스: temperature / tint = ±1 일 때의 채널 바이어스
TEMPERATURE_SCALE = 0.1
TINT_SCALE = 0.1

# 스플릿 토닝 강도: (tone - 0.5) 에 곱해지는 계수
SPLIT_TONE_STRENGTH = 0.3

# 중립 회색 (스플릿 토닝 no-op)
NEUTRAL_GRAY = (0.5, 0.5, 0.5)

# 표시 이름
DISPLAY_NAME_MAX_LENGTH = 20
DEFAULT_DISPLAY_BASE = "CineGrade"
REFERENCE_DISPLAY_BASE = "Ref_Match"
REFERENCE_PROVENANCE = "Reference Match"
