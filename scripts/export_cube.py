"""그레이드 파라미터 JSON을 .cube / Hald PNG LUT로 내보내기.

Usage:
    python scripts/export_cube.py --params grade.json --output warm_vintage --size 33
    python scripts/export_cube.py --params grade.json --output warm_vintage --format png --size 64

grade.json 예시:
    {"contrast": 0.2, "saturation": 1.1, "temperature": 0.3, "tint": 0.0,
     "shadowColor": [0.4, 0.5, 0.6], "highlightColor": [0.6, 0.5, 0.4],
     "description": "Warm vintage"}
"""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="그레이드 파라미터를 LUT 파일로 내보내기")
    parser.add_argument("--params", type=str, required=True, help="그레이드 파라미터 JSON 경로")
    parser.add_argument("--output", type=str, required=True,
                        help="출력 파일 경로 (확장자는 포맷에 맞게 보정됨)")
    parser.add_argument("--format", type=str, default="cube", choices=["cube", "png"],
                        help="cube: 텍스트 3D LUT, png: Hald 이미지")
    parser.add_argument("--size", type=int, default=33,
                        help="LUT 그리드 크기 (2~256). 클수록 정밀하지만 파일이 커짐")
    return parser.parse_args()


def main() -> None:
    """Export 메인 함수."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    args = parse_args()

    from cinegrade.errors import LutSerializationError
    from cinegrade.grading.params import GradeParameters
    from cinegrade.inference.export import export_lut, write_export

    with open(args.params, encoding="utf-8") as f:
        params = GradeParameters.from_mapping(json.load(f))

    output = Path(args.output)
    logger.info(f"파라미터: {params.to_dict()}")
    logger.info(f"출력: {output} (포맷: {args.format}, LUT 크기: {args.size}x{args.size}x{args.size})")

    try:
        result = export_lut(params, output.name, args.format, args.size)
    except LutSerializationError as e:
        logger.error(f"Export 실패: {e.message}")
        sys.exit(1)

    path = write_export(result, output.parent)
    logger.info(f"Export 완료: {path} ({len(result.content)} bytes)")


if __name__ == "__main__":
    main()
