"""그레이드 적용 CLI 스크립트.

Usage:
    python scripts/apply.py --params grade.json --input photo.jpg --output result.png
    python scripts/apply.py --params grade.json --chart --output chart.png
    python scripts/apply.py --cube warm_vintage.cube --input photo.jpg --output result.png
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="이미지에 색 보정 그레이드 적용")
    parser.add_argument("--params", type=str, default=None,
                        help="그레이드 파라미터 JSON 경로")
    parser.add_argument("--cube", type=str, default=None,
                        help=".cube 파일 경로 (파라미터 대신 LUT 보간 적용)")
    parser.add_argument("--input", type=str, default=None,
                        help="입력 이미지 경로")
    parser.add_argument("--chart", action="store_true",
                        help="입력 이미지 대신 내장 테스트 패턴 사용")
    parser.add_argument("--output", type=str, required=True,
                        help="출력 이미지 경로")
    parser.add_argument("--max-edge", type=int, default=2048,
                        help="긴 변 상한 (px, 기본값: 2048)")
    parser.add_argument("--workers", type=int, default=1,
                        help="병렬 스레드 수 (기본값: 1)")
    return parser.parse_args()


def main() -> None:
    """그레이드 적용 메인 함수."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    args = parse_args()

    if (args.params is None) == (args.cube is None):
        print("오류: --params 또는 --cube 중 하나만 지정해야 합니다.")
        sys.exit(1)
    if args.input is None and not args.chart:
        print("오류: --input 또는 --chart 중 하나를 지정해야 합니다.")
        sys.exit(1)

    from cinegrade.data.test_pattern import generate_test_pattern
    from cinegrade.utils.color import mean_delta_e
    from cinegrade.utils.io import downscale_to_max_edge, load_image, save_image

    # 입력 이미지 로드
    if args.chart:
        image = generate_test_pattern()
        logger.info("테스트 패턴 사용")
    else:
        logger.info(f"이미지 로드: {args.input}")
        image = load_image(args.input, as_float=False)  # uint8로 로드
    logger.info(f"이미지 크기: {image.shape}")

    if args.params is not None:
        from cinegrade.grading.params import GradeParameters
        from cinegrade.inference.preview import render_preview

        with open(args.params, encoding="utf-8") as f:
            params = GradeParameters.from_mapping(json.load(f))

        logger.info("그레이드 적용 중...")
        before = downscale_to_max_edge(image, args.max_edge)
        result = render_preview(image, params, max_edge=args.max_edge, workers=args.workers)
    else:
        from cinegrade.data.cube_parser import CubeParser
        from cinegrade.utils.lut import apply_lut

        logger.info(f"LUT 로드: {args.cube}")
        lut = CubeParser().read(args.cube)
        before = downscale_to_max_edge(image, args.max_edge)
        result = apply_lut(before.astype("float64") / 255.0, lut)

    logger.info(f"평균 ΔE (CIE76): {mean_delta_e(before, result):.2f}")

    # 결과 저장
    save_image(result, args.output)
    logger.info(f"결과 저장 완료: {args.output}")


if __name__ == "__main__":
    main()
