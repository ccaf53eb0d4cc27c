""".cube 파일 파서.

3D LUT 파일(.cube)을 읽고 쓰는 유틸리티.
Adobe/DaVinci Resolve 호환 포맷을 지원한다.
"""

from pathlib import Path

import numpy as np

from cinegrade.constants import CUBE_DECIMALS
from cinegrade.utils.lut import create_identity_lut, lut_to_rows, rows_to_lut


def _sanitize_title(title: str) -> str:
    """TITLE 헤더에 들어갈 수 없는 따옴표/개행 제거."""
    return " ".join(str(title).replace('"', "").split())


class CubeParser:
    """.cube 파일 파서.

    .cube 파일의 읽기(read/loads)와 쓰기(write/dumps)를 담당한다.
    LUT 크기를 자동 감지하며, 메타데이터(TITLE, DOMAIN_MIN, DOMAIN_MAX)를 처리한다.
    """

    def __init__(self) -> None:
        self.title: str = ""
        self.size: int = 0
        self.domain_min: np.ndarray = np.array([0.0, 0.0, 0.0], dtype=np.float64)
        self.domain_max: np.ndarray = np.array([1.0, 1.0, 1.0], dtype=np.float64)
        self.lut: np.ndarray | None = None

    def read(self, path: str | Path) -> np.ndarray:
        """Read a .cube file and return the 3D LUT as a numpy array.

        Args:
            path: .cube 파일 경로

        Returns:
            3D LUT 배열 [size, size, size, 3] ([r, g, b] 인덱싱)

        Raises:
            FileNotFoundError: 파일이 존재하지 않을 때
            ValueError: 파일 형식이 올바르지 않을 때
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"파일을 찾을 수 없음: {path}")
        return self.loads(path.read_text(encoding="utf-8"))

    def loads(self, text: str) -> np.ndarray:
        """.cube 텍스트 파싱.

        .cube 파일 형식:
        - 헤더: TITLE, LUT_3D_SIZE, DOMAIN_MIN, DOMAIN_MAX
        - 데이터: R이 가장 빠르게, B가 가장 느리게 변하는 순서로 나열된 RGB 값
        """
        data_rows: list[list[float]] = []
        size: int = 0

        for line in text.splitlines():
            line = line.strip()

            # 빈 줄 및 주석 건너뜀
            if not line or line.startswith("#"):
                continue

            keyword = line.split()[0].upper()
            if keyword == "TITLE":
                self.title = line[5:].strip().strip('"')

            elif keyword == "LUT_3D_SIZE":
                size = int(line.split()[-1])
                self.size = size

            elif keyword == "DOMAIN_MIN":
                vals = line.split()[1:]
                self.domain_min = np.array([float(v) for v in vals], dtype=np.float64)

            elif keyword == "DOMAIN_MAX":
                vals = line.split()[1:]
                self.domain_max = np.array([float(v) for v in vals], dtype=np.float64)

            else:
                # 데이터 행: "R G B"
                parts = line.split()
                if len(parts) == 3:
                    try:
                        data_rows.append([float(p) for p in parts])
                    except ValueError:
                        # 숫자가 아닌 행은 건너뜀 (알 수 없는 키워드 등)
                        pass

        if size == 0:
            raise ValueError("LUT_3D_SIZE 헤더를 찾을 수 없음")

        expected = size**3
        if len(data_rows) != expected:
            raise ValueError(f"데이터 행 수 불일치: 예상 {expected}, 실제 {len(data_rows)}")

        self.lut = rows_to_lut(np.array(data_rows, dtype=np.float64), size)
        return self.lut

    def dumps(self, lut: np.ndarray, title: str = "CineGrade LUT") -> str:
        """3D LUT를 .cube 텍스트로 직렬화.

        Args:
            lut: 3D LUT 배열 [size, size, size, 3] ([r, g, b] 인덱싱), 범위 [0, 1]
            title: LUT 제목 (메타데이터)

        Returns:
            헤더 + size^3 개 데이터 행
        """
        lut = np.asarray(lut, dtype=np.float64)
        if (
            lut.ndim != 4
            or lut.shape[3] != 3
            or not lut.shape[0] == lut.shape[1] == lut.shape[2]
        ):
            raise ValueError(f"LUT shape 오류: {lut.shape}, [size, size, size, 3]이어야 함")

        size = lut.shape[0]
        header = [
            f'TITLE "{_sanitize_title(title)}"',
            "",
            f"LUT_3D_SIZE {size}",
            "",
            "DOMAIN_MIN 0.0 0.0 0.0",
            "DOMAIN_MAX 1.0 1.0 1.0",
            "",
        ]

        # R 가장 빠름 -> G -> B 가장 느림. 고정 소수점, 지수 표기 없음.
        rows = np.clip(lut_to_rows(lut), 0.0, 1.0) + 0.0
        fmt = f"{{:.{CUBE_DECIMALS}f}} {{:.{CUBE_DECIMALS}f}} {{:.{CUBE_DECIMALS}f}}"
        body = [fmt.format(r, g, b) for r, g, b in rows.tolist()]
        return "\n".join(header + body) + "\n"

    def write(
        self,
        lut: np.ndarray,
        path: str | Path,
        title: str = "CineGrade LUT",
    ) -> None:
        """Write a 3D LUT to a .cube file.

        Args:
            lut: 3D LUT 배열 [size, size, size, 3], 범위 [0, 1]
            path: 출력 .cube 파일 경로
            title: LUT 제목 (메타데이터)
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.dumps(lut, title=title), encoding="utf-8")

    @staticmethod
    def create_identity_lut(size: int = 33) -> np.ndarray:
        """항등 LUT 생성 (입력 = 출력)."""
        return create_identity_lut(size)
