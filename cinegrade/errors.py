"""CineGrade 예외 계층.

- 파라미터 범위 위반은 예외가 아니다 (GradeParameters 생성 시 clamp).
- LUT 직렬화 실패는 해당 export 호출에만 치명적이다.
- 세션 상태 오용은 호출자 계약 위반으로 보고한다.
- AI 생성 실패는 클라이언트 내부에서 fallback 파라미터로 복구된다.
"""


class CineGradeError(Exception):
    """Base exception for all CineGrade errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LutSerializationError(CineGradeError):
    """LUT 직렬화 실패 (지원하지 않는 그리드 크기, 포맷, 이미지 인코딩 오류)."""

    pass


class InvalidSessionStateError(CineGradeError):
    """세션 상태 오용 (활성 버전 없이 export, 알 수 없는 버전 id)."""

    pass


class GenerationError(CineGradeError):
    """AI 그레이딩 서비스 호출 실패. generate_grade 밖으로 전파되지 않는다."""

    pass
