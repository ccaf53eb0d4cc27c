"""AI 그레이딩 서비스 클라이언트.

소스 이미지(+ 레퍼런스 이미지 또는 스타일 프롬프트)를 외부 AI 서비스로 보내
GradeParameters를 받아온다. 응답은 pydantic 모델로 검증한 뒤 clamp 된
GradeParameters로 변환한다.

요청 형식 (서버 프록시 프로토콜):
    POST <endpoint>
    {"action": "grade" | "suggest", "lang": "en" | "zh", "payload": {...}}

실패(네트워크, HTTP 오류, 잘못된 JSON, 스키마 불일치)는 호출자에게 예외로
전파하지 않고 중립 fallback 파라미터 / 기본 추천 목록으로 복구한다.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import httpx
import numpy as np
from pydantic import BaseModel, Field, ValidationError

from cinegrade.errors import GenerationError
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.io import to_jpeg_data_url

logger = logging.getLogger(__name__)


class Language(str, Enum):
    """응답 description / 추천 스타일 이름 언어."""

    EN = "en"
    ZH = "zh"


_FAILURE_PREFIX = {
    Language.EN: "Generation Failed: {reason}",
    Language.ZH: "生成失败: {reason}",
}

_NETWORK_ERROR = {
    Language.EN: "Network Error: Could not reach server",
    Language.ZH: "网络错误: 无法连接服务器",
}

DEFAULT_SUGGESTIONS = {
    Language.EN: ["Cinematic High Contrast", "Warm Vintage", "Cool Moody", "Natural Enhancer"],
    Language.ZH: ["电影高对比", "复古胶片暖调", "冷调情绪", "自然增强"],
}


class GradingResponse(BaseModel):
    """AI 서비스의 grade 응답 스키마. 모든 필드 필수."""

    contrast: float
    saturation: float
    temperature: float
    tint: float
    shadows_color: list[float] = Field(alias="shadowsColor", min_length=3, max_length=3)
    highlights_color: list[float] = Field(alias="highlightsColor", min_length=3, max_length=3)
    description: str

    class Config:
        populate_by_name = True

    def to_params(self) -> GradeParameters:
        """범위 밖 값은 clamp 된다."""
        return GradeParameters(
            contrast=self.contrast,
            saturation=self.saturation,
            temperature=self.temperature,
            tint=self.tint,
            shadow_color=tuple(self.shadows_color),
            highlight_color=tuple(self.highlights_color),
            description=self.description,
        )


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


@dataclass
class GradeRequest:
    """그레이드 생성 요청.

    Attributes:
        source_image: 소스 이미지 [H, W, 3], uint8 또는 float [0, 1]
        reference_image: 레퍼런스 이미지 (reference 모드)
        prompt: 스타일 프롬프트 (prompt 모드)
        language: description 언어
    """

    source_image: np.ndarray
    reference_image: Optional[np.ndarray] = None
    prompt: Optional[str] = None
    language: Language = Language.EN


def failure_message(reason: str, language: Language = Language.EN) -> str:
    return _FAILURE_PREFIX[Language(language)].format(reason=reason)


class GradingClient:
    """httpx 기반 AI 그레이딩 서비스 클라이언트.

    generate_grade / suggest_styles 는 절대 예외를 던지지 않는다.
    """

    def __init__(
        self,
        endpoint: Optional[str],
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.endpoint = endpoint
        self.api_key = api_key
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @staticmethod
    def _encode(image: np.ndarray) -> str:
        """이미지 -> JPEG data URL. 인코딩 실패는 GenerationError."""
        try:
            return to_jpeg_data_url(image)
        except (ValueError, TypeError, OSError) as exc:
            raise GenerationError(f"Invalid image: {exc}") from exc

    def _post(self, action: str, language: Language, payload: Dict[str, Any]) -> Any:
        """서비스 호출 후 JSON 반환. 모든 실패는 GenerationError로 변환."""
        if not self.endpoint:
            raise GenerationError("Grading service is not configured")

        try:
            response = self._client.post(
                self.endpoint,
                json={"action": action, "lang": language.value, "payload": payload},
                headers=self._headers(),
            )
        except httpx.TransportError as exc:
            logger.warning(f"그레이딩 서비스 연결 실패: {exc}")
            raise GenerationError(_NETWORK_ERROR[language]) from exc
        except httpx.HTTPError as exc:
            # 본문 디코딩 실패 등
            logger.warning(f"그레이딩 서비스 응답 처리 실패: {exc}")
            raise GenerationError(str(exc) or type(exc).__name__) from exc

        if response.is_error:
            reason = response.reason_phrase or f"HTTP {response.status_code}"
            try:
                body = response.json()
                if isinstance(body, dict) and body.get("error"):
                    reason = str(body["error"])
            except ValueError:
                pass
            raise GenerationError(reason)

        try:
            return response.json()
        except ValueError as exc:
            raise GenerationError("Malformed JSON response") from exc

    def generate_grade(self, request: GradeRequest) -> GradeParameters:
        """소스 이미지와 프롬프트/레퍼런스로 GradeParameters 생성.

        Returns:
            검증/clamp 된 GradeParameters. 실패 시 중립 파라미터 +
            description에 실패 사유.
        """
        language = Language(request.language)
        try:
            payload: Dict[str, Any] = {"sourceImage": self._encode(request.source_image)}
            if request.reference_image is not None:
                payload["referenceImage"] = self._encode(request.reference_image)
            if request.prompt:
                payload["prompt"] = request.prompt

            data = self._post("grade", language, payload)
            if not isinstance(data, dict):
                raise GenerationError("Malformed JSON response")
            params = GradingResponse.model_validate(data).to_params()
        except ValidationError as exc:
            logger.warning(f"그레이딩 응답 검증 실패: {exc.error_count()}개 오류")
            return GradeParameters.fallback(failure_message("Malformed response", language))
        except GenerationError as exc:
            logger.warning(f"그레이드 생성 실패, 중립 파라미터 사용: {exc.message}")
            return GradeParameters.fallback(failure_message(exc.message, language))

        logger.info(
            f"그레이드 생성 완료 (contrast={params.contrast:.2f}, "
            f"saturation={params.saturation:.2f}, temperature={params.temperature:.2f})"
        )
        return params

    def suggest_styles(
        self, image: np.ndarray, language: Language = Language.EN
    ) -> list[str]:
        """소스 이미지에 어울리는 스타일 이름 추천. 실패 시 기본 목록."""
        language = Language(language)
        try:
            data = self._post("suggest", language, {"image": self._encode(image)})
            suggestions = SuggestionsResponse.model_validate(data).suggestions
        except (GenerationError, ValidationError) as exc:
            logger.warning(f"스타일 추천 실패, 기본 목록 사용: {exc}")
            return list(DEFAULT_SUGGESTIONS[language])

        cleaned = [s.strip() for s in suggestions if s and s.strip()]
        return cleaned or list(DEFAULT_SUGGESTIONS[language])
