"""FastAPI 서비스 테스트 (TestClient + 의존성 override)."""

import base64

import numpy as np
import pytest
from fastapi.testclient import TestClient

from backend.api.dependencies import get_grading_client, get_store
from backend.core.store import SessionStore
from backend.main import app
from cinegrade.api.grading_client import Language
from cinegrade.grading.params import GradeParameters
from cinegrade.utils.io import encode_png


class FakeGradingClient:
    """고정 파라미터를 돌려주는 그레이딩 클라이언트."""

    def __init__(self):
        self.requests = []
        self.on_generate = None

    def generate_grade(self, request):
        self.requests.append(request)
        if self.on_generate is not None:
            self.on_generate()
        return GradeParameters(contrast=0.4, temperature=0.5, description="Warm look")

    def suggest_styles(self, image, language=Language.EN):
        return ["Look A", "Look B"] if language == Language.EN else ["风格"]


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def grading_client():
    return FakeGradingClient()


@pytest.fixture
def client(store, grading_client):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_grading_client] = lambda: grading_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def png_upload(width=64, height=48, value=100):
    data = encode_png(np.full((height, width, 3), value, dtype=np.uint8))
    return {"file": ("photo.png", data, "image/png")}


@pytest.fixture
def session_id(client):
    response = client.post("/v1/sessions", files=png_upload())
    assert response.status_code == 201
    return response.json()["session_id"]


def generate(client, session_id, prompt="Warm vintage film"):
    return client.post(f"/v1/sessions/{session_id}/grades", json={"mode": "prompt", "prompt": prompt})


class TestSessions:
    """세션 생성/조회/삭제 테스트."""

    def test_create(self, client):
        response = client.post("/v1/sessions", files=png_upload(width=80, height=30))
        body = response.json()
        assert response.status_code == 201
        assert (body["width"], body["height"]) == (80, 30)
        assert body["version_count"] == 0
        assert body["active_id"] is None

    def test_unsupported_type(self, client):
        response = client.post("/v1/sessions", files={"file": ("a.txt", b"hello", "text/plain")})
        assert response.status_code == 415

    def test_undecodable_image(self, client):
        response = client.post("/v1/sessions", files={"file": ("a.png", b"not an image", "image/png")})
        assert response.status_code == 400

    def test_unknown_session(self, client):
        assert client.get("/v1/sessions/missing").status_code == 404

    def test_delete(self, client, session_id):
        assert client.delete(f"/v1/sessions/{session_id}").status_code == 204
        assert client.get(f"/v1/sessions/{session_id}").status_code == 404
        assert client.delete(f"/v1/sessions/{session_id}").status_code == 404

    def test_replace_source_clears_history(self, client, session_id):
        generate(client, session_id)
        response = client.put(f"/v1/sessions/{session_id}/source", files=png_upload(width=20, height=10))
        body = response.json()
        assert response.status_code == 200
        assert body["version_count"] == 0
        assert body["active_id"] is None
        assert client.get(f"/v1/sessions/{session_id}/grades").json()["items"] == []

    def test_suggestions(self, client, session_id):
        response = client.post(f"/v1/sessions/{session_id}/suggestions", json={"language": "zh"})
        assert response.json() == {"suggestions": ["风格"]}


class TestGrades:
    """그레이드 생성/히스토리 테스트."""

    def test_generate_prompt(self, client, session_id, grading_client):
        response = generate(client, session_id)
        body = response.json()
        assert response.status_code == 201
        assert body["id"] == 1
        assert body["display_name"] == "Warm_vintage_film_v1"
        assert body["mode"] == "prompt"
        assert body["params"]["contrast"] == pytest.approx(0.4)
        assert grading_client.requests[0].prompt == "Warm vintage film"

    def test_prompt_required(self, client, session_id):
        assert generate(client, session_id, prompt="   ").status_code == 400

    def test_reference_mode(self, client, session_id, grading_client):
        ref = base64.b64encode(encode_png(np.zeros((8, 8, 3), dtype=np.uint8))).decode("ascii")
        response = client.post(
            f"/v1/sessions/{session_id}/grades",
            json={"mode": "reference", "reference_image": f"data:image/png;base64,{ref}"},
        )
        assert response.status_code == 201
        assert response.json()["display_name"] == "Ref_Match_v1"
        assert response.json()["provenance"] == "Reference Match"
        assert grading_client.requests[0].reference_image.shape == (8, 8, 3)

    def test_reference_image_required(self, client, session_id):
        response = client.post(f"/v1/sessions/{session_id}/grades", json={"mode": "reference"})
        assert response.status_code == 400

    def test_history_newest_first(self, client, session_id):
        generate(client, session_id, "first")
        generate(client, session_id, "second")
        body = client.get(f"/v1/sessions/{session_id}/grades").json()
        assert [v["display_name"] for v in body["items"]] == ["second_v2", "first_v1"]
        assert body["active_id"] == body["items"][0]["id"]

    def test_set_active(self, client, session_id):
        first = generate(client, session_id, "first").json()
        generate(client, session_id, "second")
        response = client.put(f"/v1/sessions/{session_id}/grades/active", json={"version_id": first["id"]})
        assert response.status_code == 200
        assert client.get(f"/v1/sessions/{session_id}/grades").json()["active_id"] == first["id"]

    def test_set_active_unknown(self, client, session_id):
        generate(client, session_id)
        response = client.put(f"/v1/sessions/{session_id}/grades/active", json={"version_id": 99})
        assert response.status_code == 404

    def test_generation_in_flight(self, client, session_id, store):
        """진행 중인 생성이 있으면 409."""
        entry = store.get(session_id)
        entry.generation_lock.acquire()
        try:
            assert generate(client, session_id).status_code == 409
        finally:
            entry.generation_lock.release()

    def test_source_changed_during_generation(self, client, session_id, store, grading_client):
        """생성 중 소스가 바뀌면 결과를 버리고 409."""
        entry = store.get(session_id)
        grading_client.on_generate = lambda: entry.replace_source(np.zeros((10, 10, 3), dtype=np.uint8))
        assert generate(client, session_id).status_code == 409
        assert len(entry.session) == 0


class TestExport:
    """LUT 다운로드 테스트."""

    def test_export_without_active_version(self, client, session_id):
        response = client.get(f"/v1/sessions/{session_id}/export")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE"

    def test_export_cube(self, client, session_id):
        generate(client, session_id)
        response = client.get(f"/v1/sessions/{session_id}/export", params={"format": "cube"})
        assert response.status_code == 200
        assert response.headers["content-disposition"] == (
            "attachment; filename=\"Warm_vintage_film_v1.cube\"; filename*=UTF-8''Warm_vintage_film_v1.cube"
        )
        assert response.text.startswith('TITLE "Warm_vintage_film_v1"')
        assert "LUT_3D_SIZE 33" in response.text

    def test_export_unicode_name(self, client, session_id):
        """한자 표시 이름은 RFC 5987 filename* 로 전달하고 ASCII 대체 이름을 함께 보냄."""
        generate(client, session_id, prompt="复古胶片暖调")
        response = client.get(f"/v1/sessions/{session_id}/export", params={"format": "cube"})
        assert response.status_code == 200
        header = response.headers["content-disposition"]
        assert 'filename="_______v1.cube"' in header
        assert "filename*=UTF-8''%E5%A4%8D%E5%8F%A4%E8%83%B6%E7%89%87%E6%9A%96%E8%B0%83_v1.cube" in header
        assert response.text.startswith('TITLE "复古胶片暖调_v1"')

    def test_export_quote_in_filename(self, client, session_id):
        generate(client, session_id)
        response = client.get(
            f"/v1/sessions/{session_id}/export", params={"format": "cube", "filename": 'my "best" look'}
        )
        assert response.status_code == 200
        assert response.headers["content-disposition"].startswith('attachment; filename="my best look.cube"; ')

    def test_export_png_custom_name(self, client, session_id):
        generate(client, session_id)
        response = client.get(
            f"/v1/sessions/{session_id}/export", params={"format": "png", "filename": "my_look"}
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert 'filename="my_look.png"' in response.headers["content-disposition"]

    def test_unsupported_format(self, client, session_id):
        generate(client, session_id)
        response = client.get(f"/v1/sessions/{session_id}/export", params={"format": "3dl"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "EXPORT_FAILED"


class TestPreview:
    """프리뷰 테스트."""

    def test_source_preview_ungraded(self, client, session_id):
        response = client.get(f"/v1/sessions/{session_id}/preview")
        assert response.status_code == 200
        assert response.content == encode_png(np.full((48, 64, 3), 100, dtype=np.uint8))

    def test_source_replaced_during_render(self, client, session_id, store, monkeypatch):
        """렌더 중 소스가 교체되면 이전 소스 결과는 캐시에 남지 않음."""
        from backend.api.v1 import previews

        entry = store.get(session_id)
        new_source = np.full((48, 64, 3), 200, dtype=np.uint8)
        original_render = previews._render_png
        calls = []

        def render_and_replace(image, params):
            data = original_render(image, params)
            if not calls:
                entry.replace_source(new_source)
            calls.append(image)
            return data

        monkeypatch.setattr(previews, "_render_png", render_and_replace)

        client.get(f"/v1/sessions/{session_id}/preview")
        response = client.get(f"/v1/sessions/{session_id}/preview")
        assert response.content == encode_png(new_source)
        assert len(calls) == 2

    def test_graded_preview_differs(self, client, session_id):
        before = client.get(f"/v1/sessions/{session_id}/preview").content
        generate(client, session_id)
        graded = client.get(f"/v1/sessions/{session_id}/preview").content
        original = client.get(f"/v1/sessions/{session_id}/preview", params={"graded": "false"}).content
        assert graded != before
        assert original == before

    def test_chart_view(self, client, session_id):
        response = client.get(f"/v1/sessions/{session_id}/preview", params={"view": "chart"})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"

    def test_custom_image(self, client, session_id):
        generate(client, session_id)
        response = client.post(f"/v1/sessions/{session_id}/preview", files=png_upload(width=16, height=16))
        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")

    def test_test_pattern(self, client):
        response = client.get("/v1/test-pattern")
        assert response.status_code == 200
        assert response.content.startswith(b"\x89PNG")


class TestHealth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/v1/health").json()["status"] == "ok"


class TestSettings:
    """설정 검증 테스트."""

    def test_default_language_parsed(self):
        from backend.core.config import Settings

        assert Settings(DEFAULT_LANGUAGE="zh").DEFAULT_LANGUAGE is Language.ZH

    def test_invalid_default_language_rejected(self):
        """잘못된 언어 설정은 요청 시점이 아니라 로드 시점에 실패."""
        from pydantic import ValidationError

        from backend.core.config import Settings

        with pytest.raises(ValidationError):
            Settings(DEFAULT_LANGUAGE="fr")

    def test_routes_mounted_under_v1(self):
        paths = [route.path for route in app.routes if route.path.startswith("/v1")]
        assert "/v1/sessions/{session_id}/export" in paths
        assert "/v1/test-pattern" in paths
