"""
Tests for the HTTP surface.

Run with:
    pytest tests/api/test_api.py -v
"""
import pytest
from fastapi.testclient import TestClient

from collab_hunter.api.dependencies import get_pipeline
from collab_hunter.api.main import app
from collab_hunter.common.errors import TransportError

from conftest import case_json, dumps


@pytest.fixture
def client(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


def recommendation(**overrides):
    data = {"ipName": "Labubu", "category": "Art toy", "matchScore": 88, "whyItWorks": "w", "campaignIdea": "c"}
    data.update(overrides)
    return data


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestMissions:
    def test_preview_returns_instruction(self, client, fake_client):
        response = client.post("/api/missions/preview", json={"config": {"kind": "trend", "topic": "潮玩", "limit": 5}})
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "trend"
        assert "return at most 5 items" in body["instructionText"]
        assert body["outputShape"] == "TrendList"
        assert fake_client.call_count == 0

    def test_preview_unknown_kind_is_422(self, client):
        response = client.post("/api/missions/preview", json={"config": {"kind": "nope"}})
        assert response.status_code == 422

    def test_run_brand_search(self, client, fake_client):
        fake_client.queue(dumps([case_json()]))
        response = client.post("/api/missions/run", json={"config": {"kind": "brand_search", "brandName": "Oreo"}})
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "brand_search"
        assert body["cases"][0]["projectName"] == "Pikachu x Oreo"
        assert body["trends"] == []

    def test_run_uses_edited_instruction(self, client, fake_client):
        fake_client.queue("[]")
        response = client.post(
            "/api/missions/run",
            json={"config": {"kind": "trend", "topic": "潮玩"}, "instructionText": "只看盲盒"},
        )
        assert response.status_code == 200
        assert response.json()["instructionText"] == "只看盲盒"
        assert fake_client.requests[0].instruction_text == "只看盲盒"

    def test_blank_required_input_is_400(self, client, fake_client):
        response = client.post("/api/missions/run", json={"config": {"kind": "ip_scout", "ipName": "  "}})
        assert response.status_code == 400
        assert "ipName" in response.json()["detail"]
        assert fake_client.call_count == 0

    def test_exhausted_retries_is_502(self, client, fake_client):
        fake_client.queue("not json", "still not json", TransportError("down"))
        response = client.post("/api/missions/run", json={"config": {"kind": "ip_scout", "ipName": "Labubu"}})
        assert response.status_code == 502
        assert fake_client.call_count == 3


class TestMatchmake:
    def test_success(self, client, fake_client):
        fake_client.queue(dumps([recommendation()]))
        response = client.post("/api/matchmake", json={"prompt": "A coffee brand wants a summer collab"})
        assert response.status_code == 200
        body = response.json()
        assert body["recommendations"][0]["ipName"] == "Labubu"
        assert fake_client.requests[0].instruction_text.startswith("A coffee brand wants a summer collab")

    @pytest.mark.parametrize("payload", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": 42}, {"prompt": ["a"]}])
    def test_missing_prompt_is_400(self, client, fake_client, payload):
        response = client.post("/api/matchmake", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing prompt (string)"
        assert fake_client.call_count == 0

    def test_no_body_is_400(self, client):
        response = client.post("/api/matchmake")
        assert response.status_code == 400

    def test_upstream_failure_is_502(self, client, fake_client):
        fake_client.queue(TransportError("a"), TransportError("b"), TransportError("c"))
        response = client.post("/api/matchmake", json={"prompt": "coffee"})
        assert response.status_code == 502
