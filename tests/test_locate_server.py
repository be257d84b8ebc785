import pytest

from address_finder.core.config import Settings
from address_finder.core.errors import UpstreamError
from address_finder.core.messages import get_message
from address_finder.jobs import locate, locate_server


@pytest.fixture(autouse=True)
def fake_upstreams(monkeypatch):
    calls = {"gemini": 0, "nominatim": 0}
    settings = Settings(gemini_api_key="")

    def fake_generate(*args, **kwargs):
        calls["gemini"] += 1
        raise UpstreamError("gemini", "GEMINI_API_KEY is not configured")

    def fake_reverse(*args, **kwargs):
        calls["nominatim"] += 1
        return {"display_name": "Tehran, Iran", "address": {"city": "Tehran", "road": "Valiasr"}}

    monkeypatch.setattr(locate_server, "get_settings", lambda: settings)
    monkeypatch.setattr(locate, "get_settings", lambda: settings)
    monkeypatch.setattr("address_finder.vendors.gemini.generate_grounded_text", fake_generate)
    monkeypatch.setattr("address_finder.vendors.nominatim.reverse", fake_reverse)
    return calls


@pytest.fixture
def client():
    return locate_server.app.test_client()


def test_health_endpoint(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["gemini_configured"] is False


def test_locate_validates_payload(client, fake_upstreams):
    assert client.post("/locate", json={}).status_code == 400
    assert client.post("/locate", json={"latitude": 35.6}).status_code == 400
    assert client.post("/locate", json={"latitude": "north", "longitude": 51.3}).status_code == 400
    assert client.post("/locate", json={"latitude": 35.6, "longitude": 51.3, "accuracy": "high"}).status_code == 400
    assert fake_upstreams["nominatim"] == 0


def test_locate_resolves_through_fallback(client, fake_upstreams):
    response = client.post("/locate", json={"latitude": 35.6892, "longitude": 51.389, "accuracy": 15})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["state"] == "succeeded"
    assert data["coordinates"] == {"latitude": 35.6892, "longitude": 51.389, "accuracy": 15.0}
    assert data["address"]["full_address"] == "Tehran, Iran"
    assert data["address"]["road"] == "Valiasr"
    assert data["share"]["url"] == "https://www.google.com/maps?q=35.6892,51.389"
    assert "Tehran, Iran" in data["summary"]
    assert fake_upstreams == {"gemini": 1, "nominatim": 1}


def test_locate_reports_permission_error(client, fake_upstreams):
    response = client.post("/locate", json={"error": {"code": 1, "message": "User denied Geolocation"}})

    assert response.status_code == 422
    body = response.get_json()
    assert body["kind"] == "permission_denied"
    assert body["state"] == "failed"
    assert body["error"] == get_message("permission_denied", "fa")
    assert fake_upstreams == {"gemini": 0, "nominatim": 0}


def test_locate_out_of_range_coordinates_fail_as_unavailable(client):
    response = client.post("/locate", json={"latitude": 135.0, "longitude": 51.3})
    assert response.status_code == 422
    assert response.get_json()["kind"] == "location_unavailable"


def test_locate_rejects_non_object_body(client, fake_upstreams):
    response = client.post("/locate", json=[35.6, 51.3])
    assert response.status_code == 400
    assert response.get_json()["error"] == "body must be a JSON object"
    assert fake_upstreams["nominatim"] == 0
