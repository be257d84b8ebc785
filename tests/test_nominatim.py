import pytest
import requests

from address_finder.core.errors import UpstreamError
from address_finder.vendors import nominatim


class DummyResponse:
    def __init__(self, status_code=200, payload=None, body_error=None):
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self._body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if self._body_error is not None:
            raise self._body_error
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = None
        self.exc = None

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params, headers, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(nominatim, "_SESSION", session)
    return session


def _reverse():
    return nominatim.reverse(
        35.6892,
        51.389,
        base_url="https://nominatim.openstreetmap.org",
        user_agent="address-finder-tests",
        language="fa",
        timeout=7,
    )


def test_reverse_success(patch_session):
    patch_session.response = DummyResponse(payload={"display_name": "Tehran, Iran", "address": {"city": "Tehran"}})

    payload = _reverse()

    assert payload["display_name"] == "Tehran, Iran"
    url, params, headers, timeout = patch_session.calls[0]
    assert url == "https://nominatim.openstreetmap.org/reverse"
    assert params == {"format": "jsonv2", "lat": 35.6892, "lon": 51.389, "accept-language": "fa"}
    assert headers["User-Agent"] == "address-finder-tests"
    assert headers["Accept"] == "application/json"
    assert timeout == 7


def test_reverse_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=503)
    with pytest.raises(UpstreamError) as exc_info:
        _reverse()
    assert exc_info.value.service == "nominatim"


def test_reverse_network_error(patch_session):
    patch_session.exc = requests.ConnectionError("connection refused")
    with pytest.raises(UpstreamError):
        _reverse()


def test_reverse_non_json_body(patch_session):
    patch_session.response = DummyResponse(body_error=ValueError("Expecting value"))
    with pytest.raises(UpstreamError):
        _reverse()


def test_reverse_unexpected_payload_shape(patch_session):
    patch_session.response = DummyResponse(payload=["not", "an", "object"])
    with pytest.raises(UpstreamError):
        _reverse()


def test_reverse_service_error_payload(patch_session):
    patch_session.response = DummyResponse(payload={"error": "Unable to geocode"})
    with pytest.raises(UpstreamError) as exc_info:
        _reverse()
    assert "Unable to geocode" in str(exc_info.value)
