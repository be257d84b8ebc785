from types import SimpleNamespace

import pytest

from address_finder.core.errors import UpstreamError
from address_finder.vendors import gemini


class DummyModels:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


def _install(monkeypatch, models):
    built = []

    def fake_build_client(api_key, timeout):
        built.append((api_key, timeout))
        return SimpleNamespace(models=models)

    monkeypatch.setattr(gemini, "_build_client", fake_build_client)
    return built


def test_generate_grounded_text_returns_text(monkeypatch):
    models = DummyModels(text="شهر: تهران")
    built = _install(monkeypatch, models)

    text = gemini.generate_grounded_text("prompt", 35.6892, 51.389, api_key="key", model="gemini-2.5-flash", timeout=5)

    assert text == "شهر: تهران"
    assert built == [("key", 5)]
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["contents"] == "prompt"


def test_grounding_config_requests_maps_search_and_location():
    config = gemini.build_grounding_config(35.6892, 51.389)

    assert len(config.tools) == 2
    assert config.tools[0].google_maps is not None
    assert config.tools[1].google_search is not None
    lat_lng = config.tool_config.retrieval_config.lat_lng
    assert lat_lng.latitude == 35.6892
    assert lat_lng.longitude == 51.389


def test_empty_response_is_not_an_error(monkeypatch):
    _install(monkeypatch, DummyModels(text=None))
    assert gemini.generate_grounded_text("p", 1.0, 2.0, api_key="key", model="m") == ""


def test_sdk_failure_becomes_upstream_error(monkeypatch):
    _install(monkeypatch, DummyModels(exc=ConnectionError("network down")))
    with pytest.raises(UpstreamError) as exc_info:
        gemini.generate_grounded_text("p", 1.0, 2.0, api_key="key", model="m")
    assert exc_info.value.service == "gemini"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_missing_api_key_skips_sdk(monkeypatch):
    built = _install(monkeypatch, DummyModels(text="unused"))
    with pytest.raises(UpstreamError):
        gemini.generate_grounded_text("p", 1.0, 2.0, api_key="", model="m")
    assert built == []
