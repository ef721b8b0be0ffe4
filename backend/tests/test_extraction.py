"""
Tests for AI-assisted parameter extraction.

Validates:
1. Reply parsing keeps only positive fs/qts/vas
2. Route error mapping (400 no key, 502 unusable reply, 500 unexpected)
3. Per-request keys take precedence over the environment
"""

from types import SimpleNamespace

import pytest

from backend.ai.extraction import ExtractionError, extract_parameters, parse_extraction_response
from backend.ai.prompts import build_extraction_messages
from backend.routes import extract


class FakeAnthropic:
    """Stands in for the Anthropic client; records calls and replays a canned reply."""

    reply = '{"fs": 40, "qts": 0.4, "vas": 50}'
    error = None
    instances = []

    def __init__(self, api_key=None):
        self.api_key = api_key
        self.calls = []
        self.messages = SimpleNamespace(create=self._create)
        FakeAnthropic.instances.append(self)

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        if FakeAnthropic.error is not None:
            raise FakeAnthropic.error
        return SimpleNamespace(content=[SimpleNamespace(text=FakeAnthropic.reply)])


@pytest.fixture
def fake_anthropic(monkeypatch):
    monkeypatch.setattr(FakeAnthropic, "reply", FakeAnthropic.reply)
    monkeypatch.setattr(FakeAnthropic, "error", None)
    monkeypatch.setattr(FakeAnthropic, "instances", [])
    monkeypatch.setattr(extract, "Anthropic", FakeAnthropic)
    monkeypatch.setattr(extract, "client", None)
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    return FakeAnthropic


class TestParseExtractionResponse:
    """Test model reply parsing."""

    def test_plain_json(self):
        assert parse_extraction_response('{"fs": 40, "qts": 0.4, "vas": 50}') == {
            "fs": 40.0, "qts": 0.4, "vas": 50.0,
        }

    def test_json_inside_prose(self):
        reply = 'Here you go:\n```json\n{"fs": 28.5, "vas": 71}\n```'
        assert parse_extraction_response(reply) == {"fs": 28.5, "vas": 71.0}

    def test_string_values_with_units(self):
        assert parse_extraction_response('{"fs": "35 Hz", "qts": "0.38"}') == {"fs": 35.0, "qts": 0.38}

    def test_unknown_and_invalid_values_dropped(self):
        reply = '{"fs": 0, "qts": -0.4, "vas": null, "xmax": 8}'
        assert parse_extraction_response(reply) == {}

    def test_no_json(self):
        with pytest.raises(ExtractionError, match="No valid parameters found"):
            parse_extraction_response("I could not find any parameters.")

    def test_invalid_json(self):
        with pytest.raises(ExtractionError):
            parse_extraction_response("{fs: 40}")

    def test_extract_parameters_calls_model(self, fake_anthropic):
        client = fake_anthropic(api_key="sk-test")
        assert extract_parameters("Fs 40 Hz", client, model="test-model") == {
            "fs": 40.0, "qts": 0.4, "vas": 50.0,
        }
        call = client.calls[0]
        assert call["model"] == "test-model"
        assert call["messages"] == build_extraction_messages("Fs 40 Hz")

    def test_prompt_wraps_user_text(self):
        content = build_extraction_messages("Fs 40 Hz")[0]["content"]
        assert "<user_input>" in content
        assert "Fs 40 Hz" in content


class TestExtractRoute:
    """Test /api/extract-parameters."""

    def test_header_key(self, client, fake_anthropic):
        response = client.post(
            "/api/extract-parameters",
            json={"text": "Fs: 40 Hz, Qts: 0.4, Vas: 50 L"},
            headers={"X-API-Key": "sk-header"},
        )
        assert response.status_code == 200
        data = response.json()
        assert (data["fs"], data["qts"], data["vas"]) == (40.0, 0.4, 50.0)
        assert data["found"] == ["fs", "qts", "vas"]
        assert fake_anthropic.instances[-1].api_key == "sk-header"

    def test_body_key_wins(self, client, fake_anthropic):
        client.post(
            "/api/extract-parameters",
            json={"text": "Fs: 40 Hz", "api_key": "sk-body"},
            headers={"X-API-Key": "sk-header"},
        )
        assert fake_anthropic.instances[-1].api_key == "sk-body"

    def test_environment_key(self, client, fake_anthropic, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-env")
        response = client.post("/api/extract-parameters", json={"text": "Fs: 40 Hz"})
        assert response.status_code == 200
        assert fake_anthropic.instances[-1].api_key == "sk-env"

    def test_partial_result(self, client, fake_anthropic):
        fake_anthropic.reply = '{"fs": 40}'
        response = client.post(
            "/api/extract-parameters", json={"text": "Fs: 40 Hz"}, headers={"X-API-Key": "k"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["fs"] == 40.0
        assert data["qts"] is None
        assert data["found"] == ["fs"]

    def test_no_key(self, client, fake_anthropic):
        response = client.post("/api/extract-parameters", json={"text": "Fs: 40 Hz"})
        assert response.status_code == 400
        assert "API key" in response.json()["detail"]

    def test_blank_text(self, client, fake_anthropic):
        response = client.post(
            "/api/extract-parameters", json={"text": "   "}, headers={"X-API-Key": "k"}
        )
        assert response.status_code == 400

    def test_unusable_reply(self, client, fake_anthropic):
        fake_anthropic.reply = "Sorry, no parameters here."
        response = client.post(
            "/api/extract-parameters", json={"text": "hello"}, headers={"X-API-Key": "k"}
        )
        assert response.status_code == 502
        assert response.json()["detail"].startswith("Error parsing text:")

    def test_unexpected_error(self, client, fake_anthropic):
        fake_anthropic.error = RuntimeError("boom")
        response = client.post(
            "/api/extract-parameters", json={"text": "Fs: 40 Hz"}, headers={"X-API-Key": "k"}
        )
        assert response.status_code == 500
