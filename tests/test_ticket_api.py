"""Tests for the ticket extractor HTTP service."""
from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from core.config import Settings
from core.ticket import TicketRecord, TransportKind
from services.ticket_extractor.main import create_app, mask_key
from services.ticket_extractor.settings import ProviderConfig, ProviderKind, SettingsStore


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def client(store):
    return TestClient(create_app(Settings(log_level="DEBUG"), store))


def test_health(client):
    assert client.get("/healthz").json() == {"ok": True}


class TestParseEndpoint:
    def test_success(self, client, store):
        store.save(ProviderConfig(ProviderKind.OPENAI, model="llama3"))
        ticket = TicketRecord(transport_kind=TransportKind.TRAIN, origin="北京南", destination="上海虹桥", number="G123")
        with patch("services.ticket_extractor.main.parse_ticket_text", AsyncMock(return_value=ticket)) as parse:
            resp = client.post("/tickets/parse", json={"text": "G123 北京南-上海虹桥"})

        assert resp.status_code == 200
        assert resp.json()["origin"] == "北京南"
        assert resp.json()["type"] == "TRAIN"
        assert resp.json()["passengerName"] == ""
        assert parse.await_args.args[1].provider is ProviderKind.OPENAI

    def test_failure_is_unrecognized(self, client):
        with patch("services.ticket_extractor.main.parse_ticket_text", AsyncMock(return_value=None)):
            resp = client.post("/tickets/parse", json={"text": "hello"})

        assert resp.status_code == 422
        assert resp.json()["detail"] == "could not recognize ticket"

    def test_blank_text_is_rejected_before_extraction(self, client):
        with patch("services.ticket_extractor.main.parse_ticket_text", AsyncMock()) as parse:
            resp = client.post("/tickets/parse", json={"text": "   \n"})

        assert resp.status_code == 422
        parse.assert_not_called()


class TestSettingsEndpoints:
    def test_defaults(self, client):
        body = client.get("/settings").json()
        assert body == {
            "provider": "GEMINI_ENV",
            "apiKey": "",
            "baseUrl": "http://localhost:11434/v1",
            "model": "gemini-2.5-flash",
        }

    def test_switch_to_openai_applies_defaults(self, client, store):
        body = client.put("/settings", json={"provider": "OPENAI"}).json()
        assert body["baseUrl"] == "http://localhost:11434/v1"
        assert body["model"] == "llama3"
        assert store.resolve().provider is ProviderKind.OPENAI

    def test_key_is_masked_and_kept(self, client, store):
        client.put("/settings", json={"provider": "GEMINI_CUSTOM", "apiKey": "AIza-secret-1234"})
        body = client.get("/settings").json()
        assert body["apiKey"] == "****1234"

        client.put("/settings", json={"provider": "GEMINI_CUSTOM", "model": "gemini-2.0-flash"})
        assert store.resolve().api_key == "AIza-secret-1234"
        assert store.resolve().model == "gemini-2.0-flash"

    def test_unknown_provider_rejected(self, client):
        assert client.put("/settings", json={"provider": "CLAUDE"}).status_code == 422


@pytest.mark.parametrize(
    "key,masked",
    [("", ""), ("abc", "****"), ("sk-abcdef", "****cdef")],
)
def test_mask_key(key, masked):
    assert mask_key(key) == masked
