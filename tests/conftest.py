import json
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture(autouse=True)
def no_ambient_api_key(monkeypatch):
    # keep the built-in Gemini credential out of tests unless a test sets it
    monkeypatch.delenv("API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture
def http_response():
    """Build a fake httpx response."""

    def _build(status_code: int = 200, json_data=None, text: str = ""):
        response = MagicMock()
        response.status_code = status_code
        if json_data is None:
            response.json.side_effect = ValueError("not json")
            response.text = text
        else:
            response.json.return_value = json_data
            response.text = text or json.dumps(json_data)
        return response

    return _build


@pytest.fixture
def wire_client():
    """Wire a patched ``httpx.AsyncClient`` class to return a fake client."""

    def _wire(mock_client_cls, response=None, side_effect=None):
        instance = MagicMock()
        instance.post = AsyncMock(return_value=response, side_effect=side_effect)
        instance.__aenter__ = AsyncMock(return_value=instance)
        instance.__aexit__ = AsyncMock(return_value=False)
        mock_client_cls.return_value = instance
        return instance

    return _wire


@pytest.fixture
def gemini_reply():
    def _build(payload) -> dict:
        text = payload if isinstance(payload, str) else json.dumps(payload, ensure_ascii=False)
        return {
            "candidates": [
                {
                    "content": {"parts": [{"text": text}]},
                    "finishReason": "STOP",
                }
            ],
            "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 5, "totalTokenCount": 15},
        }

    return _build


@pytest.fixture
def chat_reply():
    def _build(content) -> dict:
        return {
            "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
            "model": "llama3",
        }

    return _build
