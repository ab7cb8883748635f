"""Extraction through any OpenAI-compatible chat-completions endpoint.

Covers Ollama, LM Studio, DeepSeek and the like. These endpoints cannot be
trusted to honour a response schema, so the reply is cleaned of markdown
fencing and parsed by hand.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict

import httpx

from core.failures import MalformedResponseError, ProviderError
from services.ticket_extractor.prompts import JSON_ONLY_SYSTEM_PROMPT, chat_prompt
from services.ticket_extractor.providers.base import error_message, is_success
from services.ticket_extractor.settings import OLLAMA_DEFAULT_MODEL, ProviderConfig

log = logging.getLogger(__name__)

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"
# Sent when no key is configured; Ollama ignores it but wants the header
PLACEHOLDER_API_KEY = "ollama"

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?```\s*$")


def chat_completions_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{CHAT_COMPLETIONS_SUFFIX}"


def strip_code_fence(content: str) -> str:
    # Opening and closing markers are stripped independently; models often drop one
    return _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", content, count=1), count=1).strip()


def build_request_payload(text: str, model: str) -> Dict[str, Any]:
    return {
        "model": model or OLLAMA_DEFAULT_MODEL,
        "messages": [
            {"role": "system", "content": JSON_ONLY_SYSTEM_PROMPT},
            {"role": "user", "content": chat_prompt(text)},
        ],
        "stream": False,
    }


def parse_content(content: str) -> Dict[str, Any]:
    try:
        result = json.loads(strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Reply is not valid JSON: {e}", {"content": content[:200]})
    if not isinstance(result, dict):
        raise MalformedResponseError(f"Reply is JSON but not an object: {type(result).__name__}")
    return result


def _first_message_content(data: Any) -> str:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return "{}"
    return content if isinstance(content, str) and content else "{}"


async def extract_chat(text: str, config: ProviderConfig) -> Dict[str, Any]:
    """Extract ticket fields with a single chat-completions call.

    Raises:
        ProviderError: On transport failure or a non-success status
        MalformedResponseError: If the reply is not a JSON object after
            fence stripping
    """
    url = chat_completions_url(config.base_url)
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {config.api_key or PLACEHOLDER_API_KEY}",
    }
    payload = build_request_payload(text, config.model)

    log.debug(f"Chat completion request: url={url}, model={payload['model']}")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, headers=headers, json=payload)
    except httpx.ConnectError:
        raise ProviderError(f"Could not connect to {url}. Make sure the server is running.")
    except httpx.TimeoutException:
        raise ProviderError(f"Request to {url} timed out")
    except httpx.RequestError as e:
        raise ProviderError(f"Request failed: {e}")

    if not is_success(response):
        raise ProviderError(
            f"API error ({response.status_code}): {error_message(response)}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError(f"Response body is not JSON: {e}")
    return parse_content(_first_message_content(data))
