"""Structured-output extraction through the Gemini generateContent API.

The response is constrained to a fixed schema: nine string fields, ``type``
restricted to TRAIN/FLIGHT, and the five core fields required.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import httpx
from jsonschema import Draft202012Validator

from core.config import Settings
from core.failures import MalformedResponseError, MissingCredentialError, ProviderError
from services.ticket_extractor.prompts import structured_prompt
from services.ticket_extractor.providers.base import error_message, is_success
from services.ticket_extractor.settings import GEMINI_DEFAULT_MODEL, ProviderConfig, ProviderKind

log = logging.getLogger(__name__)

# Process-level credential sources, first non-empty wins
ENV_KEY_VARS = ("API_KEY", "GEMINI_API_KEY")

TICKET_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "type": {"type": "STRING", "enum": ["TRAIN", "FLIGHT"]},
        "origin": {"type": "STRING"},
        "destination": {"type": "STRING"},
        "number": {"type": "STRING"},
        "date": {"type": "STRING"},
        "time": {"type": "STRING"},
        "passengerName": {"type": "STRING"},
        "gateOrSeat": {"type": "STRING"},
        "extraInfo": {"type": "STRING"},
    },
    "required": ["type", "origin", "destination", "date", "time"],
}


def _to_json_schema(schema: Any) -> Any:
    """Gemini's OpenAPI-style schema uses upper-case type names."""
    if isinstance(schema, dict):
        return {
            key: value.lower() if key == "type" and isinstance(value, str) else _to_json_schema(value)
            for key, value in schema.items()
        }
    if isinstance(schema, list):
        return [_to_json_schema(item) for item in schema]
    return schema


_validator = Draft202012Validator(_to_json_schema(TICKET_RESPONSE_SCHEMA))


def env_api_key() -> Optional[str]:
    for name in ENV_KEY_VARS:
        value = os.getenv(name)
        if value:
            return value
    return None


def resolve_api_key(config: ProviderConfig) -> Optional[str]:
    if config.provider is ProviderKind.GEMINI_CUSTOM:
        return config.api_key or None
    return env_api_key()


def resolve_model(config: ProviderConfig) -> str:
    if config.provider is ProviderKind.GEMINI_CUSTOM and config.model:
        return config.model
    return GEMINI_DEFAULT_MODEL


def build_request_body(text: str) -> Dict[str, Any]:
    return {
        "contents": [{"role": "user", "parts": [{"text": structured_prompt(text)}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": TICKET_RESPONSE_SCHEMA,
        },
    }


def parse_response(data: Dict[str, Any]) -> Dict[str, Any]:
    """Pull the schema-constrained JSON object out of a generateContent reply."""
    candidates = data.get("candidates") or []
    if not candidates:
        block_reason = (data.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise ProviderError(f"Content blocked: {block_reason}")
        raise ProviderError("No candidates in response")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text_content = "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    try:
        result = json.loads(text_content or "{}")
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Gemini returned non-JSON output: {e}", {"content": text_content[:200]})

    errors = sorted(_validator.iter_errors(result), key=lambda e: list(e.path))
    if errors:
        raise ProviderError(f"Gemini output failed schema validation: {errors[0].message}")
    return result


async def extract_structured(text: str, config: ProviderConfig, *, base_url: Optional[str] = None) -> Dict[str, Any]:
    """Extract ticket fields with a schema-constrained Gemini call.

    Args:
        text: Raw travel text
        config: Resolved provider configuration (one of the Gemini variants)
        base_url: Override for the generative API root

    Returns:
        The model's JSON object

    Raises:
        MissingCredentialError: If no API key is available; no request is sent
        ProviderError: On transport failure, non-success status, or output
            that does not match the response schema
        MalformedResponseError: If the returned text is not JSON
    """
    api_key = resolve_api_key(config)
    if not api_key:
        log.warning(f"API key is missing for {config.provider.value}, check settings")
        raise MissingCredentialError(f"API key is missing for {config.provider.value}, check settings")

    root = (base_url or Settings().gemini_base_url).rstrip("/")
    model = resolve_model(config)
    url = f"{root}/models/{model}:generateContent"
    headers = {"Content-Type": "application/json", "x-goog-api-key": api_key}

    log.debug(f"Gemini request: model={model}")
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(url, headers=headers, json=build_request_body(text))
    except httpx.TimeoutException:
        raise ProviderError("Gemini request timed out")
    except httpx.RequestError as e:
        raise ProviderError(f"Gemini request failed: {e}")

    if not is_success(response):
        raise ProviderError(
            f"Gemini API error ({response.status_code}): {error_message(response)}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(f"Gemini returned an unreadable body: {e}")
    if not isinstance(data, dict):
        raise ProviderError("Gemini returned an unexpected body")
    return parse_response(data)
