"""Shared pieces of the extraction paths.

Each path is a coroutine taking the raw text and the resolved provider
configuration and returning the model's result as a plain dict. Failures are
raised as ``ExtractionError`` subclasses from ``core.failures``.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

import httpx

from services.ticket_extractor.settings import ProviderConfig

ExtractStrategy = Callable[[str, ProviderConfig], Awaitable[Dict[str, Any]]]


def is_success(response: httpx.Response) -> bool:
    return 200 <= response.status_code < 300


def error_message(response: httpx.Response) -> str:
    """Best-effort error message from a non-success response."""
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return response.text
