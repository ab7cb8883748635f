"""Ticket Extractor Service.

HTTP boundary used by the journey card UI: turns pasted travel text into a
ticket and stores the user's AI provider choice. Settings are resolved once
per request here and passed down to the extraction layer.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from core.config import Settings
from services.ticket_extractor.extractor import parse_ticket_text
from services.ticket_extractor.settings import (
    ProviderConfig,
    ProviderKind,
    SettingsStore,
    default_store,
    with_provider,
)

log = logging.getLogger(__name__)

UNRECOGNIZED_DETAIL = "could not recognize ticket"


class ParseRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value


class SettingsUpdate(BaseModel):
    provider: ProviderKind
    apiKey: Optional[str] = None
    baseUrl: Optional[str] = None
    model: Optional[str] = None


def mask_key(api_key: str) -> str:
    if not api_key:
        return ""
    if len(api_key) <= 4:
        return "****"
    return f"****{api_key[-4:]}"


def public_settings(config: ProviderConfig) -> Dict[str, Any]:
    payload = config.to_dict()
    payload["apiKey"] = mask_key(config.api_key)
    return payload


def apply_update(current: ProviderConfig, update: SettingsUpdate) -> ProviderConfig:
    """Merge a settings update; an omitted key keeps the stored one."""
    config = current
    if update.provider is not current.provider:
        config = with_provider(config, update.provider)
    return ProviderConfig(
        provider=config.provider,
        api_key=config.api_key if update.apiKey is None else update.apiKey,
        base_url=config.base_url if update.baseUrl is None else update.baseUrl,
        model=config.model if update.model is None else update.model,
    )


def create_app(settings: Optional[Settings] = None, store: Optional[SettingsStore] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional service settings
        store: Optional settings store, defaults to the configured file

    Returns:
        Configured FastAPI app
    """
    settings = settings or Settings()
    store = store or default_store(settings)
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(
        title="Ticket Extractor",
        description="Turns travel confirmation text into journey card fields",
        version="1.0.0",
    )

    @app.get("/healthz")
    def health() -> Dict[str, bool]:
        return {"ok": True}

    @app.post("/tickets/parse")
    async def parse(req: ParseRequest) -> Dict[str, str]:
        config = store.resolve()
        ticket = await parse_ticket_text(req.text, config)
        if ticket is None:
            raise HTTPException(status_code=422, detail=UNRECOGNIZED_DETAIL)
        return ticket.to_dict()

    @app.get("/settings")
    def get_settings() -> Dict[str, Any]:
        return public_settings(store.resolve())

    @app.put("/settings")
    def put_settings(update: SettingsUpdate) -> Dict[str, Any]:
        config = apply_update(store.resolve(), update)
        try:
            store.save(config)
        except OSError as e:
            log.error(f"Could not save settings: {e}")
            raise HTTPException(status_code=500, detail="could not save settings")
        return public_settings(config)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
