"""Provider settings for ticket extraction.

The chosen AI provider is persisted as a single JSON-encoded entry under a
fixed namespace in a small key-value file. Reads merge the stored entry over
``DEFAULT_SETTINGS`` so fields added later degrade gracefully, and never raise.
"""
from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from core.config import Settings

log = logging.getLogger(__name__)

OLLAMA_BASE_URL = "http://localhost:11434/v1"
OLLAMA_DEFAULT_MODEL = "llama3"
GEMINI_DEFAULT_MODEL = "gemini-2.5-flash"


class ProviderKind(str, enum.Enum):
    GEMINI_ENV = "GEMINI_ENV"  # generative API, key from the process environment
    GEMINI_CUSTOM = "GEMINI_CUSTOM"  # generative API, user supplied key
    OPENAI = "OPENAI"  # OpenAI-compatible chat completions (Ollama, DeepSeek, ...)

    @property
    def is_generative(self) -> bool:
        return self in (ProviderKind.GEMINI_ENV, ProviderKind.GEMINI_CUSTOM)


@dataclass(frozen=True)
class ProviderConfig:
    provider: ProviderKind = ProviderKind.GEMINI_ENV
    api_key: str = ""
    base_url: str = OLLAMA_BASE_URL
    model: str = GEMINI_DEFAULT_MODEL

    def to_dict(self) -> Dict[str, str]:
        return {
            "provider": self.provider.value,
            "apiKey": self.api_key,
            "baseUrl": self.base_url,
            "model": self.model,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderConfig":
        """Merge a stored entry over the defaults.

        Raises:
            ValueError: If the provider tag is unknown
        """
        merged = {**DEFAULT_SETTINGS.to_dict(), **data}
        return cls(
            provider=ProviderKind(merged["provider"]),
            api_key=str(merged["apiKey"] or ""),
            base_url=str(merged["baseUrl"] or ""),
            model=str(merged["model"] or ""),
        )


DEFAULT_SETTINGS = ProviderConfig()


def with_provider(config: ProviderConfig, provider: ProviderKind) -> ProviderConfig:
    """Switch provider, applying that provider's usual defaults."""
    updated = replace(config, provider=provider)
    if provider is ProviderKind.OPENAI:
        # Only reset when the URL still looks like the untouched default
        if config.base_url == DEFAULT_SETTINGS.base_url:
            updated = replace(updated, base_url=OLLAMA_BASE_URL, model=OLLAMA_DEFAULT_MODEL)
    else:
        updated = replace(updated, model=GEMINI_DEFAULT_MODEL)
    return updated


class SettingsStore:
    def __init__(self, path: str | Path, *, namespace: str = "elder_journey_settings") -> None:
        self.path = Path(path)
        self.namespace = namespace

    def _read_entries(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            entries = json.load(f)
        if not isinstance(entries, dict):
            raise ValueError(f"settings file {self.path} does not hold an object")
        return entries

    def resolve(self) -> ProviderConfig:
        try:
            saved = self._read_entries().get(self.namespace)
            if not saved:
                return DEFAULT_SETTINGS
            data = json.loads(saved) if isinstance(saved, str) else saved
            if not isinstance(data, dict):
                raise ValueError(f"entry {self.namespace} is not an object")
            config = ProviderConfig.from_dict(data)
            log.info(f"Loaded {config.provider.value} settings from {self.path}")
            return config
        except (OSError, ValueError) as e:
            log.error(f"Failed to load settings from {self.path}: {e}")
            return DEFAULT_SETTINGS

    def save(self, config: ProviderConfig) -> None:
        try:
            entries = self._read_entries()
        except (OSError, ValueError) as e:
            log.warning(f"Overwriting unreadable settings file {self.path}: {e}")
            entries = {}
        entries[self.namespace] = json.dumps(config.to_dict(), ensure_ascii=False)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(entries, f, ensure_ascii=False, indent=2)
        log.info(f"Saved {config.provider.value} settings to {self.path}")


def default_store(settings: Optional[Settings] = None) -> SettingsStore:
    settings = settings or Settings()
    return SettingsStore(settings.settings_path, namespace=settings.settings_namespace)


def resolve(store: Optional[SettingsStore] = None) -> ProviderConfig:
    """Read the persisted provider configuration, falling back to defaults."""
    return (store or default_store()).resolve()
