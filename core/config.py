# core/config.py
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Persisted provider settings (one JSON entry under a fixed namespace)
    settings_path: str = os.path.expanduser(
        os.getenv("JOURNEY_SETTINGS_PATH", "~/.elder_journey/settings.json")
    )
    settings_namespace: str = os.getenv("JOURNEY_SETTINGS_NAMESPACE", "elder_journey_settings")

    gemini_base_url: str = os.getenv(
        "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
