from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    api_base_url: str = "http://localhost:8080/api/v1"
    request_timeout: float = 10.0
    currency: str = "usd"
    state_path: str = ".blytz/state.json"
    chat_config_path: str = "config/model_config.yaml"
    secrets_env_file: str = "config/.env"
    chat_fallback_message: str = "Connection to the network lost. Try again in a moment."
    version: str = "v0.3"

    class Config:
        env_prefix = "BLYTZ_"
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # API keys live in the same .env file


def load_settings() -> Settings:
    """Provide a reusable settings singleton."""

    return Settings()


def load_model_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load the chat model configuration from YAML.

    Returns the full config with providers, temperature, and models list.
    """

    cfg_path = Path(path or settings.chat_config_path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Model config not found at {cfg_path}")

    with cfg_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if "models" not in data:
        raise ValueError("model_config.yaml must contain a 'models' list.")

    for model in data.get("models", []):
        if "provider" not in model:
            raise ValueError(f"Model '{model.get('name', 'unknown')}' must have a 'provider' field.")

    return data


settings = load_settings()
