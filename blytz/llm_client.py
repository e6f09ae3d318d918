from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional, Sequence

from dotenv import load_dotenv
from openai import OpenAI

from .config import load_model_config, settings

# Load API keys from the local .env file
load_dotenv(settings.secrets_env_file)

_API_KEY_VARS = {
    "google": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
}


class LLMClient:
    """Wrapper around the text generation providers (Google, OpenAI, Anthropic, Ollama)."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        model_cfg: Optional[dict[str, Any]] = None,
    ) -> None:
        """Initialize the client for one model.

        Args:
            model_name: Name of the model to use (e.g., 'gemini-2.5-flash', 'gpt-4o-mini')
            model_cfg: Optional model config dict (loaded from YAML if not provided)
        """
        cfg = model_cfg or load_model_config()

        models_list = cfg.get("models", [])
        if model_name:
            model_info = next((m for m in models_list if m.get("name") == model_name), None)
            if not model_info:
                raise ValueError(f"Model '{model_name}' is not configured")
        else:
            model_info = models_list[0] if models_list else {"name": "gemini-2.5-flash", "provider": "google"}

        self.model = model_info.get("name", "gemini-2.5-flash")
        self.provider = model_info.get("provider", "google").lower()
        self.temperature = float(cfg.get("temperature", 0.7))
        self.max_tokens = int(cfg.get("max_tokens", 1024))

        if self.provider == "google":
            self._init_google(cfg)
        elif self.provider == "openai":
            self._init_openai(cfg)
        elif self.provider == "anthropic":
            self._init_anthropic(cfg)
        elif self.provider == "ollama":
            self._init_ollama(cfg)
        else:
            raise ValueError(f"Unsupported provider: {self.provider}")

    def _init_google(self, cfg: dict[str, Any]) -> None:
        """Initialize Google Gemini client."""
        from google import genai

        self.client = genai.Client(api_key=self._get_api_key(_API_KEY_VARS["google"]))
        self.client_type = "google"

    def _init_openai(self, cfg: dict[str, Any]) -> None:
        api_key = self._get_api_key(_API_KEY_VARS["openai"])
        base_url = cfg.get("providers", {}).get("openai", {}).get("base_url", "https://api.openai.com/v1")

        self.client = OpenAI(base_url=base_url, api_key=api_key)
        self.client_type = "openai"

    def _init_anthropic(self, cfg: dict[str, Any]) -> None:
        import anthropic

        self.client = anthropic.Anthropic(api_key=self._get_api_key(_API_KEY_VARS["anthropic"]))
        self.client_type = "anthropic"

    def _init_ollama(self, cfg: dict[str, Any]) -> None:
        base_url = cfg.get("providers", {}).get("ollama", {}).get("base_url", "http://localhost:11434/v1")

        self.client = OpenAI(base_url=base_url, api_key="ollama")
        self.client_type = "openai"  # Ollama uses OpenAI-compatible API

    @staticmethod
    def _get_api_key(env_vars: Sequence[str]) -> str:
        """Get API key from environment or .env file."""
        for env_var in env_vars:
            api_key = os.getenv(env_var)
            if api_key:
                return api_key

        env_file = Path(settings.secrets_env_file)
        if env_file.exists():
            for line in env_file.read_text().splitlines():
                for env_var in env_vars:
                    if line.startswith(f"{env_var}="):
                        value = line.split("=", 1)[1].strip()
                        if value:
                            return value

        raise ValueError(
            f"{env_vars[0]} not found. Please add it to {env_file}:\n"
            f"{env_vars[0]}=your-key-here"
        )

    def generate_text(self, system: str, user: str) -> str:
        """Send one prompt and return the reply text. No retries."""

        if self.client_type == "google":
            text = self._generate_google(system, user)
        elif self.client_type == "anthropic":
            text = self._generate_anthropic(system, user)
        else:
            text = self._generate_openai(system, user)

        text = (text or "").strip()
        if not text:
            raise RuntimeError(f"{self.provider} returned an empty reply")
        return text

    def _generate_openai(self, system: str, user: str) -> str:
        resp = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
        )
        return resp.choices[0].message.content or ""

    def _generate_google(self, system: str, user: str) -> str:
        from google.genai import types

        response = self.client.models.generate_content(
            model=self.model,
            contents=user,
            config=types.GenerateContentConfig(
                system_instruction=system,
                temperature=self.temperature,
            ),
        )
        return response.text or ""

    def _generate_anthropic(self, system: str, user: str) -> str:
        response = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            system=system,
            messages=[{"role": "user", "content": user}],
        )
        return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
