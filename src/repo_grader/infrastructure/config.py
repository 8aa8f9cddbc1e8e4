"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

GROQ_BASE_URL = "https://api.groq.com/openai/v1"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """One generative provider and the models to try on it, in order."""

    name: str
    api_key: str
    models: tuple[str, ...]
    base_url: str | None = None


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None

    groq_api_key: SecretStr | None = None
    groq_models: list[str] = ["llama-3.1-8b-instant", "llama3-8b-8192", "mixtral-8x7b-32768"]
    gemini_api_key: SecretStr | None = None
    gemini_models: list[str] = ["gemini-1.5-flash-latest", "gemini-1.5-pro-latest"]
    openai_api_key: SecretStr | None = None
    openai_models: list[str] = ["gpt-4o-mini"]

    producer_timeout_seconds: float = 20.0
    max_prompt_tokens: int = 24_000
    max_tree_entries: int = 300
    max_text_chars: int = 5000
    max_commits: int = 10

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def provider_configs(self) -> list[ProviderConfig]:
        """Return configured providers in priority order: Groq, Gemini, OpenAI.

        Providers without an API key or without models are skipped.
        """
        candidates = [
            ("groq", self.groq_api_key, self.groq_models, GROQ_BASE_URL),
            ("gemini", self.gemini_api_key, self.gemini_models, GEMINI_BASE_URL),
            ("openai", self.openai_api_key, self.openai_models, None),
        ]
        return [
            ProviderConfig(
                name=name,
                api_key=key.get_secret_value(),
                models=tuple(models),
                base_url=base_url,
            )
            for name, key, models, base_url in candidates
            if key is not None and key.get_secret_value() and models
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
