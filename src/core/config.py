"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP/LLM) read config consistently.
- Hosts the credential guard, which must run before any network I/O.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.registry import CREDENTIAL_VARIABLES, Provider
from core.errors import CredentialError


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "x-context"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "x-context"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "x-context"
    return Path.home() / ".config" / "x-context"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typing + validation at the edge (env vars) without polluting the core.
    - One configuration contract for CLI and adapters.

    Provider keys use the vendors' conventional variable names, so they
    ignore `env_prefix`.
    """

    model_config = SettingsConfigDict(
        env_prefix="X_CONTEXT_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per documentation request (seconds).",
    )
    user_agent: str = Field(
        default="x-context/0.1 (+https://github.com/morinokami/x-context)",
        min_length=1,
        description="User-Agent for documentation requests.",
    )

    ai_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Timeout for the provider call (seconds).",
    )
    max_output_tokens: int = Field(
        default=16_000,
        ge=256,
        description="Output token cap for providers that require one (Anthropic).",
    )
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta/openai/",
        min_length=8,
        description="OpenAI-compatible endpoint for Gemini.",
    )

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
    )
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ANTHROPIC_API_KEY", "anthropic_api_key"),
    )
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_GENERATIVE_AI_API_KEY", "gemini_api_key"),
    )

    def api_key_for(self, provider: Provider) -> str | None:
        keys = {
            Provider.OPENAI: self.openai_api_key,
            Provider.ANTHROPIC: self.anthropic_api_key,
            Provider.GEMINI: self.gemini_api_key,
        }
        return keys[provider]


def require_api_key(provider: Provider, settings: AppSettings) -> str:
    """Return the provider's API key or raise `CredentialError`."""

    key = (settings.api_key_for(provider) or "").strip()
    if not key:
        raise CredentialError(provider.value, CREDENTIAL_VARIABLES[provider])
    return key
