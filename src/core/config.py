"""Configuración del Core.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Lets adapters (HTTP provider, content stores) read config consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.language import Language


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "catalog-localizer"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "catalog-localizer"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "catalog-localizer"
    return Path.home() / ".config" / "catalog-localizer"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# catalog-localizer user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed + validated at the edge (env vars) without leaking logic into the core.
    - One configuration contract for the CLI, the engine and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_LOCALIZER_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    supported_languages: list[Language] = Field(
        default_factory=lambda: list(Language),
        min_length=1,
        description="Display languages; declared order is the fallback order.",
    )
    default_language: Language = Field(
        default=Language.SPANISH,
        description="Authoring/source language of stored content.",
    )

    provider_url: str = Field(
        default="https://api.mymemory.translated.net/get",
        min_length=8,
        description="Translation provider endpoint (MyMemory compatible).",
    )
    provider_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout per translate call (seconds).",
    )
    translation_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        le=60,
        description="Minimum delay between provider calls (seconds).",
    )
    user_agent: str = Field(
        default="catalog-localizer/0.1 (+https://local)",
        min_length=1,
        description="User-Agent for provider requests.",
    )

    store_path: Path = Field(
        default=Path("data") / "content.json",
        description="JSON document store used by the CLI.",
    )

    log_level: str = Field(default="INFO", description="DEBUG, INFO, WARNING, ...")
    log_json: bool = Field(default=False, description="Render logs as JSON lines.")

    @model_validator(mode="after")
    def check_default_language(self) -> "AppSettings":
        if self.default_language not in self.supported_languages:
            raise ValueError(
                f"default_language {self.default_language.value!r} is not in supported_languages"
            )
        return self

    @property
    def language_codes(self) -> list[str]:
        return [lang.value for lang in self.supported_languages]

    def target_languages(self) -> list[str]:
        """Languages the migration engine fills: supported minus the default."""

        return [code for code in self.language_codes if code != self.default_language.value]
