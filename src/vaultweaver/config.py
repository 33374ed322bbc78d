"""Application configuration.

Service-level configuration is loaded from environment variables. For local development, you can
provide a `.env` file and set `VAULTWEAVER_ENV_FILE` to point to it.

Per-run generation parameters live in :class:`GenerationConfig`, which is validated once when a
run starts and never changes afterwards.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaultweaver.core.vault import sanitize_filename


class Settings(BaseSettings):
    """VaultWeaver settings.

    All fields are environment-configurable. Prefix is `VAULTWEAVER_`.
    """

    model_config = SettingsConfigDict(
        env_prefix="VAULTWEAVER_",
        env_file=None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Core
    app_env: Literal["dev", "prod"] = Field(default="dev")
    log_level: str = Field(default="INFO")

    # LLM
    openai_api_key: str | None = Field(default=None)
    openai_base_url: str | None = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    openai_timeout_s: float = Field(default=120.0)

    # Web research
    search_max_results: int = Field(default=5, ge=1, le=50)
    tavily_api_key: str | None = Field(default=None)
    tavily_api_base_url: str = Field(default="https://api.tavily.com")
    tavily_search_depth: Literal["basic", "advanced"] = Field(default="basic")
    tavily_timeout_s: float = Field(default=30.0, ge=1.0, le=300.0)
    tavily_max_retries: int = Field(default=3, ge=0, le=10)
    tavily_retry_backoff_s: float = Field(default=0.75, ge=0.0, le=30.0)
    tavily_retry_max_backoff_s: float = Field(default=8.0, ge=0.0, le=120.0)

    # Redis (optional)
    redis_enabled: bool = Field(default=False)
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_key_prefix: str = Field(default="vaultweaver")

    # Scheduler
    loop_yield_s: float = Field(default=0.1, ge=0.0, le=10.0)
    parent_context_chars: int = Field(default=3000, ge=0)
    prompt_context_chars: int = Field(default=2000, ge=0)

    # Artifacts
    artifacts_dir: Path = Field(default=Path("artifacts"))


def load_settings() -> Settings:
    """Load settings from env.

    Returns:
        Settings: Parsed settings.
    """

    env_file_override = os.getenv("VAULTWEAVER_ENV_FILE")
    if env_file_override:
        env_path = Path(env_file_override)
        return Settings(_env_file=env_path)

    default_env = Path.cwd() / ".env"
    if default_env.exists():
        return Settings(_env_file=default_env)

    return Settings()


class GenerationConfig(BaseModel):
    """Parameters of a single vault generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid", protected_namespaces=())

    initial_topics: str
    mode: Literal["single", "moc"] = "single"
    moc_title: str = "Map of Contents"
    child_count: int = Field(default=3, ge=0)
    max_depth: int = Field(default=2, ge=0)
    # 0 means uncapped
    max_articles: int = Field(default=0, ge=0)
    parallel_mode: bool = False
    parallel_workers: int = Field(default=3, ge=1)

    # Passed through to the article generator
    model_name: str | None = None
    extra_prompt: str = ""
    model_only: bool = True

    def seed_topics(self) -> list[str]:
        """Resolve seed themes from the raw topic input.

        Single mode treats the whole input as one theme. MOC mode splits on commas.
        """

        if self.mode == "single":
            theme = self.initial_topics.strip()
            return [theme] if theme else []
        return [t.strip() for t in self.initial_topics.split(",") if t.strip()]

    @property
    def worker_count(self) -> int:
        return self.parallel_workers if self.parallel_mode else 1

    @property
    def vault_name(self) -> str:
        if self.mode == "moc":
            return sanitize_filename(self.moc_title) or "vault"
        seeds = self.seed_topics()
        return sanitize_filename(seeds[0]) if seeds else "vault"
