"""Environment-bound configuration objects.

This module provides Pydantic BaseSettings-based configuration loading from .env files.
All settings classes automatically load from environment variables with support for
multiple alias names (e.g., OPENAI_API_KEY and MODEL_OPENAI_API_KEY both work).

Example:
    from makerAgent.config.settings import get_settings

    settings = get_settings()  # Cached singleton
    provider = settings.models.default_provider
    timeout = settings.governance.shell_timeout_seconds
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from makerAgent.models.role_config import AgentRoleConfig, Provider


load_dotenv()


class ModelRoutingSettings(BaseSettings):
    """Provider endpoints, credentials and the default role model.

    Every role starts on ``default_provider`` / ``default_model`` until a
    per-role override is stored for the current project and team.
    """

    default_provider: Provider = Field(
        default=Provider.OPENAI,
        validation_alias=AliasChoices("MAKER_DEFAULT_PROVIDER", "MODEL_PROVIDER"),
    )
    default_model: str = Field(
        default="gpt-4o-mini",
        validation_alias=AliasChoices("MAKER_DEFAULT_MODEL", "MODEL_NAME"),
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, alias="MODEL_TEMPERATURE")

    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "MODEL_OPENAI_API_KEY"),
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_BASE_URL", "MODEL_OPENAI_BASE_URL"),
    )

    deepseek_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEEPSEEK_API_KEY", "MODEL_DEEPSEEK_API_KEY"),
    )
    deepseek_base_url: str = Field(
        default="https://api.deepseek.com/v1",
        validation_alias=AliasChoices("DEEPSEEK_BASE_URL", "MODEL_DEEPSEEK_BASE_URL"),
    )

    ollama_base_url: str = Field(
        default="http://localhost:11434/v1",
        validation_alias=AliasChoices("OLLAMA_BASE_URL", "MODEL_OLLAMA_BASE_URL"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def default_role_config(self) -> AgentRoleConfig:
        return AgentRoleConfig(provider=self.default_provider, model_name=self.default_model)


class GovernanceSettings(BaseSettings):
    """Runtime governance and control settings.

    Controls agent behavior limits and policies:
    - max_loops: recursion limit for one delegated conversation (default: 50)
    - shell_timeout_seconds: wall clock limit of run_shell (default: 10)
    - stimulus_pending_limit: pending items shown in the stimulus report (default: 5)
    - delegation_queue_size: bound of the fragment queue drained per delegation
    - read_file_max_chars: read_file truncation threshold
    """

    max_loops: int = Field(default=50, ge=1, le=500, alias="MAX_LOOPS")
    shell_timeout_seconds: int = Field(default=10, ge=1, le=600, alias="SHELL_TIMEOUT_SECONDS")
    stimulus_pending_limit: int = Field(default=5, ge=1, le=50, alias="STIMULUS_PENDING_LIMIT")
    delegation_queue_size: int = Field(default=64, ge=1, le=4096, alias="DELEGATION_QUEUE_SIZE")
    read_file_max_chars: int = Field(default=10_000, ge=100, alias="READ_FILE_MAX_CHARS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class StorageSettings(BaseSettings):
    """Where goals, memories, role configs, stats and action logs live."""

    data_dir: Path = Field(
        default=Path.home() / ".makeragent",
        validation_alias=AliasChoices("MAKER_DATA_DIR", "DATA_DIR"),
    )
    team: str = Field(default="default", alias="MAKER_TEAM")
    roles_config_path: str = Field(default="makerAgent/config/roles.yaml", alias="ROLES_CONFIG_PATH")
    denylist_config_path: Optional[str] = Field(default=None, alias="COMMAND_DENYLIST_PATH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class ObservabilitySettings(BaseSettings):
    """Logging configuration."""

    log_dir: str = Field(default="logs", alias="LOG_DIR")
    console_level: str = Field(default="WARNING", alias="LOG_CONSOLE_LEVEL")
    log_prompt_max_length: int = Field(default=500, ge=100, le=5000, alias="LOG_PROMPT_MAX_LENGTH")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class Settings(BaseSettings):
    """Root application settings loaded from .env file.

    Hierarchical structure containing four nested settings groups:
    - models: providers, credentials and default role model (ModelRoutingSettings)
    - governance: delegation and tool limits (GovernanceSettings)
    - storage: data directory, team and config file paths (StorageSettings)
    - observability: logging (ObservabilitySettings)

    Use get_settings() to obtain a cached singleton instance.
    """

    models: ModelRoutingSettings = Field(default_factory=ModelRoutingSettings)
    governance: GovernanceSettings = Field(default_factory=GovernanceSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
        case_sensitive=False,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Returns:
        Settings: Cached application settings instance
    """
    return Settings()
