"""Per-role model selection."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class Provider(str, Enum):
    """Model backends a role can run on."""

    OPENAI = "OPENAI"
    DEEPSEEK = "DEEPSEEK"
    OLLAMA = "OLLAMA"


class AgentRoleConfig(BaseModel):
    """Which backend and model a role currently uses.

    Persisted as JSON through this schema, e.g.
    ``{"provider": "OLLAMA", "model_name": "qwen2.5-coder"}``.
    """

    model_config = ConfigDict(frozen=True)

    provider: Provider
    model_name: str

    @field_validator("provider", mode="before")
    @classmethod
    def _normalize_provider(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("model_name")
    @classmethod
    def _require_model_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("model_name must not be empty")
        return value

    @classmethod
    def parse(cls, raw: str | bytes) -> "AgentRoleConfig":
        """Validate a stored payload.

        Raises:
            ValueError: for malformed JSON, unknown providers or empty model names.
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid role config {raw!r}: {e.errors()[0]['msg']}") from e

    def serialize(self) -> str:
        return self.model_dump_json()

    def __str__(self) -> str:
        return f"{self.provider.value}/{self.model_name}"


__all__ = ["Provider", "AgentRoleConfig"]
