"""Delegation usage statistics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True, slots=True)
class AgentStat:
    """One delegated run of a role."""

    role: str
    provider: str
    model: str
    duration_ms: int
    success: bool
    input_length: int
    output_length: int
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AgentStat":
        return cls(**data)

    def __str__(self) -> str:
        status = "OK" if self.success else "FAIL"
        return (
            f"[{self.timestamp}] {self.role} ({self.provider}/{self.model}) "
            f"- {self.duration_ms}ms - {status}"
        )


__all__ = ["AgentStat"]
