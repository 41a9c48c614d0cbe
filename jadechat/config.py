"""Tuning constants and per-chat settings."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

CODE_FENCE = "```"
LATEX_FENCE = "$$"

DEFAULT_INSTRUCTIONS = (
    "You are Jade, a local-first assistant running entirely on-device. "
    "Use fenced ``` blocks for code and $$ blocks for display math."
)

STREAM_UI_MIN_INTERVAL_SECONDS = 0.022
STREAM_UI_MAX_INTERVAL_SECONDS = 0.065
STREAM_UI_MIN_CHARS_DELTA = 8
STREAM_UI_BREAK_CHARS = frozenset({".", "!", "?", ":", ";", "\n"})
STREAM_FIRST_CHUNK_TIMEOUT_SECONDS = 25.0
STREAM_CHUNK_IDLE_TIMEOUT_SECONDS = 12.0


@dataclass(frozen=True)
class ChatSettings:
    instructions: str = DEFAULT_INSTRUCTIONS
    segment_while_streaming: bool = True
    min_interval_seconds: float = STREAM_UI_MIN_INTERVAL_SECONDS
    max_interval_seconds: float = STREAM_UI_MAX_INTERVAL_SECONDS
    min_chars_delta: int = STREAM_UI_MIN_CHARS_DELTA
    first_chunk_timeout_seconds: float = STREAM_FIRST_CHUNK_TIMEOUT_SECONDS
    chunk_idle_timeout_seconds: float = STREAM_CHUNK_IDLE_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if not self.instructions.strip():
            raise ValueError("instructions must not be blank")
        if self.min_interval_seconds < 0:
            raise ValueError("min_interval_seconds must be >= 0")
        if self.max_interval_seconds < self.min_interval_seconds:
            raise ValueError("max_interval_seconds must be >= min_interval_seconds")
        if type(self.min_chars_delta) is not int or self.min_chars_delta < 1:
            raise ValueError("min_chars_delta must be an int >= 1")
        if self.first_chunk_timeout_seconds <= 0 or self.chunk_idle_timeout_seconds <= 0:
            raise ValueError("stream timeouts must be > 0")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatSettings:
        """Build settings from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
