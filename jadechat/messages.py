"""Chat message model and the policy for how a message is split for display."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .segments import Segment, segment

__all__ = ["Message", "Role", "display_segments"]


class Role(enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass
class Message:
    """A single chat message.

    ``content`` grows while a reply streams in; ``is_complete`` flips once the
    model is done (or the turn was cancelled or failed).
    """

    role: Role
    content: str = ""
    is_complete: bool = True
    images: list[str] = field(default_factory=list)
    videos: list[str] = field(default_factory=list)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(Role.USER, content)

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(Role.SYSTEM, content)

    @classmethod
    def pending_assistant(cls) -> Message:
        return cls(Role.ASSISTANT, "", is_complete=False)

    def append(self, chunk: str) -> None:
        self.content += chunk

    def replace(self, text: str) -> None:
        self.content = text

    def complete(self) -> None:
        self.is_complete = True

    def segments(self) -> list[Segment]:
        return segment(self.content)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "is_complete": self.is_complete,
            "images": list(self.images),
            "videos": list(self.videos),
        }


def display_segments(message: Message, *, segment_while_streaming: bool = True) -> list[Segment]:
    """
    Segments to render for *message* right now.

    With ``segment_while_streaming=False`` an in-flight message is shown as a
    single markdown block and only split into code/latex once complete.
    """
    if message.is_complete or segment_while_streaming:
        return message.segments()
    text = message.content.strip()
    return [Segment.markdown(text)] if text else []
