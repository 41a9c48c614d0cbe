"""
Explicit key-event channel for the prompt field.

The host UI forwards key presses from its text control to a
:class:`SubmitChannel`; nothing here listens to process-wide events. Enter
submits the trimmed prompt, Shift+Enter inserts a newline.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger("jadechat")

__all__ = ["KeyAction", "KeyEvent", "SubmitChannel"]

ENTER_KEYS = frozenset({"enter", "return"})


@dataclass(frozen=True)
class KeyEvent:
    key: str
    shift: bool = False

    @property
    def is_enter(self) -> bool:
        return self.key.lower() in ENTER_KEYS


class KeyAction(enum.Enum):
    SUBMIT = "submit"
    NEWLINE = "newline"
    IGNORED = "ignored"  # Enter on a blank prompt
    PASSTHROUGH = "passthrough"  # not ours; the text control handles it


class SubmitChannel:
    """Holds the prompt text and turns Enter presses into submissions."""

    def __init__(self, on_submit: Callable[[str], None] | None = None) -> None:
        self.text = ""
        self._subscribers: list[Callable[[str], None]] = []
        if on_submit is not None:
            self.subscribe(on_submit)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register *callback*; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def type_text(self, text: str) -> None:
        self.text += text

    def set_text(self, text: str) -> None:
        self.text = text

    def handle(self, event: KeyEvent) -> KeyAction:
        if not event.is_enter:
            return KeyAction.PASSTHROUGH
        if event.shift:
            self.text += "\n"
            return KeyAction.NEWLINE

        prompt = self.text.strip()
        if not prompt:
            return KeyAction.IGNORED

        self.text = ""
        logger.debug(f"[Jade Input] Submitting prompt ({len(prompt)} chars).")
        for callback in list(self._subscribers):
            callback(prompt)
        return KeyAction.SUBMIT
