"""
Errors raised when a conversation cannot reach a usable model.

Segmentation and rendering never raise these. They come from the inference
side only: the optional ``apple_fm_sdk`` is missing, or the model it exposes
reports itself unavailable.
"""

from __future__ import annotations

import importlib
from typing import Any

__all__ = [
    "ModelSetupError",
    "ensure_model_available",
    "require_apple_fm",
]

DOCTOR_HINT = "Run `jadechat doctor` for details, or install the extra: pip install 'jadechat[apple]'."


class ModelSetupError(RuntimeError):
    """The on-device model cannot be used from *context*, for *reason*."""

    def __init__(self, context: str, reason: str) -> None:
        self.context = context.strip() or "jadechat"
        self.reason = reason
        super().__init__(f"[{self.context}] On-device model unavailable: {reason}\n{DOCTOR_HINT}")


def _describe(exc: BaseException) -> str:
    return f"{type(exc).__name__}: {exc}"


def ensure_model_available(model: Any, *, context: str) -> None:
    """Raise :class:`ModelSetupError` unless ``model.is_available()`` says yes."""
    try:
        available, reason = model.is_available()
    except Exception as exc:
        raise ModelSetupError(context, _describe(exc)) from exc
    if not available:
        raise ModelSetupError(context, str(reason) if reason else "model reported unavailable")


def require_apple_fm(context: str) -> tuple[Any, Any]:
    """Import ``apple_fm_sdk``, build its system model and check it is usable.

    Returns ``(module, model)``.
    """
    try:
        fm = importlib.import_module("apple_fm_sdk")
        model = fm.SystemLanguageModel()
    except Exception as exc:
        raise ModelSetupError(context, _describe(exc)) from exc
    ensure_model_available(model, context=context)
    return fm, model
