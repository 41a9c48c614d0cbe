"""
Inference backends for Jade chat.

A backend hands the chat layer a model it can ask about availability and
sessions that stream a reply to a prompt. Apple Foundation Models is the
default backend; tests and demos install a scripted one:

    from jadechat.protocols import use_backend

    with use_backend(ScriptedBackend(["Hello", " world"])):
        ...
"""

from __future__ import annotations

import contextlib
import importlib
import logging
from collections.abc import AsyncIterator, Iterator
from functools import lru_cache
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger("jadechat")

__all__ = [
    "AppleFMBackend",
    "AppleFMModel",
    "AppleFMSession",
    "BackendProtocol",
    "ModelProtocol",
    "StreamingSessionProtocol",
    "get_backend",
    "set_backend",
    "use_backend",
]


@runtime_checkable
class ModelProtocol(Protocol):
    def is_available(self) -> tuple[bool, str | None]:
        """Return ``(available, reason_if_not)``."""
        ...


@runtime_checkable
class StreamingSessionProtocol(Protocol):
    """Streams the reply to one prompt.

    Chunks may be cumulative snapshots or deltas; :class:`jadechat.streaming.Accumulator`
    tells them apart.
    """

    def stream_response(self, prompt: str) -> AsyncIterator[Any]: ...


@runtime_checkable
class BackendProtocol(Protocol):
    def create_model(self) -> ModelProtocol: ...

    def create_session(self, model: ModelProtocol, instructions: str) -> StreamingSessionProtocol: ...


# ---------------------------------------------------------------------------
# Apple Foundation Models
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _apple_sdk() -> Any:
    # Deferred so that segmenting and rendering work without the SDK installed.
    return importlib.import_module("apple_fm_sdk")


class AppleFMModel:
    """``apple_fm_sdk.SystemLanguageModel`` with the reason coerced to text."""

    def __init__(self) -> None:
        self.raw = _apple_sdk().SystemLanguageModel()

    def is_available(self) -> tuple[bool, str | None]:
        ok, reason = self.raw.is_available()
        return ok, (str(reason) if reason is not None else None)


class AppleFMSession:
    def __init__(self, model: ModelProtocol, instructions: str) -> None:
        self._session = _apple_sdk().LanguageModelSession(
            model=getattr(model, "raw", model), instructions=instructions
        )

    async def stream_response(self, prompt: str) -> AsyncIterator[str]:
        # The SDK yields cumulative snapshot objects; the chat layer wants text.
        async for snapshot in self._session.stream_response(prompt):
            yield str(snapshot)


class AppleFMBackend:
    def create_model(self) -> AppleFMModel:
        return AppleFMModel()

    def create_session(self, model: ModelProtocol, instructions: str) -> AppleFMSession:
        return AppleFMSession(model, instructions)


# ---------------------------------------------------------------------------
# Active backend
# ---------------------------------------------------------------------------

_active: BackendProtocol = AppleFMBackend()


def get_backend() -> BackendProtocol:
    return _active


def set_backend(backend: BackendProtocol) -> BackendProtocol:
    """Make *backend* the active one and return the backend it replaced."""
    global _active
    if not isinstance(backend, BackendProtocol):
        raise TypeError(
            "backend must define create_model() and create_session(model, instructions); "
            f"got {type(backend).__name__}"
        )
    previous, _active = _active, backend
    logger.debug("[Jade Backend] %s -> %s", type(previous).__name__, type(backend).__name__)
    return previous


@contextlib.contextmanager
def use_backend(backend: BackendProtocol) -> Iterator[BackendProtocol]:
    """Activate *backend* for the duration of a ``with`` block."""
    previous = set_backend(backend)
    try:
        yield backend
    finally:
        set_backend(previous)
