"""
Conversation orchestration.

:class:`Conversation` keeps the message history, sends a prompt to the active
backend and turns the streamed reply into :class:`SegmentFrame` updates for the
view. The assistant message is always marked complete when a turn ends, so a
cancelled or failed turn still renders whatever text arrived.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import AsyncIterator
from typing import Any

from .config import ChatSettings
from .exceptions import ModelSetupError, ensure_model_available
from .messages import Message, Role, display_segments
from .protocols import ModelProtocol, get_backend
from .segments import Segment
from .streaming import Accumulator, FrameThrottle, SegmentFrame

logger = logging.getLogger("jadechat")

__all__ = ["Conversation", "build_prompt"]


def build_prompt(history: list[Message], prompt: str) -> str:
    """Render prior turns plus the new prompt as one model input."""
    lines = [
        f"{message.role.value}: {message.content.strip()}"
        for message in history
        if message.role is not Role.SYSTEM and message.content.strip()
    ]
    if not lines:
        return prompt
    lines.append(f"{Role.USER.value}: {prompt}")
    return "\n\n".join(lines)


_END = object()
_CANCELLED = object()


async def _anext(stream: AsyncIterator[Any]) -> Any:
    try:
        return await stream.__anext__()
    except StopAsyncIteration:
        return _END


async def _next_chunk(
    stream: AsyncIterator[Any],
    timeout: float,
    label: str,
    cancel_event: asyncio.Event | None = None,
) -> Any:
    """Wait for the next chunk, a cancel request or the timeout, whichever comes first.

    Returns ``_END`` when the stream is exhausted and ``_CANCELLED`` once
    *cancel_event* is set. A chunk still pending at cancellation is dropped.
    """
    if cancel_event is not None and cancel_event.is_set():
        return _CANCELLED
    chunk_task = asyncio.ensure_future(_anext(stream))
    waiters = {chunk_task}
    cancel_task = None
    if cancel_event is not None:
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        waiters.add(cancel_task)
    try:
        done, _ = await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        if chunk_task in done:
            return chunk_task.result()
        chunk_task.cancel()
        await asyncio.gather(chunk_task, return_exceptions=True)
        if cancel_task in done:
            return _CANCELLED
        raise TimeoutError(f"Timed out waiting for {label} after {timeout:.0f}s.")
    finally:
        if cancel_task is not None and not cancel_task.done():
            cancel_task.cancel()
            await asyncio.gather(cancel_task, return_exceptions=True)


class Conversation:
    """A multi-turn chat against the active backend."""

    def __init__(
        self,
        settings: ChatSettings | None = None,
        model: ModelProtocol | None = None,
    ) -> None:
        self.settings = settings or ChatSettings()
        self.messages: list[Message] = []
        self._model = model
        self._model_checked = False

    def clear(self) -> None:
        self.messages = []

    def _ensure_model(self) -> ModelProtocol:
        if self._model is None:
            self._model = get_backend().create_model()
        if not self._model_checked:
            ensure_model_available(self._model, context="Conversation")
            self._model_checked = True
        return self._model

    def segments_for(self, message: Message) -> list[Segment]:
        return display_segments(
            message, segment_while_streaming=self.settings.segment_while_streaming
        )

    async def send(
        self,
        prompt: str,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[SegmentFrame]:
        """Send *prompt* and yield frames of the assistant reply as it streams."""
        text = prompt.strip()
        if not text:
            raise ValueError("prompt must not be blank")

        model = self._ensure_model()
        model_input = build_prompt(self.messages, text)
        self.messages.append(Message.user(text))
        reply = Message.pending_assistant()
        self.messages.append(reply)

        throttle = FrameThrottle.from_settings(self.settings)
        acc = Accumulator()
        stream = None
        first_chunk_seen = False
        start_time = time.perf_counter()

        try:
            session = get_backend().create_session(model, self.settings.instructions)
            stream = aiter(session.stream_response(model_input))
            while True:
                if first_chunk_seen:
                    timeout = self.settings.chunk_idle_timeout_seconds
                    label = "response stream"
                else:
                    timeout = self.settings.first_chunk_timeout_seconds
                    label = "first response chunk"
                chunk = await _next_chunk(stream, timeout, label, cancel_event)
                if chunk is _END:
                    break
                if chunk is _CANCELLED:
                    logger.info("[Jade Chat] Turn cancelled after %d chars.", len(acc.text))
                    break
                first_chunk_seen = True
                reply.replace(acc.feed(chunk))
                if throttle.should_commit(reply.content):
                    throttle.commit(reply.content)
                    yield SegmentFrame(reply.content, tuple(self.segments_for(reply)))
        except ModelSetupError:
            raise
        except Exception as e:
            logger.error(f"[Jade Chat] Generation failed: {e}")
            raise
        finally:
            reply.complete()
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                with contextlib.suppress(Exception):
                    await aclose()

        elapsed = time.perf_counter() - start_time
        logger.debug(f"[Jade Chat] Reply of {len(reply.content)} chars in {elapsed:.3f}s.")
        yield SegmentFrame(reply.content, tuple(reply.segments()), is_complete=True)
