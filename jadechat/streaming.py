"""
Re-segmentation of streamed model output.

A reply arrives as a sequence of chunks. Each chunk is folded into the full
text so far, and the full text is re-segmented from scratch; nothing about a
previous parse is reused. :class:`FrameThrottle` keeps the number of re-renders
reasonable while tokens are flowing.

Usage::

    async for frame in stream_segments(session.stream_response(prompt)):
        view.show(frame.segments)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterable, AsyncIterator, Callable, Iterable
from dataclasses import dataclass
from typing import Any, Union

from .config import STREAM_UI_BREAK_CHARS, ChatSettings
from .segments import Segment, segment

logger = logging.getLogger("jadechat")

__all__ = ["Accumulator", "FrameThrottle", "SegmentFrame", "stream_segments"]


class Accumulator:
    """Folds streamed chunks into the full reply text.

    Some SDK builds stream cumulative snapshots, others token deltas. A chunk
    that starts with the text seen so far is taken as a snapshot and replaces
    it; anything else is appended.
    """

    def __init__(self, text: str = "") -> None:
        self.text = text

    def feed(self, chunk: Any) -> str:
        piece = str(chunk)
        if self.text and piece.startswith(self.text):
            self.text = piece
        else:
            self.text += piece
        return self.text


class FrameThrottle:
    """Decides when a new snapshot is worth pushing to the view."""

    def __init__(
        self,
        *,
        min_interval: float,
        max_interval: float,
        min_chars_delta: int,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.min_interval = min_interval
        self.max_interval = max_interval
        self.min_chars_delta = min_chars_delta
        self._clock = clock
        self._last_text = ""
        self._last_commit = clock()

    @classmethod
    def from_settings(cls, settings: ChatSettings, **kwargs: Any) -> FrameThrottle:
        return cls(
            min_interval=settings.min_interval_seconds,
            max_interval=settings.max_interval_seconds,
            min_chars_delta=settings.min_chars_delta,
            **kwargs,
        )

    def should_commit(self, current_text: str) -> bool:
        previous_text = self._last_text
        if current_text == previous_text:
            return False
        if not previous_text:
            return bool(current_text)

        delta_chars = max(0, len(current_text) - len(previous_text))
        elapsed = self._clock() - self._last_commit
        tail = current_text[-1] if current_text else ""

        if delta_chars >= self.min_chars_delta:
            return True
        if tail in STREAM_UI_BREAK_CHARS and elapsed >= self.min_interval:
            return True
        return elapsed >= self.max_interval

    def commit(self, text: str) -> None:
        self._last_text = text
        self._last_commit = self._clock()


@dataclass(frozen=True)
class SegmentFrame:
    """The segments of a reply at one point in its stream."""

    text: str
    segments: tuple[Segment, ...]
    is_complete: bool = False

    @classmethod
    def of(cls, text: str, *, is_complete: bool = False) -> SegmentFrame:
        return cls(text=text, segments=tuple(segment(text)), is_complete=is_complete)


async def _to_async(iterable: Union[Iterable[Any], AsyncIterable[Any]]) -> AsyncIterator[Any]:
    if isinstance(iterable, AsyncIterable):
        async for item in iterable:
            yield item
    else:
        for idx, item in enumerate(iterable):
            yield item
            if idx > 0 and idx % 100 == 0:
                await asyncio.sleep(0)


async def stream_segments(
    chunks: Union[Iterable[Any], AsyncIterable[Any]],
    *,
    settings: ChatSettings | None = None,
    throttle: FrameThrottle | None = None,
) -> AsyncIterator[SegmentFrame]:
    """
    Yield :class:`SegmentFrame` snapshots as *chunks* arrive.

    Intermediate frames are throttled; the last frame is always emitted with
    ``is_complete=True`` and holds the segments of the full text.
    """
    settings = settings or ChatSettings()
    throttle = throttle or FrameThrottle.from_settings(settings)
    acc = Accumulator()
    frames = 0

    async for chunk in _to_async(chunks):
        text = acc.feed(chunk)
        if throttle.should_commit(text):
            throttle.commit(text)
            frames += 1
            yield SegmentFrame.of(text)

    frames += 1
    logger.debug(f"[Jade Stream] Stream finished: {len(acc.text)} chars, {frames} frames.")
    yield SegmentFrame.of(acc.text, is_complete=True)
