"""
Message content segmentation.

Splits the raw text of a chat message into typed regions so each can be
rendered on its own: prose (markdown), fenced code blocks and fenced math
blocks. Only the outer fences are recognised:

.. code-block:: text

    Some prose.
    ```python
    print("code")
    ```
    $$
    e^{i\\pi} + 1 = 0
    $$

Parsing is a pure function of the full text, so it can be re-run on every
streamed snapshot of a message and once more when the message completes.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from .config import CODE_FENCE, LATEX_FENCE

__all__ = [
    "Segment",
    "SegmentKind",
    "keyed_segments",
    "parse_message_content",
    "segment",
]


class SegmentKind(enum.Enum):
    """Which renderer a segment belongs to."""

    MARKDOWN = "markdown"
    CODE = "code"
    LATEX = "latex"


@dataclass(frozen=True)
class Segment:
    """One contiguous, typed piece of message content."""

    kind: SegmentKind
    text: str

    def __post_init__(self) -> None:
        if not self.text.strip():
            raise ValueError(f"{self.kind.value} segment text must not be blank")

    @classmethod
    def markdown(cls, text: str) -> Segment:
        return cls(SegmentKind.MARKDOWN, text)

    @classmethod
    def code(cls, text: str) -> Segment:
        return cls(SegmentKind.CODE, text)

    @classmethod
    def latex(cls, text: str) -> Segment:
        return cls(SegmentKind.LATEX, text)

    def to_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "text": self.text}


def _flush(segments: list[Segment], kind: SegmentKind, buffer: list[str]) -> None:
    text = "".join(buffer).strip()
    if text:
        segments.append(Segment(kind, text))


def segment(content: str) -> list[Segment]:
    """
    Split *content* into an ordered list of :class:`Segment` values.

    A line starting with a code fence toggles code mode; a line that is
    exactly a math fence (ignoring surrounding whitespace) toggles latex mode.
    Code fences are checked first. Every other line is buffered, and the
    buffer is flushed whenever a fence toggles. A fence left open at the end
    of the text still produces a segment of its own kind, which keeps
    half-streamed messages renderable.

    Never raises and never returns a segment with blank text.
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    in_code = False
    in_latex = False

    for line in content.split("\n"):
        if line.startswith(CODE_FENCE):
            _flush(segments, SegmentKind.CODE if in_code else SegmentKind.MARKDOWN, buffer)
            buffer = []
            in_code = not in_code
        elif line.strip() == LATEX_FENCE:
            _flush(segments, SegmentKind.LATEX if in_latex else SegmentKind.MARKDOWN, buffer)
            buffer = []
            in_latex = not in_latex
        else:
            buffer.append(line + "\n")

    if in_code:
        _flush(segments, SegmentKind.CODE, buffer)
    elif in_latex:
        _flush(segments, SegmentKind.LATEX, buffer)
    else:
        _flush(segments, SegmentKind.MARKDOWN, buffer)

    return segments


# Name used by callers ported from the chat UI.
parse_message_content = segment


def keyed_segments(
    segments: Iterable[Segment], prefix: str = "segment"
) -> list[tuple[str, Segment]]:
    """Pair each segment with a positional key for view diffing."""
    return [(f"{prefix}-{index}", seg) for index, seg in enumerate(segments)]
