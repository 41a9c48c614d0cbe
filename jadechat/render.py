"""
Rendering collaborators for segmented messages.

A renderer turns each segment kind into output for one view technology.
:class:`HTMLSegmentRenderer` targets a WebView transcript: markdown gets a
small, dependency-free subset (headings, lists, quotes, rules, inline code,
bold, italic), code is shown verbatim, and math is handed to a client-side
typesetter as ``\\[...\\]``.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from .segments import Segment, SegmentKind, keyed_segments

__all__ = ["HTMLSegmentRenderer", "SegmentRenderer", "render_segments"]


@runtime_checkable
class SegmentRenderer(Protocol):
    def render_markdown(self, text: str, key: str) -> str: ...

    def render_code(self, text: str, key: str) -> str: ...

    def render_latex(self, text: str, key: str) -> str: ...


def render_segments(segments: Iterable[Segment], renderer: SegmentRenderer) -> str:
    """Render *segments* in order with *renderer* and join the parts."""
    parts: list[str] = []
    for key, seg in keyed_segments(segments):
        match seg.kind:
            case SegmentKind.MARKDOWN:
                parts.append(renderer.render_markdown(seg.text, key))
            case SegmentKind.CODE:
                parts.append(renderer.render_code(seg.text, key))
            case SegmentKind.LATEX:
                parts.append(renderer.render_latex(seg.text, key))
    return "\n".join(parts)


_LIST_ITEM = re.compile(r"^(\d+\.|[-*+])\s")
_HEADING = re.compile(r"^(#{1,4})\s+(.+)$")
_RULE = re.compile(r"^[-*_]{3,}\s*$")
_UL_ITEM = re.compile(r"^[-*+]\s+(.+)$")
_OL_ITEM = re.compile(r"^\d+\.\s+(.+)$")


_CODE_SPAN = re.compile(r"(`[^`]+`)")
_EMPHASIS = (
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"(?<!\w)__(.+?)__(?!\w)"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
    # Underscores inside words (snake_case) are literal.
    (re.compile(r"(?<!\w)_(.+?)_(?!\w)"), r"<em>\1</em>"),
)


def _emphasis(text: str) -> str:
    for pattern, replacement in _EMPHASIS:
        text = pattern.sub(replacement, text)
    return text


def _inline_md(text: str) -> str:
    """Process inline markdown: code spans verbatim, bold and italic elsewhere."""
    # Odd indices of the split are the code spans.
    parts = _CODE_SPAN.split(text)
    return "".join(
        f"<code>{part[1:-1]}</code>" if index % 2 else _emphasis(part)
        for index, part in enumerate(parts)
    )


def _md_to_html(text: str) -> str:
    escaped = html.escape(text)
    result: list[str] = []
    list_type = ""

    for line in escaped.split("\n"):
        stripped = line.strip()

        if list_type and stripped and not _LIST_ITEM.match(stripped):
            result.append(f"</{list_type}>")
            list_type = ""

        heading = _HEADING.match(stripped)
        if heading:
            level = len(heading.group(1))
            result.append(f"<h{level}>{_inline_md(heading.group(2))}</h{level}>")
            continue

        if _RULE.match(stripped):
            result.append("<hr>")
            continue

        if stripped.startswith("&gt; "):
            result.append(f"<blockquote>{_inline_md(stripped[5:])}</blockquote>")
            continue

        for tag, pattern in (("ul", _UL_ITEM), ("ol", _OL_ITEM)):
            item = pattern.match(stripped)
            if item:
                if list_type != tag:
                    if list_type:
                        result.append(f"</{list_type}>")
                    result.append(f"<{tag}>")
                    list_type = tag
                result.append(f"<li>{_inline_md(item.group(1))}</li>")
                break
        else:
            if stripped:
                result.append(f"<p>{_inline_md(stripped)}</p>")

    if list_type:
        result.append(f"</{list_type}>")
    return "\n".join(result)


class HTMLSegmentRenderer:
    """Renders segments as HTML fragments tagged with their segment key."""

    def render_markdown(self, text: str, key: str) -> str:
        return f'<div class="markdown" data-key="{key}">\n{_md_to_html(text)}\n</div>'

    def render_code(self, text: str, key: str) -> str:
        return f'<pre class="code" data-key="{key}"><code>{html.escape(text)}</code></pre>'

    def render_latex(self, text: str, key: str) -> str:
        return f'<div class="math" data-key="{key}">\\[{html.escape(text)}\\]</div>'
