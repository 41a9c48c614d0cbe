"""
Jade chat public API.

Segmentation and rendering are pure Python. The Apple Foundation Models SDK is
imported only when a conversation actually needs a model.
"""

from __future__ import annotations

from .chat import Conversation
from .config import ChatSettings
from .exceptions import ModelSetupError
from .input_events import KeyAction, KeyEvent, SubmitChannel
from .messages import Message, Role, display_segments
from .protocols import get_backend, set_backend, use_backend
from .render import HTMLSegmentRenderer, SegmentRenderer, render_segments
from .segments import Segment, SegmentKind, keyed_segments, parse_message_content, segment
from .streaming import SegmentFrame, stream_segments

__all__ = [
    "ChatSettings",
    "Conversation",
    "HTMLSegmentRenderer",
    "KeyAction",
    "KeyEvent",
    "Message",
    "ModelSetupError",
    "Role",
    "Segment",
    "SegmentFrame",
    "SegmentKind",
    "SegmentRenderer",
    "SubmitChannel",
    "display_segments",
    "get_backend",
    "keyed_segments",
    "parse_message_content",
    "render_segments",
    "segment",
    "set_backend",
    "stream_segments",
    "use_backend",
]
