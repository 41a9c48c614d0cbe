"""
Shared fixtures and fakes for the jadechat test suite.

The apple_fm_sdk module-level mock is installed before any jadechat module is
imported, so the Apple backend can be exercised without macOS 26+ hardware.
Chat tests swap in a scripted backend through ``use_backend``.
"""

import sys
from unittest.mock import MagicMock

_mock_fm = MagicMock()
_mock_fm.SystemLanguageModel = MagicMock
_mock_fm.LanguageModelSession = MagicMock
sys.modules["apple_fm_sdk"] = _mock_fm

import pytest  # noqa: E402

from jadechat.protocols import use_backend  # noqa: E402

# ---------------------------------------------------------------------------
# Scripted backend
# ---------------------------------------------------------------------------


def make_mock_model(available=True, reason=None):
    """Create a mock model with configurable availability."""
    model = MagicMock()
    model.is_available.return_value = (available, reason)
    return model


class ScriptedSession:
    """Streams a fixed list of chunks; raises ``error`` after them if set."""

    def __init__(self, chunks, error=None, instructions=""):
        self.chunks = list(chunks)
        self.error = error
        self.instructions = instructions
        self.prompts = []

    async def stream_response(self, prompt):
        self.prompts.append(prompt)
        for chunk in self.chunks:
            yield chunk
        if self.error is not None:
            raise self.error


class ScriptedBackend:
    """Backend whose sessions replay ``chunks``; records every session it makes.

    ``init_error`` is raised from ``create_session`` instead of building one.
    """

    def __init__(self, chunks=(), error=None, model=None, init_error=None):
        self.chunks = list(chunks)
        self.error = error
        self.init_error = init_error
        self.model = model if model is not None else make_mock_model()
        self.sessions = []

    def create_model(self):
        return self.model

    def create_session(self, model, instructions):
        if self.init_error is not None:
            raise self.init_error
        session = ScriptedSession(self.chunks, error=self.error, instructions=instructions)
        self.sessions.append(session)
        return session


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scripted_backend():
    """
    Installs a ScriptedBackend as the active backend for one test.

    Tests set ``backend.chunks`` / ``backend.error`` before sending.
    """
    with use_backend(ScriptedBackend()) as backend:
        yield backend


@pytest.fixture
def mixed_message():
    return "Intro text\n```python\nprint('hi')\n```\n$$\nx^2 + y^2 = z^2\n$$\nOutro text"
