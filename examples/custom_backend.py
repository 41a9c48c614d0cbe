"""
Custom backend example for jadechat protocols.

Shows how ``use_backend()`` lets a conversation run against a scripted model,
which is handy for UI work without Apple Silicon hardware.
"""

from __future__ import annotations

import asyncio

from jadechat import Conversation, HTMLSegmentRenderer, render_segments
from jadechat.protocols import use_backend

SCRIPT = [
    "Here is the code:\n",
    "```python\nsquares = [x * x for x in xs]\n```\n",
    "And the identity:\n$$\n\\sum_{k=1}^{n} k^2 = \\frac{n(n+1)(2n+1)}{6}\n$$\n",
]


class DemoModel:
    def is_available(self) -> tuple[bool, str | None]:
        return (True, None)


class DemoSession:
    def __init__(self, instructions: str) -> None:
        self.instructions = instructions

    async def stream_response(self, prompt: str):
        for chunk in SCRIPT:
            await asyncio.sleep(0.05)
            yield chunk


class DemoBackend:
    def create_model(self) -> DemoModel:
        return DemoModel()

    def create_session(self, model: DemoModel, instructions: str) -> DemoSession:
        return DemoSession(instructions=instructions)


async def main() -> None:
    with use_backend(DemoBackend()):
        conversation = Conversation()
        async for frame in conversation.send("squares please"):
            print(f"{'final' if frame.is_complete else 'frame'}: {len(frame.segments)} segments")
        print(render_segments(conversation.messages[-1].segments(), HTMLSegmentRenderer()))


if __name__ == "__main__":
    asyncio.run(main())
