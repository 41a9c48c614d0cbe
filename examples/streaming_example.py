"""
Streaming Segmentation Example

Streams a reply from the on-device model and prints how the message splits
into markdown, code and math as it grows.
"""

import asyncio

from jadechat.exceptions import ModelSetupError, require_apple_fm
from jadechat import Conversation


async def main():
    print("=== Streaming Segmentation Example ===\n")

    require_apple_fm("streaming_example.py")

    conversation = Conversation()
    prompt = "Show a Python one-liner that squares a list, then the formula for the sum of squares."
    print(f"User: {prompt}\n")

    async for frame in conversation.send(prompt):
        kinds = ", ".join(seg.kind.value for seg in frame.segments)
        state = "final" if frame.is_complete else "partial"
        print(f"[{state}] {len(frame.text):5d} chars -> {kinds or '(empty)'}")

    print()
    for seg in conversation.messages[-1].segments():
        print(f"--- {seg.kind.value}")
        print(seg.text)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ModelSetupError as exc:
        print(exc)
        raise SystemExit(2) from exc
