"""Helpers for reading frames queued on an EventChannel."""
from __future__ import annotations

import asyncio
import json
from typing import List, Optional

from status_relay.core.models import EventChannel


def read_frames(channel: EventChannel) -> List[Optional[str]]:
    """Drain whatever is already queued on a channel without waiting. None marks close."""
    async def _drain():
        frames: List[Optional[str]] = []
        while channel.pending():
            frame = await channel.next_frame()
            frames.append(frame)
            if frame is None:
                break
        return frames
    return asyncio.run(_drain())


def decode(frame: str) -> dict:
    assert frame.startswith("data: ") and frame.endswith("\n\n")
    return json.loads(frame[len("data: "):])
