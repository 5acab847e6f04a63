from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import asyncio
import json

from pydantic import BaseModel

from status_relay.errors import ChannelClosed

CONNECTED_MESSAGE = "Connected to status updates"
NO_CLIENT_REASON = "No client connected for this jobId"

DEFAULT_COMPLETE_TITLE = "Job Finished"
DEFAULT_COMPLETE_SUBTITLE = "Analysis complete"


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T12:00:00.123Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def encode_sse(event: Dict[str, Any]) -> str:
    return f"data: {json.dumps(event, separators=(',', ':'), ensure_ascii=False)}\n\n"


class EventChannel:
    """One SSE connection. Frames are queued here and drained by the response stream."""

    _CLOSE = object()

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    def send(self, event: Dict[str, Any]) -> None:
        if self.closed:
            raise ChannelClosed("channel is closed")
        self._queue.put_nowait(encode_sse(event))

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._queue.put_nowait(self._CLOSE)

    async def next_frame(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Wait for the next encoded frame.
        Returns None once the channel is closed and drained.
        Raises asyncio.TimeoutError if nothing arrives within `timeout`.
        """
        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        if item is self._CLOSE:
            return None
        return item

    def pending(self) -> int:
        return self._queue.qsize()


@dataclass
class Subscription:
    job_id: str
    channel: EventChannel = field(default_factory=EventChannel)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# ---- inbound payloads ----
# Fields are optional and untyped at parse time: values are forwarded
# as sent, and handlers enforce required-ness so the 400 messages
# name the missing fields.

class StatusUpdate(BaseModel):
    jobId: Optional[Any] = None
    status: Optional[Any] = None
    title: Optional[Any] = None
    subtitle: Optional[Any] = None


class CompletionUpdate(BaseModel):
    jobId: Optional[Any] = None
    title: Optional[Any] = None
    subtitle: Optional[Any] = None
    filesUrl: Optional[Any] = None
    details: Optional[Any] = None


@dataclass
class DeliveryResult:
    delivered: bool
    reason: Optional[str] = None

    def to_api(self) -> dict:
        d: Dict[str, Any] = {"success": True, "delivered": self.delivered}
        if self.reason:
            d["reason"] = self.reason
        return d
