# status_relay/routers/events.py
from __future__ import annotations

import asyncio
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from status_relay.config import Settings
from status_relay.core.models import Subscription
from status_relay.core.registry import SubscriberRegistry
from status_relay.routers.deps import get_app_settings, get_registry

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # disable nginx buffering
}


async def event_stream(
    request: Request,
    registry: SubscriberRegistry,
    sub: Subscription,
    poll_seconds: float = 1.0,
) -> AsyncIterator[str]:
    """
    Yield queued SSE frames until the peer goes away or the channel is closed
    (replaced by a newer subscription, or app shutdown). No idle timeout.
    """
    try:
        while True:
            try:
                frame = await sub.channel.next_frame(timeout=poll_seconds)
            except asyncio.TimeoutError:
                if await request.is_disconnected():
                    break
                continue
            if frame is None:
                break
            yield frame
    finally:
        registry.release(sub)


@router.get("/events")
async def events(
    request: Request,
    jobId: str | None = None,
    registry: SubscriberRegistry = Depends(get_registry),
    settings: Settings = Depends(get_app_settings),
):
    request.state.job_id = jobId
    # raises InvalidRequest -> 400 when jobId is missing
    sub = registry.subscribe(jobId or "")
    return StreamingResponse(
        event_stream(request, registry, sub, settings.DISCONNECT_POLL_SECONDS),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
