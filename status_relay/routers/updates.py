# status_relay/routers/updates.py
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from status_relay.core.models import CompletionUpdate, StatusUpdate
from status_relay.core.registry import SubscriberRegistry
from status_relay.core.relay import publish_completion, publish_status
from status_relay.routers.deps import get_registry, json_body

router = APIRouter()


@router.post("/status")
async def post_status(
    request: Request,
    body: Dict[str, Any] = Depends(json_body),
    registry: SubscriberRegistry = Depends(get_registry),
):
    """Intermediate progress from the workflow: {jobId, status, title, subtitle?}"""
    update = StatusUpdate.model_validate(body)
    request.state.job_id = update.jobId
    return publish_status(registry, update).to_api()


@router.post("/complete")
async def post_complete(
    request: Request,
    body: Dict[str, Any] = Depends(json_body),
    registry: SubscriberRegistry = Depends(get_registry),
):
    """Terminal notification: {jobId, title?, subtitle?, filesUrl?, details?}"""
    update = CompletionUpdate.model_validate(body)
    request.state.job_id = update.jobId
    return publish_completion(registry, update).to_api()
