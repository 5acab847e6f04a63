# status_relay/routers/deps.py
import json
from typing import Any, Dict

from fastapi import Request
from fastapi.exceptions import RequestValidationError

from status_relay.config import Settings
from status_relay.core.registry import SubscriberRegistry


def get_registry(request: Request) -> SubscriberRegistry:
    return request.app.state.registry


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def json_body(request: Request) -> Dict[str, Any]:
    """
    Body of a workflow POST as a dict.
    Non-JSON content types, empty bodies and non-object JSON all read as {},
    so the handler reports the missing jobId instead of a type error.
    """
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type.lower():
        return {}
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise RequestValidationError([{
            "type": "json_invalid",
            "loc": ("body", getattr(e, "pos", 0)),
            "msg": "JSON decode error",
            "input": {},
            "ctx": {"error": getattr(e, "msg", str(e))},
        }]) from e
    return data if isinstance(data, dict) else {}
