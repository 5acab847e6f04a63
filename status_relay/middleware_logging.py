import logging
import time
from typing import Callable
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger("status_relay.request")


def configure_logging(level: str = "INFO") -> None:
    # no-op when the root logger already has handlers (uvicorn, pytest)
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _job_id(request: Request) -> str:
    # routes record the jobId they handled; /events also carries it in the query
    job_id = getattr(request.state, "job_id", None) or request.query_params.get("jobId")
    return str(job_id) if job_id else "-"


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    One access line per request, tagged with the jobId it concerns.
    SSE responses are logged when the stream opens; how long it stayed
    open is logged by the registry when the client goes away.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        client = request.client.host if request.client else "-"
        method = request.method
        path = request.url.path
        request.state.job_id = None  # shared with the route through the scope

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "client=%s method=%s path=%s job=%s status=%s UNHANDLED",
                client, method, path, _job_id(request), 500
            )
            raise

        job = _job_id(request)
        if response.headers.get("content-type", "").startswith("text/event-stream"):
            logger.info(
                "client=%s method=%s path=%s job=%s status=%s stream=open",
                client, method, path, job, response.status_code
            )
        else:
            duration_ms = (time.perf_counter() - start) * 1000.0
            logger.info(
                "client=%s method=%s path=%s job=%s status=%s duration_ms=%.2f",
                client, method, path, job, response.status_code, duration_ms
            )
        return response


def register_request_logging(app):
    app.add_middleware(RequestLogMiddleware)
