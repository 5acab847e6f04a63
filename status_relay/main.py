from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from status_relay.config import Settings, get_settings
from status_relay.core.registry import SubscriberRegistry
from status_relay.error_handlers import register_error_handlers
from status_relay.middleware_logging import configure_logging, register_request_logging
from status_relay.routers.events import router as events_router
from status_relay.routers.health import router as health_router
from status_relay.routers.updates import router as updates_router

VERSION = "0.1.0"


def create_app(settings: Optional[Settings] = None, registry: Optional[SubscriberRegistry] = None) -> FastAPI:
    settings = settings or get_settings()
    registry = registry if registry is not None else SubscriberRegistry()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # end any open streams so the server can shut down
        app.state.registry.close_all()

    app = FastAPI(title="Job Status Relay", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry

    register_request_logging(app)
    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(events_router)
    app.include_router(updates_router)
    app.include_router(health_router)

    index_path = settings.STATIC_DIR / settings.INDEX_FILE

    @app.get("/", include_in_schema=False)
    async def root():
        if index_path.is_file():
            return FileResponse(index_path)
        return {"message": "Job Status Relay", "version": VERSION}

    # Frontend assets; registered last so API routes win
    if settings.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=str(settings.STATIC_DIR)), name="static")

    return app


app = create_app()
