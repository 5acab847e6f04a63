"""Shared pytest fixtures for all tests."""
from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from status_relay.config import Settings
from status_relay.core.registry import SubscriberRegistry
from status_relay.main import create_app


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings with no frontend directory."""
    monkeypatch.setenv("STATIC_DIR", str(tmp_path / "no-frontend"))
    monkeypatch.setenv("DISCONNECT_POLL_SECONDS", "0.05")
    return Settings()


@pytest.fixture
def registry() -> SubscriberRegistry:
    return SubscriberRegistry()


@pytest.fixture
def app(settings: Settings, registry: SubscriberRegistry) -> FastAPI:
    return create_app(settings, registry)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c
