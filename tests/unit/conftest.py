"""Shared test fixtures for Feedback Lens unit tests."""

import json
import os
import tempfile
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.persistence.store import SqliteKVStore
from app.routes.feedback import router as feedback_router
from app.routes.health import router as health_router

MODEL_ID = "@cf/meta/llama-3.1-8b-instruct"

SAMPLE_ANALYSIS = {
    "summary": "Dashboard is slow and billing is hard to find.",
    "sentiment": "negative",
    "themes": ["slow dashboard", "billing navigation", "support delays"],
    "urgency": "high",
}


class DictKVStore:
    """In-memory stand-in for a key-value store; records every put in order."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.puts: list[tuple[str, str]] = []

    async def put(self, key: str, value: str) -> None:
        self.puts.append((key, value))
        self.data[key] = value


@pytest.fixture
def mock_kv_store():
    """AsyncMock of a key-value store."""
    return AsyncMock()


@pytest.fixture
def mock_inference():
    """AsyncMock of an inference service returning a well-formed analysis."""
    service = AsyncMock()
    service.run.return_value = {"response": json.dumps(SAMPLE_ANALYSIS)}
    return service


@pytest.fixture
def dict_kv_store():
    return DictKVStore()


def make_app(kv_store, inference, ai_model=MODEL_ID) -> FastAPI:
    """Minimal app with the intake routes and injected collaborators."""
    app = FastAPI()
    app.include_router(health_router)
    app.include_router(feedback_router)
    app.state.kv_store = kv_store
    app.state.inference = inference
    app.state.ai_model = ai_model
    return app


@pytest.fixture
def client(mock_kv_store, mock_inference):
    return TestClient(make_app(mock_kv_store, mock_inference))


@pytest.fixture
async def sqlite_kv_store():
    """Temporary SQLite-backed key-value store."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name
    store = SqliteKVStore(db_path)
    await store.init_db()
    yield store
    await store.close()
    os.unlink(db_path)


@pytest.fixture
def sample_analysis():
    return dict(SAMPLE_ANALYSIS)


@pytest.fixture
def app_factory():
    """Build a test app around the given store and inference service."""
    return make_app
