"""Feedback Lens FastAPI application with lifespan-managed store and inference clients."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.clients.anthropic_ai import AnthropicInferenceClient, get_analysis_model
from app.clients.cloudflare import CloudflareKVClient, WorkersAIClient
from app.config import Settings, settings
from app.middleware.request_log import RequestLogMiddleware
from app.persistence.store import SqliteKVStore
from app.routes.feedback import router as feedback_router
from app.routes.health import router as health_router

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


def build_kv_store(cfg: Settings) -> SqliteKVStore | CloudflareKVClient:
    """Pick the key-value backend named by ``cfg.kv_backend``."""
    if cfg.kv_backend == "cloudflare":
        return CloudflareKVClient(
            account_id=cfg.cloudflare_account_id,
            namespace_id=cfg.kv_namespace_id,
            api_token=cfg.cloudflare_api_token,
            base_url=cfg.cloudflare_api_base,
            timeout=cfg.request_timeout_seconds,
        )
    if cfg.kv_backend == "sqlite":
        return SqliteKVStore(cfg.kv_db_path)
    raise ValueError(f"Unknown kv_backend: {cfg.kv_backend!r}")


def build_inference(
    cfg: Settings,
) -> tuple[WorkersAIClient | AnthropicInferenceClient, str]:
    """Pick the inference backend and the model identifier passed to ``run()``."""
    if cfg.ai_provider == "workers_ai":
        client = WorkersAIClient(
            account_id=cfg.cloudflare_account_id,
            api_token=cfg.cloudflare_api_token,
            base_url=cfg.cloudflare_api_base,
            timeout=cfg.request_timeout_seconds,
        )
        return client, cfg.ai_model
    if cfg.ai_provider == "anthropic":
        return AnthropicInferenceClient(get_analysis_model(cfg)), cfg.anthropic_model
    raise ValueError(f"Unknown ai_provider: {cfg.ai_provider!r}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the store and inference clients and attach them to app state."""
    kv_store = build_kv_store(settings)
    if isinstance(kv_store, SqliteKVStore):
        db_dir = os.path.dirname(settings.kv_db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        await kv_store.init_db()
        logger.info("SQLite key-value store initialized at %s", settings.kv_db_path)
    else:
        logger.info("Using Cloudflare KV namespace %s", settings.kv_namespace_id)

    inference, model = build_inference(settings)
    logger.info("Inference provider %s, model %s", settings.ai_provider, model)

    app.state.kv_store = kv_store
    app.state.inference = inference
    app.state.ai_model = model

    logger.info("Feedback Lens started")
    yield

    await kv_store.close()
    await inference.close()
    logger.info("Feedback Lens shutdown, clients closed")


app = FastAPI(title="Feedback Lens", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLogMiddleware, log_dir=settings.request_log_dir)

app.include_router(health_router)
app.include_router(feedback_router)
