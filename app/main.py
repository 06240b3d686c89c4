"""FastAPI application entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.api.router import api_router
from app.config import get_settings
from app.db.engine import create_all, engine
from app.exceptions import register_exception_handlers
from app.logging_config import setup_logging

_settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(_settings.log_level)
    await create_all()
    yield
    await engine.dispose()


app = FastAPI(
    title="Golf Fleet Desk",
    description="Fleet, issue and course management for golf trikes and scooters.",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(api_router)

# Issue photos: {public_base_url}/{bucket}/{key}
_storage_dir = Path(_settings.photo_store.base_dir)
_storage_dir.mkdir(parents=True, exist_ok=True)
app.mount("/storage", StaticFiles(directory=str(_storage_dir)), name="storage")


@app.get("/api/health")
async def health():
    return {"status": "ok"}
