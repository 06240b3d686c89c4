"""Issue photo storage: a local object bucket served at public URLs.

Objects live at ``{base_dir}/{bucket}/{key}`` and are served by the app's
``/storage`` static mount, so ``{public_base_url}/{bucket}/{key}`` resolves.
No size or type checks are applied here.
"""

from __future__ import annotations

import asyncio
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from app.config import get_settings

_settings = get_settings()
_BASE = Path(_settings.photo_store.base_dir)
_BUCKET = _settings.photo_store.bucket


@dataclass
class StoredObject:
    key: str
    url: str


def _safe_name(filename: str) -> str:
    name = Path(filename or "photo").name
    name = re.sub(r"[^A-Za-z0-9._-]+", "-", name).strip("-.")
    return name or "photo"


def make_key(filename: str) -> str:
    """Unique object key: ``{epoch_ms}-{random}-{filename}``."""
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{_safe_name(filename)}"


def object_path(key: str, bucket: str = _BUCKET) -> Path:
    return _BASE / bucket / key


def public_url(key: str, bucket: str = _BUCKET) -> str:
    return f"{_settings.photo_store.public_base_url.rstrip('/')}/{bucket}/{key}"


def _save_sync(data: bytes, key: str, bucket: str) -> None:
    path = object_path(key, bucket)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def upload(data: bytes, filename: str, bucket: str = _BUCKET) -> StoredObject:
    """Store one object and return its key and public URL."""
    key = make_key(filename)
    await asyncio.to_thread(_save_sync, data, key, bucket)
    return StoredObject(key=key, url=public_url(key, bucket))

