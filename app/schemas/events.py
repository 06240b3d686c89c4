from __future__ import annotations
from typing import Any
from pydantic import BaseModel


class ChangeEvent(BaseModel):
    event: str  # invalidate | auth
    keys: list[str] = []  # assets | issues | courses | locations | users
    course_id: str | None = None
    data: dict[str, Any] = {}
