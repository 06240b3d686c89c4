from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel

from app.schemas.common import NonBlankStr


class LocationCreate(BaseModel):
    name: NonBlankStr


class LocationRead(BaseModel):
    id: str
    name: str
    created_at: datetime
    asset_count: int = 0

    model_config = {"from_attributes": True}
