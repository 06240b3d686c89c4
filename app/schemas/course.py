from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel

from app.schemas.common import NonBlankStr, OptionalText


class CourseCreate(BaseModel):
    name: NonBlankStr
    contact_name: OptionalText = None
    phone: OptionalText = None
    email: OptionalText = None


class CourseUpdate(BaseModel):
    name: NonBlankStr | None = None
    contact_name: OptionalText = None
    phone: OptionalText = None
    email: OptionalText = None


class CourseRead(BaseModel):
    id: str
    name: str
    contact_name: str | None = None
    phone: str | None = None
    email: str | None = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CourseSummary(CourseRead):
    asset_count: int = 0
    user_count: int = 0
