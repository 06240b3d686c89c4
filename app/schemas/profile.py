from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from app.models.enums import Role


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str | None = None
    role: Role = Role.COURSE_USER
    course_id: str | None = None


class UserCourseUpdate(BaseModel):
    course_id: str | None = None


class UserRoleUpdate(BaseModel):
    role: Role


class UserRead(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    role: str
    course_id: str | None = None
    course_name: str | None = None
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}
