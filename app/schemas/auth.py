from __future__ import annotations
from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class MeRead(BaseModel):
    id: str
    email: str
    full_name: str | None = None
    role: str
    course_id: str | None = None


class SessionState(BaseModel):
    authenticated: bool
    redirect_to: str  # /login | /report
    user: MeRead | None = None


class BootstrapAdminRequest(BaseModel):
    # Missing fields are reported as 400 by the bootstrap service.
    email: str = ""
    password: str = ""
    full_name: str = ""
