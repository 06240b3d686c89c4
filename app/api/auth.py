"""Auth API: login, logout, session state, first-admin bootstrap."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db.engine import get_db
from app.dependencies import require_auth, optional_auth
from app.schemas.auth import LoginRequest, MeRead, SessionState, BootstrapAdminRequest
from app.schemas.profile import UserRead
from app.services.admin_bootstrap import create_admin
from app.services.auth import (
    AuthContext, SESSION_COOKIE_NAME, SESSION_MAX_AGE_DAYS,
    authenticate, create_session, remove_session,
)
from app.services.events import change_hub

logger = logging.getLogger(__name__)

_settings = get_settings()

router = APIRouter(prefix="/api/auth", tags=["auth"])

LOGIN_PATH = "/login"
HOME_PATH = "/report"


def _me(auth: AuthContext) -> MeRead:
    return MeRead(
        id=auth.user_id,
        email=auth.email,
        full_name=auth.full_name,
        role=auth.role,
        course_id=auth.course_id,
    )


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    profile = await authenticate(db, body.email, body.password)
    if not profile:
        logger.warning("Failed sign-in", extra={"email": body.email.strip().lower()})
        return JSONResponse(status_code=401, content={"detail": "Invalid credentials"})

    ip = request.client.host if request.client else ""
    token = await create_session(profile, db, ip_address=ip)
    await change_hub.publish_auth(profile.id, "signed_in")

    response = JSONResponse(content={
        "ok": True,
        "user_id": profile.id,
        "role": profile.role,
        "redirect_to": HOME_PATH,
    })
    response.set_cookie(
        SESSION_COOKIE_NAME, token,
        httponly=True, samesite="lax",
        max_age=86400 * SESSION_MAX_AGE_DAYS,
    )
    return response


@router.post("/logout")
async def logout(request: Request, db: AsyncSession = Depends(get_db)):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        user_id = await remove_session(token, db)
        if user_id:
            await change_hub.publish_auth(user_id, "signed_out")
    response = JSONResponse(content={"ok": True, "redirect_to": LOGIN_PATH})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/session", response_model=SessionState)
async def session_state(auth: AuthContext | None = Depends(optional_auth)):
    """Where a client should be: the login surface without a session, the app with one."""
    if auth is None:
        return SessionState(authenticated=False, redirect_to=LOGIN_PATH)
    return SessionState(authenticated=True, redirect_to=HOME_PATH, user=_me(auth))


@router.get("/me", response_model=MeRead)
async def me(auth: AuthContext = Depends(require_auth)):
    return _me(auth)


@router.post("/bootstrap-admin", response_model=UserRead, status_code=201)
async def bootstrap_admin(
    body: BootstrapAdminRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create an admin account for an email no profile uses yet."""
    if not _settings.bootstrap.enabled:
        raise HTTPException(404, "Not found")
    admin = await create_admin(db, body.email, body.password, body.full_name)
    await change_hub.publish_invalidation(["users"])
    return admin
