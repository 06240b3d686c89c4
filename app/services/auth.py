"""Authentication service: DB-backed sessions and bcrypt passwords.

The request's identity is an explicit ``AuthContext`` built from the
session row on every request. The role is re-read from ``user_roles`` each
time so nothing a client sends can elevate it.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
from fastapi import Request, HTTPException
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.models.auth_models import Profile, UserSession
from app.models.enums import Role

_settings = get_settings()

SESSION_COOKIE_NAME = _settings.session.cookie_name
SESSION_MAX_AGE_DAYS = _settings.session.max_age_days
MIN_PASSWORD_LENGTH = 6


@dataclass
class AuthContext:
    user_id: str
    email: str
    full_name: str | None
    role: str  # 'admin' | 'course_user'
    course_id: str | None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown"


def context_for(profile: Profile) -> AuthContext:
    return AuthContext(
        user_id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role,
        course_id=profile.course_id,
    )


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _hash_token(token: str) -> str:
    """SHA-256 hash of a session token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def authenticate(db: AsyncSession, email: str, password: str) -> Profile | None:
    """Return the active profile matching the credentials, else None."""
    result = await db.execute(
        select(Profile).where(Profile.email == email.strip().lower())
    )
    profile = result.scalars().first()
    if not profile or not profile.is_active:
        return None
    if not verify_password(password, profile.password_hash):
        return None
    return profile


async def create_session(profile: Profile, db: AsyncSession, ip_address: str = "") -> str:
    """Create a DB-backed session. Returns the raw token (not the hash)."""
    token = secrets.token_urlsafe(48)
    now = datetime.now(timezone.utc)

    db.add(UserSession(
        user_id=profile.id,
        token_hash=_hash_token(token),
        expires_at=now + timedelta(days=SESSION_MAX_AGE_DAYS),
        ip_address=ip_address,
    ))
    profile.last_login_at = now
    await db.commit()
    return token


async def validate_session(token: str, db: AsyncSession) -> Profile | None:
    """Look up session by token hash, return the Profile if valid."""
    result = await db.execute(
        select(UserSession).where(
            UserSession.token_hash == _hash_token(token),
            UserSession.expires_at > datetime.now(timezone.utc),
        )
    )
    session = result.scalars().first()
    if not session:
        return None

    result = await db.execute(
        select(Profile)
        .where(Profile.id == session.user_id)
        .execution_options(populate_existing=True)
    )
    profile = result.scalars().first()
    if not profile or not profile.is_active:
        return None
    return profile


async def remove_session(token: str, db: AsyncSession) -> str | None:
    """Delete a session by token. Returns the user id it belonged to."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == _hash_token(token))
    )
    session = result.scalars().first()
    if not session:
        return None
    user_id = session.user_id
    await db.delete(session)
    await db.commit()
    return user_id


async def remove_all_user_sessions(user_id: str, db: AsyncSession) -> None:
    """Invalidate all sessions for a user (e.g. after deactivation)."""
    await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    await db.commit()


async def resolve_token(token: str | None, db: AsyncSession) -> AuthContext | None:
    if not token:
        return None
    profile = await validate_session(token, db)
    return context_for(profile) if profile else None


async def get_current_user(request: Request, db: AsyncSession) -> AuthContext:
    """Read session cookie, validate, return AuthContext or raise 401."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    auth = await resolve_token(token, db)
    if not auth:
        raise HTTPException(status_code=401, detail="Session expired")
    return auth
