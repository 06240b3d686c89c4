"""Create the first admin account (HTTP bootstrap endpoint and CLI)."""

from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.models.auth_models import Profile
from app.models.enums import Role
from app.services.auth import hash_password, MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_NAME = "Admin"


async def create_admin(
    db: AsyncSession,
    email: str,
    password: str,
    full_name: str = "",
) -> Profile:
    """Create an admin profile + admin role unless the email is already taken.

    Raises 400 for missing fields or a short password, 409 when a profile
    with that email exists.
    """
    email = (email or "").strip().lower()
    if not email or not password:
        raise HTTPException(400, "Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(400, f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    admin = await crud.create_profile(
        db,
        email=email,
        password_hash=hash_password(password),
        full_name=(full_name or "").strip() or DEFAULT_ADMIN_NAME,
        role=Role.ADMIN.value,
    )
    logger.info("Admin account created", extra={"user_id": admin.id, "email": admin.email})
    return admin
