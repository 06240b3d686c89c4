"""User administration: profiles, course assignment, roles, deactivation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_role
from app.models.enums import Role
from app.schemas.profile import UserCreate, UserCourseUpdate, UserRoleUpdate, UserRead
from app.services.auth import AuthContext, hash_password, remove_all_user_sessions
from app.services.events import change_hub

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

_admin_dep = require_role(Role.ADMIN.value)


@router.get("", response_model=list[UserRead])
async def list_users(
    course_id: str | None = None,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_profiles(db, auth, course_id=course_id)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    profile = await crud.create_profile(
        db,
        email=body.email,
        password_hash=hash_password(body.password),
        full_name=(body.full_name or "").strip() or None,
        role=body.role.value,
        course_id=body.course_id,
    )
    logger.info("User created", extra={"user_id": profile.id, "role": profile.role, "by": auth.user_id})
    await change_hub.publish_invalidation(["users", "courses"])
    return profile


@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    return await crud.get_profile(db, auth, user_id)


@router.put("/{user_id}/course", response_model=UserRead)
async def assign_course(
    user_id: str,
    body: UserCourseUpdate,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    profile = await crud.get_profile(db, auth, user_id)
    profile = await crud.set_profile_course(db, auth, profile, body.course_id)
    await change_hub.drop_user(profile.id)
    await change_hub.publish_invalidation(["users", "courses"])
    return profile


@router.put("/{user_id}/role", response_model=UserRead)
async def change_role(
    user_id: str,
    body: UserRoleUpdate,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    profile = await crud.get_profile(db, auth, user_id)
    profile = await crud.set_profile_role(db, auth, profile, body.role.value)
    logger.info("Role changed", extra={"user_id": profile.id, "role": profile.role, "by": auth.user_id})
    await change_hub.drop_user(profile.id)
    await change_hub.publish_invalidation(["users"])
    return profile


@router.post("/{user_id}/deactivate", response_model=UserRead)
async def deactivate_user(
    user_id: str,
    auth: AuthContext = Depends(_admin_dep),
    db: AsyncSession = Depends(get_db),
):
    profile = await crud.get_profile(db, auth, user_id)
    profile = await crud.deactivate_profile(db, auth, profile)
    await remove_all_user_sessions(profile.id, db)
    await change_hub.drop_user(profile.id, reason="Signed out")
    await change_hub.publish_invalidation(["users"])
    return profile
