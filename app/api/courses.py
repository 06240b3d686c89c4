"""Course API (admin only): list with counts, detail with fleet health."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_auth
from app.models.enums import AssetStatus
from app.schemas.asset import AssetWithIssues
from app.schemas.course import CourseCreate, CourseUpdate, CourseRead, CourseSummary
from app.schemas.profile import UserRead
from app.services.auth import AuthContext
from app.services.events import change_hub

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=list[CourseSummary])
async def list_courses(
    search: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    rows = await crud.list_courses(db, auth, search=search)
    return [
        CourseSummary(
            **CourseRead.model_validate(course).model_dump(),
            asset_count=assets,
            user_count=users,
        )
        for course, assets, users in rows
    ]


@router.post("", response_model=CourseRead, status_code=201)
async def create_course(
    body: CourseCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    course = await crud.create_course(db, auth, **body.model_dump())
    await change_hub.publish_invalidation(["courses"])
    return course


@router.get("/{course_id}")
async def get_course(
    course_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    course = await crud.get_course(db, auth, course_id)
    assets = await crud.list_assets(db, auth, course_id=course.id)
    stats = await crud.open_issue_stats(db, [a.id for a in assets])
    users = await crud.list_profiles(db, auth, course_id=course.id)

    status_summary = {s.value: 0 for s in AssetStatus}
    for a in assets:
        status_summary[a.status] = status_summary.get(a.status, 0) + 1

    return {
        "course": CourseRead.model_validate(course),
        "assets": [
            AssetWithIssues.model_validate(a).model_copy(update={
                "open_issue_count": stats.get(a.id, (0, False))[0],
                "has_high_severity": stats.get(a.id, (0, False))[1],
            })
            for a in assets
        ],
        "users": [UserRead.model_validate(u) for u in users],
        "status_summary": status_summary,
    }


@router.patch("/{course_id}", response_model=CourseRead)
async def update_course(
    course_id: str,
    body: CourseUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    course = await crud.get_course(db, auth, course_id)
    changes = body.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        changes.pop("name")
    course = await crud.update_course(db, auth, course, changes)
    await change_hub.publish_invalidation(["courses", "assets", "issues"], course_id=course.id)
    return course
