"""Issue reporting and lifecycle.

Reporting validates everything first, uploads photos, then writes the issue
and any forced asset status in a single commit. A failed insert leaves the
uploaded photos in storage; their keys are logged for cleanup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import crud
from app.models.issue import Issue
from app.schemas.issue import IssueReport
from app.services import access, photo_store
from app.services.auth import AuthContext
from app.services.events import change_hub
from app.services.status_policy import (
    derive_asset_status_on_report,
    derive_asset_status_on_resolve,
    is_terminal,
)

logger = logging.getLogger(__name__)

_settings = get_settings()


@dataclass
class PhotoUpload:
    filename: str
    data: bytes
    content_type: str = "application/octet-stream"


async def report_issue(
    db: AsyncSession,
    auth: AuthContext,
    report: IssueReport,
    photos: list[PhotoUpload] | None = None,
) -> Issue:
    photos = photos or []
    max_photos = _settings.photo_store.max_photos
    if len(photos) > max_photos:
        raise HTTPException(400, f"At most {max_photos} photos per issue")

    asset = await crud.get_asset(db, auth, report.asset_id)
    # rollback expires the instance; keep the id for logging
    asset_id = asset.id

    stored = [await photo_store.upload(p.data, p.filename) for p in photos]

    forced = derive_asset_status_on_report(report.severity, report.issue_type)
    try:
        issue = await crud.create_issue(
            db,
            asset,
            forced_status=forced.value if forced else None,
            issue_type=report.issue_type.value,
            severity=report.severity.value,
            description=report.description,
            photos=[s.url for s in stored],
            reported_by=auth.user_id,
            reported_by_name=auth.display_name,
        )
    except Exception:
        await db.rollback()
        if stored:
            logger.error(
                "Issue insert failed after photo upload; orphaned objects left in storage",
                extra={"asset_id": asset_id, "keys": [s.key for s in stored]},
            )
        raise

    if forced:
        logger.info(
            "Asset status forced by new issue",
            extra={"asset_id": asset_id, "issue_id": issue.id, "status": forced.value},
        )
    keys = ["issues", "assets"] if forced else ["issues"]
    await change_hub.publish_invalidation(keys, course_id=issue.course_id)
    return issue


async def update_issue_status(
    db: AsyncSession,
    auth: AuthContext,
    issue: Issue,
    status: str,
    now: datetime | None = None,
) -> Issue:
    """Admin-only; any status may be set directly."""
    access.ensure_issue_fields_writable(auth, {"status"})
    asset_status = derive_asset_status_on_resolve().value if is_terminal(status) else None
    issue = await crud.set_issue_status(
        db, issue, status, asset_status=asset_status, now=now or datetime.now(timezone.utc)
    )
    if asset_status:
        logger.info(
            "Asset released by resolved issue",
            extra={"asset_id": issue.asset_id, "issue_id": issue.id},
        )
    keys = ["issues", "assets"] if asset_status else ["issues"]
    await change_hub.publish_invalidation(keys, course_id=issue.course_id)
    return issue


async def update_issue_details(
    db: AsyncSession, auth: AuthContext, issue: Issue, changes: dict
) -> Issue:
    """Description edits (anyone who can see the issue) and admin notes / costs."""
    access.ensure_issue_fields_writable(auth, set(changes))
    if "admin_notes" in changes:
        notes = changes["admin_notes"]
        changes["admin_notes"] = notes.strip() if notes and notes.strip() else None
    if not changes:
        return issue
    issue = await crud.update_issue_fields(db, issue, changes)
    await change_hub.publish_invalidation(["issues"], course_id=issue.course_id)
    return issue
