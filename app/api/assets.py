"""Asset API: fleet list, detail, admin edits, issue history and QR labels."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_auth
from app.models.enums import AssetStatus
from app.schemas.asset import AssetCreate, AssetUpdate, AssetStatusUpdate, AssetRead
from app.schemas.issue import IssueRead
from app.services.auth import AuthContext
from app.services.deep_link import report_url
from app.services.events import change_hub
from app.services.qr_codes import asset_qr_png, qr_filename

router = APIRouter(prefix="/api/assets", tags=["assets"])


@router.get("", response_model=list[AssetRead])
async def list_assets(
    status: AssetStatus | None = None,
    search: str | None = None,
    course_id: str | None = None,
    location: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_assets(
        db, auth,
        status=status.value if status else None,
        search=search,
        course_id=course_id,
        location=location,
    )


@router.post("", response_model=AssetRead, status_code=201)
async def create_asset(
    body: AssetCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    asset = await crud.create_asset(db, auth, **body.model_dump(mode="json"))
    await change_hub.publish_invalidation(["assets", "courses", "locations"], course_id=asset.course_id)
    return asset


@router.get("/{asset_id}", response_model=AssetRead)
async def get_asset(
    asset_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.get_asset(db, auth, asset_id)


@router.patch("/{asset_id}", response_model=AssetRead)
async def update_asset(
    asset_id: str,
    body: AssetUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    asset = await crud.get_asset(db, auth, asset_id)
    previous_course = asset.course_id
    asset = await crud.update_asset(db, auth, asset, body.model_dump(mode="json", exclude_unset=True))
    await change_hub.publish_invalidation(["assets", "issues", "courses", "locations"], course_id=asset.course_id)
    if previous_course and previous_course != asset.course_id:
        await change_hub.publish_invalidation(["assets", "issues"], course_id=previous_course)
    return asset


@router.put("/{asset_id}/status", response_model=AssetRead)
async def set_asset_status(
    asset_id: str,
    body: AssetStatusUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    asset = await crud.get_asset(db, auth, asset_id)
    asset = await crud.set_asset_status(db, auth, asset, body.status.value)
    await change_hub.publish_invalidation(["assets"], course_id=asset.course_id)
    return asset


@router.get("/{asset_id}/issues", response_model=list[IssueRead])
async def list_asset_issues(
    asset_id: str,
    open_only: bool = False,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    asset = await crud.get_asset(db, auth, asset_id)
    return await crud.list_issues(db, auth, asset_id=asset.id, open_only=open_only)


@router.get("/{asset_id}/report-link")
async def asset_report_link(
    asset_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    asset = await crud.get_asset(db, auth, asset_id)
    return {"asset_id": asset.id, "url": report_url(asset.id)}


@router.get("/{asset_id}/qr")
async def asset_qr(
    asset_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """PNG label encoding the asset's report link."""
    asset = await crud.get_asset(db, auth, asset_id)
    return Response(
        content=asset_qr_png(asset),
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{qr_filename(asset.name)}"'},
    )
