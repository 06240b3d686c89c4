"""Dashboard summary: asset and issue counts visible to the caller."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_auth
from app.models.enums import IssueStatus
from app.schemas.dashboard import DashboardSummary
from app.services.auth import AuthContext

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
async def summary(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    assets = await crud.count_assets_by_status(db, auth)
    issues = await crud.count_issues_by_status(db, auth)
    return DashboardSummary(
        assets=assets,
        issues=issues,
        total_assets=sum(assets.values()),
        open_issues=sum(n for s, n in issues.items() if s != IssueStatus.RESOLVED.value),
    )
