"""Issue API: report (multipart with photos), list, detail, admin lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, UploadFile, File, Form
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_auth
from app.models.enums import IssueSeverity, IssueStatus
from app.schemas.asset import AssetOption, ReportForm
from app.schemas.issue import IssueReport, IssueStatusUpdate, IssueUpdate, IssueRead, SEVERITY_DESCRIPTIONS
from app.services import issue_workflow
from app.services.auth import AuthContext
from app.services.deep_link import resolve_prefill

router = APIRouter(tags=["issues"])


@router.get("/api/report-form", response_model=ReportForm)
async def report_form(
    asset: str | None = None,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Selectable assets, pre-selecting ``asset`` from a scanned QR link when visible."""
    assets, selected = await resolve_prefill(db, auth, asset)
    return ReportForm(
        assets=[AssetOption.model_validate(a) for a in assets],
        selected_asset_id=selected,
    )


@router.get("/api/issues/severities")
async def severity_options():
    return [{"value": s.value, "description": d} for s, d in SEVERITY_DESCRIPTIONS.items()]


@router.get("/api/issues", response_model=list[IssueRead])
async def list_issues(
    status: IssueStatus | None = None,
    severity: IssueSeverity | None = None,
    course_id: str | None = None,
    search: str | None = None,
    open_only: bool = False,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_issues(
        db, auth,
        status=status.value if status else None,
        severity=severity.value if severity else None,
        course_id=course_id,
        search=search,
        open_only=open_only,
    )


@router.post("/api/issues", response_model=IssueRead, status_code=201)
async def report_issue(
    asset_id: str = Form(""),
    issue_type: str = Form(""),
    severity: str = Form(""),
    description: str = Form(""),
    photos: list[UploadFile] = File(default=[]),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    # Validate the form as a whole before touching storage or the DB
    try:
        report = IssueReport(
            asset_id=asset_id,
            issue_type=issue_type,
            severity=severity,
            description=description,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    uploads = [
        issue_workflow.PhotoUpload(
            filename=p.filename or "photo.jpg",
            data=await p.read(),
            content_type=p.content_type or "application/octet-stream",
        )
        for p in photos
        if p.filename
    ]
    return await issue_workflow.report_issue(db, auth, report, uploads)


@router.get("/api/issues/{issue_id}", response_model=IssueRead)
async def get_issue(
    issue_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    return await crud.get_issue(db, auth, issue_id)


@router.patch("/api/issues/{issue_id}", response_model=IssueRead)
async def update_issue(
    issue_id: str,
    body: IssueUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    issue = await crud.get_issue(db, auth, issue_id)
    return await issue_workflow.update_issue_details(
        db, auth, issue, body.model_dump(exclude_unset=True)
    )


@router.put("/api/issues/{issue_id}/status", response_model=IssueRead)
async def update_issue_status(
    issue_id: str,
    body: IssueStatusUpdate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    issue = await crud.get_issue(db, auth, issue_id)
    return await issue_workflow.update_issue_status(db, auth, issue, body.status.value)
