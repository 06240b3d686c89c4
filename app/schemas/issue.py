from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field, model_validator

from app.models.enums import IssueSeverity, IssueStatus, IssueType
from app.schemas.common import NonBlankStr

SEVERITY_DESCRIPTIONS = {
    IssueSeverity.LOW: "Minor issue, trike still operational",
    IssueSeverity.MEDIUM: "Needs attention soon",
    IssueSeverity.HIGH: "Urgent, trike may be unsafe",
}


class IssueReport(BaseModel):
    asset_id: NonBlankStr
    issue_type: IssueType
    severity: IssueSeverity
    description: NonBlankStr


class IssueStatusUpdate(BaseModel):
    status: IssueStatus


class IssueUpdate(BaseModel):
    description: NonBlankStr | None = None
    admin_notes: str | None = None
    cost_estimate: float | None = Field(default=None, ge=0)
    cost_final: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _description_not_null(self):
        if "description" in self.model_fields_set and self.description is None:
            raise ValueError("description cannot be null")
        return self


class IssueRead(BaseModel):
    id: str
    asset_id: str
    asset_name: str | None = None
    asset_tag: str | None = None
    asset_status: str | None = None
    course_id: str | None = None
    course_name: str | None = None
    issue_type: str
    severity: str
    description: str
    photos: list[str] = []
    reported_by: str | None = None
    reported_by_name: str
    status: str
    admin_notes: str | None = None
    cost_estimate: float | None = None
    cost_final: float | None = None
    created_at: datetime
    updated_at: datetime | None = None
    resolved_at: datetime | None = None

    model_config = {"from_attributes": True}
