from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, model_validator

from app.models.enums import AssetStatus, AssetType
from app.schemas.common import NonBlankStr, OptionalText


class AssetCreate(BaseModel):
    name: NonBlankStr
    asset_tag: OptionalText = None
    asset_type: AssetType = AssetType.TRIKE
    status: AssetStatus = AssetStatus.AVAILABLE
    course_id: str | None = None
    location: OptionalText = None
    notes: OptionalText = None

    @model_validator(mode="after")
    def _one_placement(self):
        if bool(self.course_id) == bool(self.location):
            raise ValueError("Set exactly one of course_id or location")
        return self


class AssetUpdate(BaseModel):
    name: NonBlankStr | None = None
    asset_tag: OptionalText = None
    asset_type: AssetType | None = None
    course_id: str | None = None
    location: OptionalText = None
    notes: OptionalText = None

    @model_validator(mode="after")
    def _one_placement(self):
        if self.course_id and self.location:
            raise ValueError("Set only one of course_id or location")
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null")
        if "asset_type" in self.model_fields_set and self.asset_type is None:
            raise ValueError("asset_type cannot be null")
        return self


class AssetStatusUpdate(BaseModel):
    status: AssetStatus


class AssetRead(BaseModel):
    id: str
    name: str
    asset_tag: str | None = None
    asset_type: str
    status: str
    course_id: str | None = None
    course_name: str | None = None
    location: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class AssetWithIssues(AssetRead):
    open_issue_count: int = 0
    has_high_severity: bool = False


class AssetOption(BaseModel):
    id: str
    name: str
    asset_tag: str | None = None
    course_name: str | None = None
    location: str | None = None

    model_config = {"from_attributes": True}


class ReportForm(BaseModel):
    """What the report form needs: selectable assets and an optional pre-selection."""
    assets: list[AssetOption]
    selected_asset_id: str | None = None
