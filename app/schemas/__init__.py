"""Pydantic request/response schemas."""

from app.schemas.asset import (
    AssetCreate, AssetUpdate, AssetStatusUpdate, AssetRead, AssetWithIssues,
    AssetOption, ReportForm,
)
from app.schemas.auth import LoginRequest, MeRead, SessionState, BootstrapAdminRequest
from app.schemas.contact import ContactForm, ContactReceipt
from app.schemas.course import CourseCreate, CourseUpdate, CourseRead, CourseSummary
from app.schemas.dashboard import DashboardSummary
from app.schemas.events import ChangeEvent
from app.schemas.issue import IssueReport, IssueStatusUpdate, IssueUpdate, IssueRead
from app.schemas.location import LocationCreate, LocationRead
from app.schemas.profile import UserCreate, UserCourseUpdate, UserRoleUpdate, UserRead

__all__ = [
    "AssetCreate", "AssetUpdate", "AssetStatusUpdate", "AssetRead", "AssetWithIssues",
    "AssetOption", "ReportForm",
    "LoginRequest", "MeRead", "SessionState", "BootstrapAdminRequest",
    "ContactForm", "ContactReceipt",
    "CourseCreate", "CourseUpdate", "CourseRead", "CourseSummary",
    "DashboardSummary",
    "ChangeEvent",
    "IssueReport", "IssueStatusUpdate", "IssueUpdate", "IssueRead",
    "LocationCreate", "LocationRead",
    "UserCreate", "UserCourseUpdate", "UserRoleUpdate", "UserRead",
]
