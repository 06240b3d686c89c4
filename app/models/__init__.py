"""SQLAlchemy ORM models. Everything shares one Base and one database."""

from app.models.base import Base
from app.models.course import Course
from app.models.location import OffsiteLocation
from app.models.asset import Asset
from app.models.issue import Issue
from app.models.auth_models import Profile, UserRole, UserSession
from app.models.contact_submission import ContactSubmission

__all__ = [
    "Base", "Course", "OffsiteLocation", "Asset", "Issue",
    "Profile", "UserRole", "UserSession", "ContactSubmission",
]
