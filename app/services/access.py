"""Row-level access rules for admins and course users.

Every query in ``app.db.crud`` that touches assets or issues runs through
``scope_assets`` / ``scope_issues``. Single-record lookups that fall
outside the caller's scope are reported as missing, not forbidden.
"""

from __future__ import annotations

from sqlalchemy import Select, false

from app.exceptions import PermissionDenied
from app.models.asset import Asset
from app.models.issue import Issue
from app.services.auth import AuthContext

ADMIN_ONLY_ISSUE_FIELDS = frozenset({"status", "admin_notes", "cost_estimate", "cost_final"})


def ensure_admin(auth: AuthContext) -> None:
    if not auth.is_admin:
        raise PermissionDenied()


def scope_assets(stmt: Select, auth: AuthContext) -> Select:
    if auth.is_admin:
        return stmt
    if not auth.course_id:
        return stmt.where(false())
    return stmt.where(Asset.course_id == auth.course_id)


def scope_issues(stmt: Select, auth: AuthContext) -> Select:
    if auth.is_admin:
        return stmt
    if not auth.course_id:
        return stmt.where(false())
    return stmt.where(Issue.course_id == auth.course_id)


def can_view_asset(auth: AuthContext, asset: Asset) -> bool:
    if auth.is_admin:
        return True
    return auth.course_id is not None and asset.course_id == auth.course_id


def can_view_issue(auth: AuthContext, issue: Issue) -> bool:
    if auth.is_admin:
        return True
    return auth.course_id is not None and issue.course_id == auth.course_id


def ensure_issue_fields_writable(auth: AuthContext, fields: set[str] | frozenset[str]) -> None:
    """Course users may not touch the status or cost/admin-note fields."""
    blocked = ADMIN_ONLY_ISSUE_FIELDS & set(fields)
    if blocked and not auth.is_admin:
        raise PermissionDenied(f"Only admins can change: {', '.join(sorted(blocked))}")
