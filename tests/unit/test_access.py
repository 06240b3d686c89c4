import pytest

from app.exceptions import PermissionDenied
from app.models.asset import Asset
from app.models.issue import Issue
from app.services import access
from app.services.auth import AuthContext


def _ctx(role="course_user", course_id="C1"):
    return AuthContext(user_id="u1", email="u1@chariots.com.au", full_name=None, role=role, course_id=course_id)


def test_admin_sees_every_asset():
    admin = _ctx(role="admin", course_id=None)
    assert access.can_view_asset(admin, Asset(name="A", course_id="C2"))
    assert access.can_view_asset(admin, Asset(name="B", location="Wangara"))


def test_course_user_sees_only_own_course_assets():
    user = _ctx()
    assert access.can_view_asset(user, Asset(name="A", course_id="C1"))
    assert not access.can_view_asset(user, Asset(name="B", course_id="C2"))
    assert not access.can_view_asset(user, Asset(name="C", location="Wangara"))


def test_course_user_without_course_sees_nothing():
    user = _ctx(course_id=None)
    assert not access.can_view_asset(user, Asset(name="A", location="Wangara"))
    assert not access.can_view_issue(user, Issue(asset_id="a", course_id=None))


def test_issue_visibility_follows_course():
    user = _ctx()
    assert access.can_view_issue(user, Issue(asset_id="a", course_id="C1"))
    assert not access.can_view_issue(user, Issue(asset_id="b", course_id="C2"))


def test_ensure_admin():
    access.ensure_admin(_ctx(role="admin"))
    with pytest.raises(PermissionDenied):
        access.ensure_admin(_ctx())


def test_course_user_cannot_write_admin_issue_fields():
    user = _ctx()
    access.ensure_issue_fields_writable(user, {"description"})
    for field in ("status", "admin_notes", "cost_estimate", "cost_final"):
        with pytest.raises(PermissionDenied) as exc:
            access.ensure_issue_fields_writable(user, {"description", field})
        assert exc.value.status_code == 403


def test_admin_can_write_all_issue_fields():
    access.ensure_issue_fields_writable(_ctx(role="admin"), access.ADMIN_ONLY_ISSUE_FIELDS)
