"""Data-access layer.

Asset and issue queries take the caller's ``AuthContext`` and are scoped by
``app.services.access``; course, location and user functions refuse
non-admin callers. Out-of-scope single records raise ``NotFoundError``.
"""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy import select, func, case, delete, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import NotFoundError, ConflictError
from app.models import (
    Course, OffsiteLocation, Asset, Issue, Profile, UserRole, ContactSubmission,
)
from app.models.enums import AssetStatus, IssueSeverity, IssueStatus, Role
from app.services import access
from app.services.auth import AuthContext
from app.services.status_policy import OPEN_ISSUE_STATUSES, resolved_at_for


async def _reload(db: AsyncSession, model, obj_id: str):
    """Fetch a row fresh from the DB, refreshing eager-loaded relationships."""
    result = await db.execute(
        select(model).where(model.id == obj_id).execution_options(populate_existing=True)
    )
    return result.scalars().first()


def _like(term: str) -> str:
    return f"%{term.strip()}%"


# ── Courses ──────────────────────────────────────────────

async def list_courses(
    db: AsyncSession, auth: AuthContext, search: str | None = None
) -> list[tuple[Course, int, int]]:
    """Courses ordered by name, each with its asset and user counts."""
    access.ensure_admin(auth)
    asset_counts = (
        select(Asset.course_id, func.count(Asset.id).label("n"))
        .group_by(Asset.course_id)
        .subquery()
    )
    user_counts = (
        select(Profile.course_id, func.count(Profile.id).label("n"))
        .group_by(Profile.course_id)
        .subquery()
    )
    stmt = (
        select(
            Course,
            func.coalesce(asset_counts.c.n, 0),
            func.coalesce(user_counts.c.n, 0),
        )
        .outerjoin(asset_counts, asset_counts.c.course_id == Course.id)
        .outerjoin(user_counts, user_counts.c.course_id == Course.id)
        .order_by(Course.name)
    )
    if search and search.strip():
        stmt = stmt.where(Course.name.ilike(_like(search)))
    result = await db.execute(stmt)
    return [(course, int(a), int(u)) for course, a, u in result.all()]


async def get_course(db: AsyncSession, auth: AuthContext, course_id: str) -> Course:
    access.ensure_admin(auth)
    course = await db.get(Course, course_id)
    if not course:
        raise NotFoundError("Course")
    return course


async def create_course(db: AsyncSession, auth: AuthContext, **fields) -> Course:
    access.ensure_admin(auth)
    course = Course(**fields)
    db.add(course)
    await db.commit()
    await db.refresh(course)
    return course


async def update_course(db: AsyncSession, auth: AuthContext, course: Course, changes: dict) -> Course:
    access.ensure_admin(auth)
    for k, v in changes.items():
        setattr(course, k, v)
    await db.commit()
    await db.refresh(course)
    return course


# ── Off-site locations ───────────────────────────────────

async def list_locations(db: AsyncSession, auth: AuthContext) -> list[tuple[OffsiteLocation, int]]:
    access.ensure_admin(auth)
    counts = (
        select(Asset.location, func.count(Asset.id).label("n"))
        .where(Asset.location.is_not(None))
        .group_by(Asset.location)
        .subquery()
    )
    result = await db.execute(
        select(OffsiteLocation, func.coalesce(counts.c.n, 0))
        .outerjoin(counts, counts.c.location == OffsiteLocation.name)
        .order_by(OffsiteLocation.name)
    )
    return [(loc, int(n)) for loc, n in result.all()]


async def get_location(db: AsyncSession, auth: AuthContext, location_id: str) -> OffsiteLocation:
    access.ensure_admin(auth)
    loc = await db.get(OffsiteLocation, location_id)
    if not loc:
        raise NotFoundError("Location")
    return loc


async def get_location_by_name(db: AsyncSession, name: str) -> OffsiteLocation | None:
    result = await db.execute(select(OffsiteLocation).where(OffsiteLocation.name == name))
    return result.scalars().first()


async def count_assets_at_location(db: AsyncSession, name: str) -> int:
    result = await db.execute(select(func.count(Asset.id)).where(Asset.location == name))
    return int(result.scalar_one())


async def create_location(db: AsyncSession, auth: AuthContext, name: str) -> OffsiteLocation:
    access.ensure_admin(auth)
    if await get_location_by_name(db, name):
        raise ConflictError(f"Location '{name}' already exists")
    loc = OffsiteLocation(name=name)
    db.add(loc)
    await db.commit()
    await db.refresh(loc)
    return loc


async def rename_location(
    db: AsyncSession, auth: AuthContext, loc: OffsiteLocation, new_name: str
) -> OffsiteLocation:
    """Rename a location and every asset parked there, in one commit."""
    access.ensure_admin(auth)
    if new_name == loc.name:
        return loc
    if await get_location_by_name(db, new_name):
        raise ConflictError(f"Location '{new_name}' already exists")
    old_name = loc.name
    await db.execute(
        update(Asset).where(Asset.location == old_name).values(location=new_name)
    )
    loc.name = new_name
    await db.commit()
    await db.refresh(loc)
    return loc


async def delete_location(db: AsyncSession, auth: AuthContext, loc: OffsiteLocation) -> None:
    access.ensure_admin(auth)
    in_use = await count_assets_at_location(db, loc.name)
    if in_use:
        raise ConflictError(
            f"Cannot delete '{loc.name}': {in_use} asset(s) are still at this location"
        )
    await db.delete(loc)
    await db.commit()


# ── Assets ───────────────────────────────────────────────

async def list_assets(
    db: AsyncSession,
    auth: AuthContext,
    status: str | None = None,
    search: str | None = None,
    course_id: str | None = None,
    location: str | None = None,
) -> list[Asset]:
    stmt = select(Asset).outerjoin(Course, Asset.course_id == Course.id)
    stmt = access.scope_assets(stmt, auth)
    if status:
        stmt = stmt.where(Asset.status == status)
    if course_id:
        stmt = stmt.where(Asset.course_id == course_id)
    if location:
        stmt = stmt.where(Asset.location == location)
    if search and search.strip():
        term = _like(search)
        stmt = stmt.where(or_(
            Asset.name.ilike(term),
            Asset.asset_tag.ilike(term),
            Course.name.ilike(term),
        ))
    result = await db.execute(stmt.order_by(Asset.name, Asset.id))
    return list(result.scalars().all())


async def get_asset(db: AsyncSession, auth: AuthContext, asset_id: str) -> Asset:
    asset = await _reload(db, Asset, asset_id)
    if not asset or not access.can_view_asset(auth, asset):
        raise NotFoundError("Asset")
    return asset


async def find_visible_asset(db: AsyncSession, auth: AuthContext, asset_id: str | None) -> Asset | None:
    """Like get_asset, but returns None instead of raising."""
    if not asset_id:
        return None
    asset = await _reload(db, Asset, asset_id)
    if asset and access.can_view_asset(auth, asset):
        return asset
    return None


async def _check_placement(db: AsyncSession, course_id: str | None, location: str | None) -> None:
    if course_id and not await db.get(Course, course_id):
        raise HTTPException(400, "Unknown course")
    if location and not await get_location_by_name(db, location):
        raise HTTPException(400, f"Unknown off-site location '{location}'")


async def create_asset(db: AsyncSession, auth: AuthContext, **fields) -> Asset:
    access.ensure_admin(auth)
    await _check_placement(db, fields.get("course_id"), fields.get("location"))
    asset = Asset(**fields)
    db.add(asset)
    await db.commit()
    return await _reload(db, Asset, asset.id)


async def update_asset(db: AsyncSession, auth: AuthContext, asset: Asset, changes: dict) -> Asset:
    """Apply changes; moving to a course clears the location and vice versa."""
    access.ensure_admin(auth)
    if changes.get("course_id"):
        changes["location"] = None
    elif changes.get("location"):
        changes["course_id"] = None
    course_id = changes.get("course_id", asset.course_id)
    location = changes.get("location", asset.location)
    if not course_id and not location:
        raise HTTPException(400, "An asset must be at a course or an off-site location")
    await _check_placement(db, changes.get("course_id"), changes.get("location"))
    moved = course_id != asset.course_id
    for k, v in changes.items():
        setattr(asset, k, v)
    if moved:
        # Issues are scoped by their own course_id; keep it in step with the asset
        await db.execute(
            update(Issue).where(Issue.asset_id == asset.id).values(course_id=course_id)
        )
    await db.commit()
    return await _reload(db, Asset, asset.id)


async def set_asset_status(db: AsyncSession, auth: AuthContext, asset: Asset, status: str) -> Asset:
    access.ensure_admin(auth)
    asset.status = status
    await db.commit()
    return await _reload(db, Asset, asset.id)


async def count_assets_by_status(db: AsyncSession, auth: AuthContext) -> dict[str, int]:
    stmt = access.scope_assets(select(Asset.status, func.count(Asset.id)), auth).group_by(Asset.status)
    result = await db.execute(stmt)
    counts = {s.value: 0 for s in AssetStatus}
    counts.update({status: int(n) for status, n in result.all()})
    return counts


# ── Issues ───────────────────────────────────────────────

async def list_issues(
    db: AsyncSession,
    auth: AuthContext,
    status: str | None = None,
    severity: str | None = None,
    course_id: str | None = None,
    asset_id: str | None = None,
    search: str | None = None,
    open_only: bool = False,
) -> list[Issue]:
    """Visible issues, newest first."""
    stmt = (
        select(Issue)
        .join(Asset, Issue.asset_id == Asset.id)
        .outerjoin(Course, Issue.course_id == Course.id)
    )
    stmt = access.scope_issues(stmt, auth)
    if status:
        stmt = stmt.where(Issue.status == status)
    if open_only:
        stmt = stmt.where(Issue.status.in_(OPEN_ISSUE_STATUSES))
    if severity:
        stmt = stmt.where(Issue.severity == severity)
    if course_id:
        stmt = stmt.where(Issue.course_id == course_id)
    if asset_id:
        stmt = stmt.where(Issue.asset_id == asset_id)
    if search and search.strip():
        term = _like(search)
        stmt = stmt.where(or_(
            Issue.description.ilike(term),
            Asset.name.ilike(term),
            Course.name.ilike(term),
        ))
    result = await db.execute(stmt.order_by(Issue.created_at.desc(), Issue.id.desc()))
    return list(result.scalars().all())


async def get_issue(db: AsyncSession, auth: AuthContext, issue_id: str) -> Issue:
    issue = await _reload(db, Issue, issue_id)
    if not issue or not access.can_view_issue(auth, issue):
        raise NotFoundError("Issue")
    return issue


async def create_issue(
    db: AsyncSession, asset: Asset, forced_status: str | None = None, **fields
) -> Issue:
    """Insert an issue and apply any forced asset status in the same commit."""
    issue = Issue(asset_id=asset.id, course_id=asset.course_id, **fields)
    db.add(issue)
    if forced_status:
        asset.status = forced_status
    await db.commit()
    return await _reload(db, Issue, issue.id)


async def set_issue_status(
    db: AsyncSession,
    issue: Issue,
    status: str,
    asset_status: str | None = None,
    now: datetime | None = None,
) -> Issue:
    """Write status and resolved_at, plus the asset status when given."""
    issue.status = status
    issue.resolved_at = resolved_at_for(status, now or datetime.now(timezone.utc))
    if asset_status:
        asset = await db.get(Asset, issue.asset_id)
        asset.status = asset_status
    await db.commit()
    return await _reload(db, Issue, issue.id)


async def update_issue_fields(db: AsyncSession, issue: Issue, changes: dict) -> Issue:
    for k, v in changes.items():
        setattr(issue, k, v)
    await db.commit()
    return await _reload(db, Issue, issue.id)


async def count_issues_by_status(db: AsyncSession, auth: AuthContext) -> dict[str, int]:
    stmt = access.scope_issues(select(Issue.status, func.count(Issue.id)), auth).group_by(Issue.status)
    result = await db.execute(stmt)
    counts = {s.value: 0 for s in IssueStatus}
    counts.update({status: int(n) for status, n in result.all()})
    return counts


async def open_issue_stats(db: AsyncSession, asset_ids: list[str]) -> dict[str, tuple[int, bool]]:
    """Per asset: (number of open issues, whether any open issue is high severity)."""
    if not asset_ids:
        return {}
    result = await db.execute(
        select(
            Issue.asset_id,
            func.count(Issue.id),
            func.max(case((Issue.severity == IssueSeverity.HIGH.value, 1), else_=0)),
        )
        .where(Issue.asset_id.in_(asset_ids), Issue.status.in_(OPEN_ISSUE_STATUSES))
        .group_by(Issue.asset_id)
    )
    return {asset_id: (int(n), bool(high)) for asset_id, n, high in result.all()}


# ── Profiles & roles ─────────────────────────────────────

async def get_profile_by_email(db: AsyncSession, email: str) -> Profile | None:
    result = await db.execute(select(Profile).where(Profile.email == email.strip().lower()))
    return result.scalars().first()


async def list_profiles(
    db: AsyncSession, auth: AuthContext, course_id: str | None = None
) -> list[Profile]:
    access.ensure_admin(auth)
    stmt = select(Profile).order_by(Profile.email)
    if course_id:
        stmt = stmt.where(Profile.course_id == course_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_profile(db: AsyncSession, auth: AuthContext, user_id: str) -> Profile:
    access.ensure_admin(auth)
    profile = await _reload(db, Profile, user_id)
    if not profile:
        raise NotFoundError("User")
    return profile


async def create_profile(
    db: AsyncSession,
    email: str,
    password_hash: str,
    full_name: str | None = None,
    role: str = Role.COURSE_USER.value,
    course_id: str | None = None,
) -> Profile:
    """Insert a profile and its role row. Caller checks permissions."""
    email = email.strip().lower()
    if await get_profile_by_email(db, email):
        raise ConflictError(f"A user with email {email} already exists")
    if course_id and not await db.get(Course, course_id):
        raise HTTPException(400, "Unknown course")
    profile = Profile(
        email=email,
        full_name=full_name or None,
        password_hash=password_hash,
        course_id=course_id,
    )
    profile.roles = [UserRole(role=role)]
    db.add(profile)
    await db.commit()
    return await _reload(db, Profile, profile.id)


async def set_profile_course(
    db: AsyncSession, auth: AuthContext, profile: Profile, course_id: str | None
) -> Profile:
    access.ensure_admin(auth)
    if course_id and not await db.get(Course, course_id):
        raise HTTPException(400, "Unknown course")
    profile.course_id = course_id
    await db.commit()
    return await _reload(db, Profile, profile.id)


async def count_active_admins(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(func.distinct(Profile.id)))
        .join(UserRole, UserRole.user_id == Profile.id)
        .where(UserRole.role == Role.ADMIN.value, Profile.is_active.is_(True))
    )
    return int(result.scalar_one())


async def set_profile_role(db: AsyncSession, auth: AuthContext, profile: Profile, role: str) -> Profile:
    """Replace the profile's role rows with a single row for ``role``."""
    access.ensure_admin(auth)
    if profile.role == role:
        return profile
    if profile.role == Role.ADMIN.value and profile.is_active and await count_active_admins(db) <= 1:
        raise ConflictError("Cannot demote the last active admin")
    await db.execute(delete(UserRole).where(UserRole.user_id == profile.id))
    db.add(UserRole(user_id=profile.id, role=role))
    await db.commit()
    return await _reload(db, Profile, profile.id)


async def deactivate_profile(db: AsyncSession, auth: AuthContext, profile: Profile) -> Profile:
    access.ensure_admin(auth)
    if profile.id == auth.user_id:
        raise HTTPException(400, "You cannot deactivate your own account")
    profile.is_active = False
    await db.commit()
    return await _reload(db, Profile, profile.id)


# ── Contact submissions ──────────────────────────────────

async def create_contact_submission(db: AsyncSession, **fields) -> ContactSubmission:
    submission = ContactSubmission(**fields)
    db.add(submission)
    await db.commit()
    await db.refresh(submission)
    return submission
