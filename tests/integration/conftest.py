"""Shared fixtures: in-memory DB, seeded fleet, and authenticated clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, timedelta

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db.engine import get_db
from app.main import app
from app.models import Base, Course, OffsiteLocation, Asset, Profile, UserRole, UserSession
from app.services import photo_store
from app.services.auth import hash_password, _hash_token, SESSION_COOKIE_NAME

ADMIN_TOKEN = "admin-session-token-abc123"
COURSE_USER_TOKEN = "course-user-session-token-def456"
UNASSIGNED_TOKEN = "unassigned-session-token-ghi789"
PASSWORD = "fairway123"


@dataclass
class World:
    factory: async_sessionmaker
    ids: dict[str, str] = field(default_factory=dict)

    async def asset_status(self, asset_id: str) -> str:
        async with self.factory() as db:
            return (await db.get(Asset, asset_id)).status


def _client(token: str | None = None) -> AsyncClient:
    cookies = {SESSION_COOKIE_NAME: token} if token else None
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test", cookies=cookies)


async def _add_user(db, email, role, course_id, token):
    user = Profile(
        email=email,
        full_name=email.split("@")[0].title(),
        password_hash=hash_password(PASSWORD),
        course_id=course_id,
    )
    user.roles = [UserRole(role=role)]
    db.add(user)
    await db.flush()
    db.add(UserSession(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=datetime.now(timezone.utc) + timedelta(hours=24),
        ip_address="127.0.0.1",
    ))
    return user


@pytest_asyncio.fixture
async def world(tmp_path, monkeypatch):
    """Course X and Y, off-site location Wangara, one asset in each place, three users."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    w = World(factory=factory)
    async with factory() as db:
        x = Course(name="Course X")
        y = Course(name="Course Y")
        db.add_all([x, y, OffsiteLocation(name="Wangara")])
        await db.flush()

        a = Asset(name="Trike A", asset_tag="GC-001", course_id=x.id)
        b = Asset(name="Trike B", asset_tag="GC-002", course_id=y.id, status="out_of_service")
        c = Asset(name="Scooter C", asset_type="scooter", location="Wangara")
        db.add_all([a, b, c])

        admin = await _add_user(db, "admin@chariots.com.au", "admin", None, ADMIN_TOKEN)
        member = await _add_user(db, "pro@coursex.com.au", "course_user", x.id, COURSE_USER_TOKEN)
        loose = await _add_user(db, "new@chariots.com.au", "course_user", None, UNASSIGNED_TOKEN)
        await db.commit()

        w.ids.update(
            course_x=x.id, course_y=y.id,
            asset_a=a.id, asset_b=b.id, asset_c=c.id,
            admin=admin.id, member=member.id, loose=loose.id,
        )

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(photo_store, "_BASE", tmp_path / "storage")

    yield w

    app.dependency_overrides.clear()
    await engine.dispose()


@pytest_asyncio.fixture
async def admin_client(world):
    async with _client(ADMIN_TOKEN) as ac:
        yield ac


@pytest_asyncio.fixture
async def user_client(world):
    """Course user assigned to Course X."""
    async with _client(COURSE_USER_TOKEN) as ac:
        yield ac


@pytest_asyncio.fixture
async def loose_client(world):
    """Course user with no course."""
    async with _client(UNASSIGNED_TOKEN) as ac:
        yield ac


@pytest_asyncio.fixture
async def anon_client(world):
    async with _client() as ac:
        yield ac
