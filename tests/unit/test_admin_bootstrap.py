import pytest
import pytest_asyncio
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.db import crud
from app.models import Base
from app.services.admin_bootstrap import create_admin
from app.services.auth import authenticate


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


async def test_creates_admin_with_role(db):
    admin = await create_admin(db, " Owner@GolfChariots.com.au ", "fairway1", "Pat Owner")
    assert admin.email == "owner@golfchariots.com.au"
    assert admin.full_name == "Pat Owner"
    assert admin.role == "admin"
    assert await authenticate(db, "owner@golfchariots.com.au", "fairway1") is not None


async def test_existing_email_conflicts(db):
    await crud.create_profile(db, "owner@golfchariots.com.au", "x")
    with pytest.raises(HTTPException) as exc:
        await create_admin(db, "owner@golfchariots.com.au", "fairway1")
    assert exc.value.status_code == 409


@pytest.mark.parametrize("email,password", [("", "fairway1"), ("owner@golfchariots.com.au", "")])
async def test_missing_fields(db, email, password):
    with pytest.raises(HTTPException) as exc:
        await create_admin(db, email, password)
    assert exc.value.status_code == 400


async def test_short_password(db):
    with pytest.raises(HTTPException) as exc:
        await create_admin(db, "owner@golfchariots.com.au", "12345")
    assert exc.value.status_code == 400


async def test_blank_full_name_defaults_to_admin(db):
    admin = await create_admin(db, "owner@golfchariots.com.au", "fairway1", "  ")
    assert admin.full_name == "Admin"
