"""Off-site location API (admin only)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db import crud
from app.db.engine import get_db
from app.dependencies import require_auth
from app.schemas.location import LocationCreate, LocationRead
from app.services.auth import AuthContext
from app.services.events import change_hub

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("", response_model=list[LocationRead])
async def list_locations(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    rows = await crud.list_locations(db, auth)
    return [
        LocationRead(id=loc.id, name=loc.name, created_at=loc.created_at, asset_count=n)
        for loc, n in rows
    ]


@router.post("", response_model=LocationRead, status_code=201)
async def create_location(
    body: LocationCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    loc = await crud.create_location(db, auth, body.name)
    await change_hub.publish_invalidation(["locations"])
    return loc


@router.patch("/{location_id}", response_model=LocationRead)
async def rename_location(
    location_id: str,
    body: LocationCreate,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    loc = await crud.get_location(db, auth, location_id)
    loc = await crud.rename_location(db, auth, loc, body.name)
    await change_hub.publish_invalidation(["locations", "assets"])
    count = await crud.count_assets_at_location(db, loc.name)
    return LocationRead(id=loc.id, name=loc.name, created_at=loc.created_at, asset_count=count)


@router.delete("/{location_id}", status_code=204)
async def delete_location(
    location_id: str,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    loc = await crud.get_location(db, auth, location_id)
    await crud.delete_location(db, auth, loc)
    await change_hub.publish_invalidation(["locations"])
