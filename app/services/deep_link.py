"""Deep links printed on asset QR codes and their report-form prefill."""

from __future__ import annotations

from urllib.parse import quote

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.db import crud
from app.models.asset import Asset
from app.services.auth import AuthContext

_settings = get_settings()


def report_url(asset_id: str, base_url: str | None = None) -> str:
    base = (base_url or _settings.app_url).rstrip("/")
    return f"{base}/report?asset={quote(asset_id, safe='')}"


async def resolve_prefill(
    db: AsyncSession, auth: AuthContext, asset_id: str | None
) -> tuple[list[Asset], str | None]:
    """Assets the caller may report against, and which one to pre-select.

    An unknown or out-of-scope ``asset_id`` selects nothing, which leaves the
    choice to the user.
    """
    assets = await crud.list_assets(db, auth)
    selected = await crud.find_visible_asset(db, auth, asset_id)
    return assets, selected.id if selected else None
