"""FastAPI dependency providers for auth and role enforcement."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.engine import get_db
from app.services.auth import AuthContext, get_current_user, resolve_token, SESSION_COOKIE_NAME


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Require a valid authenticated session. Returns AuthContext."""
    return await get_current_user(request, db)


async def optional_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext | None:
    """AuthContext for a valid session cookie, else None."""
    return await resolve_token(request.cookies.get(SESSION_COOKIE_NAME), db)


def require_role(*allowed_roles: str):
    """Factory: returns a dependency that enforces role membership."""
    async def _check(auth: AuthContext = Depends(require_auth)) -> AuthContext:
        if auth.role not in allowed_roles:
            raise HTTPException(403, "Insufficient permissions")
        return auth
    return _check
