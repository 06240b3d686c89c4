from __future__ import annotations

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from app.db.engine import async_session_factory
from app.services.auth import resolve_token, SESSION_COOKIE_NAME
from app.services.events import change_hub

router = APIRouter(tags=["websocket"])


@router.websocket("/api/ws/changes")
async def changes_endpoint(
    websocket: WebSocket,
    token: str = Query(default=""),
):
    # Session cookie, or ?token= for clients that cannot send cookies
    raw = websocket.cookies.get(SESSION_COOKIE_NAME) or token
    async with async_session_factory() as db:
        auth = await resolve_token(raw, db)
    if not auth:
        await websocket.close(code=4001, reason="Unauthorized")
        return

    await change_hub.connect(websocket, auth)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        change_hub.disconnect(websocket)
