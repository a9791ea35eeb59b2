"""WebSocket endpoint with JWT auth."""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from civichub.core.security import decode_access_token
from civichub.core.ws_manager import ws_manager
from civichub.db.session import SessionLocal
from civichub.services.auth_service import get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate_ws(token: str) -> str | None:
    """Validate JWT and return the user's email, or None."""
    payload = decode_access_token(token)
    if not payload:
        return None
    db = SessionLocal()
    try:
        user = get_user_by_email(db, payload["sub"])
        if not user or not user.is_active:
            return None
        return user.email
    finally:
        db.close()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    Client connects with ?token=<jwt>.
    Server pushes report.created, report.updated and report.comments_changed
    so clients can refetch their cached views.
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4001, reason="Missing token")
        return

    email = _authenticate_ws(token)
    if email is None:
        await websocket.close(code=4003, reason="Invalid or expired token")
        return

    await ws_manager.connect(websocket, email)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text('{"event":"pong"}')
    except WebSocketDisconnect:
        pass
    finally:
        ws_manager.disconnect(websocket, email)
