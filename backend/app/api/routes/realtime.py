from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_user_from_token
from app.services.change_feed import ALL_TABLES, change_feed

router = APIRouter()


def _extract_ws_token(websocket: WebSocket) -> str | None:
    token = websocket.query_params.get("token")
    if token:
        return token

    auth_header = websocket.headers.get("authorization")
    if not auth_header:
        return None
    scheme, _, value = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def _requested_tables(websocket: WebSocket) -> list[str]:
    raw = websocket.query_params.get("tables") or ALL_TABLES
    return [item.strip() for item in raw.split(",") if item.strip()] or [ALL_TABLES]


@router.websocket("/realtime/ws")
async def realtime_websocket(
    websocket: WebSocket,
    db: Session = Depends(get_db),
) -> None:
    token = _extract_ws_token(websocket)
    user = get_user_from_token(token, db) if token else None
    if user is None:
        await websocket.close(code=1008)
        return

    tables = _requested_tables(websocket)
    await change_feed.connect(websocket, tables)
    try:
        await websocket.send_json({"event": "connected", "user_id": user.id, "tables": tables})
        while True:
            message = await websocket.receive_text()
            if message.strip().lower() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        await change_feed.disconnect(websocket)
