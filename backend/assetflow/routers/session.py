"""
Interactive search box over a WebSocket.

The client forwards its input events (keystrokes, focus, outside clicks,
result clicks) and receives panel snapshots plus a navigate message when a
result is activated. One SearchCoordinator is owned by each connection.
"""
import asyncio
import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from assetflow.dependencies import get_upstream_client
from assetflow.services.search_coordinator import SearchCoordinator
from assetflow.services.search_service import execute_search
from assetflow.services.upstream_client import AssetFlowClient

logger = logging.getLogger("assetflow.session")

router = APIRouter(prefix="/search", tags=["search"])


def _session_token(websocket: WebSocket) -> str | None:
    # Browsers cannot set headers on a WebSocket handshake, so ?token= is accepted too.
    authorization = websocket.headers.get("authorization", "")
    if authorization.startswith("Bearer ") and authorization[7:].strip():
        return authorization[7:].strip()
    return websocket.query_params.get("token") or None


def dispatch_event(coordinator: SearchCoordinator, event: dict) -> str | None:
    """Apply one client event; returns an error message for invalid events."""
    kind = event.get("type")
    if kind == "input":
        coordinator.on_query_change(str(event.get("text", "")))
    elif kind == "key":
        coordinator.on_key_down(str(event.get("key", "")))
    elif kind == "focus":
        coordinator.on_focus()
    elif kind == "pointer":
        coordinator.on_pointer_down(bool(event.get("inside", False)))
    elif kind == "select":
        index = event.get("index")
        if not coordinator.is_open or not isinstance(index, int) or not 0 <= index < len(coordinator.results):
            return "invalid result index"
        coordinator.select(coordinator.results[index])
    else:
        return f"unknown event type: {kind!r}"
    return None


async def _drain(websocket: WebSocket, outbox: asyncio.Queue):
    while True:
        message = await outbox.get()
        try:
            await websocket.send_json(message)
        except (WebSocketDisconnect, RuntimeError):
            return


@router.websocket("/session")
async def search_session(websocket: WebSocket, client: AssetFlowClient = Depends(get_upstream_client)):
    token = _session_token(websocket)
    if token is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    await websocket.accept()

    outbox: asyncio.Queue[dict] = asyncio.Queue()

    async def search(text: str):
        return await execute_search(client, text, token=token)

    coordinator = SearchCoordinator(
        search=search,
        navigate=lambda link: outbox.put_nowait({"type": "navigate", "link": link}),
        on_change=lambda: outbox.put_nowait(coordinator.snapshot().model_dump(mode="json")),
    )
    sender = asyncio.create_task(_drain(websocket, outbox))
    try:
        while True:
            try:
                event = await websocket.receive_json()
            except ValueError:
                outbox.put_nowait({"type": "error", "detail": "invalid JSON"})
                continue
            error = dispatch_event(coordinator, event) if isinstance(event, dict) else "invalid event"
            if error:
                outbox.put_nowait({"type": "error", "detail": error})
    except WebSocketDisconnect:
        logger.debug("Search session closed")
    finally:
        coordinator.close()
        sender.cancel()
