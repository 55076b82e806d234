"""
WebSocket handler for the realtime workspace feed.

Forwards every event of the caller's workspace bus to the browser. The
feed is read-only: nothing received here changes workspace state.
"""

import asyncio
import json
import logging
from datetime import datetime
from typing import Dict, List

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, Query

from wardshift.models.events import WorkspaceEvent
from wardshift.services.workspace import Workspace

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    """
    Tracks open WebSocket connections per workspace and relays bus events.

    Each connection gets an outbox queue drained by its own sender task, so
    bus publishers never wait on a browser.
    """

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, token: str, websocket: WebSocket, workspace: Workspace) -> None:
        """Accept a connection and subscribe it to the workspace bus."""
        await websocket.accept()
        async with self._lock:
            self.active_connections.setdefault(token, []).append(websocket)

        outbox: asyncio.Queue = asyncio.Queue()

        async def forward(event: WorkspaceEvent) -> None:
            outbox.put_nowait({
                "type": "activity" if event.event_type.value == "activity_logged" else "update",
                "event_type": event.event_type.value,
                "timestamp": event.timestamp.isoformat(),
                "data": event.payload
            })

        websocket.state.forwarder = forward
        websocket.state.sender = asyncio.create_task(self._drain(websocket, outbox))
        workspace.event_bus.subscribe_all(forward)
        logger.info(f"WebSocket connected for {workspace.user.username}. Total connections: {self.connection_count}")

    async def _drain(self, websocket: WebSocket, outbox: asyncio.Queue) -> None:
        while True:
            message = await outbox.get()
            await self.send_to_client(websocket, message)

    async def disconnect(self, token: str, websocket: WebSocket, workspace: Workspace) -> None:
        """Remove a connection, its bus subscription and its sender task."""
        async with self._lock:
            connections = self.active_connections.get(token, [])
            if websocket in connections:
                connections.remove(websocket)
            if not connections:
                self.active_connections.pop(token, None)

        forwarder = getattr(websocket.state, "forwarder", None)
        if forwarder is not None:
            workspace.event_bus.unsubscribe_all(forwarder)

        sender = getattr(websocket.state, "sender", None)
        if sender is not None:
            sender.cancel()
            try:
                await sender
            except asyncio.CancelledError:
                pass
        logger.info(f"WebSocket disconnected. Total connections: {self.connection_count}")

    async def send_to_client(self, websocket: WebSocket, message: dict) -> None:
        """Send a message to a specific client."""
        try:
            await websocket.send_text(json.dumps(message, default=str))
        except Exception as e:
            logger.warning(f"Failed to send to client: {e}")

    @property
    def connection_count(self) -> int:
        return sum(len(connections) for connections in self.active_connections.values())


# Global connection manager
manager = ConnectionManager()


def _initial_state(workspace: Workspace) -> dict:
    state = workspace.state
    shift = state.get_current_shift()
    return {
        "type": "initial_state",
        "timestamp": datetime.now().isoformat(),
        "data": {
            "shift": shift.model_dump(mode="json") if shift else None,
            "patients": [p.to_summary() for p in state.get_all_patients()],
            "beds": [s.to_summary() for s in workspace.bed_ledger.all_statuses()],
            "recent_activity": [log.model_dump(mode="json") for log in state.get_activity_logs(10)],
            "stats": state.get_state_summary()
        }
    }


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: str = Query("")):
    """
    Realtime feed for one workspace.

    Clients receive:
    - The initial state on connect
    - Every activity entry and state-change notice

    Clients can send:
    - ping, answered with pong
    - request_state, answered with a fresh initial_state
    """
    workspace = websocket.app.state.sessions.get(token)
    if workspace is None:
        await websocket.close(code=4401)
        return

    await manager.connect(token, websocket, workspace)
    await manager.send_to_client(websocket, _initial_state(workspace))

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await manager.send_to_client(websocket, {"type": "error", "message": "Invalid JSON"})
                continue

            msg_type = message.get("type", "") if isinstance(message, dict) else ""
            if msg_type == "ping":
                await manager.send_to_client(websocket, {
                    "type": "pong",
                    "timestamp": datetime.now().isoformat()
                })
            elif msg_type == "request_state":
                await manager.send_to_client(websocket, _initial_state(workspace))
            else:
                await manager.send_to_client(websocket, {
                    "type": "error",
                    "message": f"Unknown message type: {msg_type}"
                })
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(token, websocket, workspace)


@router.get("/ws/status")
async def websocket_status():
    """Get WebSocket connection status."""
    return {"active_connections": manager.connection_count}
