"""WebSocket relay API.

SessionRegistry: maps connection id → live conversation sessions
WebSocketRelayController: runs turns and sends replies as JSON over WS
build_ws_router(): FastAPI APIRouter with the /ws endpoint
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set
from uuid import uuid4

from starlette.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from energy_wise.session import ConversationSession

logger = logging.getLogger(__name__)

WS_PATH = "/ws"


# ── Session Registry ────────────────────────────────────────────────


@dataclass
class SessionEntry:
    """A live connection with its controller and metadata."""
    controller: "WebSocketRelayController"
    websocket: Optional[WebSocket] = None
    last_activity: float = field(default_factory=time.monotonic)


class SessionRegistry:
    """Maps connection_id → SessionEntry for the lifetime of each connection."""

    _instance: Optional["SessionRegistry"] = None

    def __init__(self):
        self._sessions: Dict[str, SessionEntry] = {}
        # controllers of closed connections whose turns are still running
        self._draining: Set["WebSocketRelayController"] = set()

    @classmethod
    def get(cls) -> "SessionRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def register(
        self,
        connection_id: str,
        controller: "WebSocketRelayController",
        websocket: Optional[WebSocket] = None,
    ) -> SessionEntry:
        entry = SessionEntry(controller=controller, websocket=websocket)
        self._sessions[connection_id] = entry
        logger.info(f"[REGISTRY] Registered connection {connection_id}")
        return entry

    def list_sessions(self) -> List[SessionEntry]:
        return list(self._sessions.values())

    def remove(self, connection_id: str) -> Optional[SessionEntry]:
        entry = self._sessions.pop(connection_id, None)
        if entry:
            logger.info(f"[REGISTRY] Removed connection {connection_id}")
            if entry.controller.pending_turns:
                self._draining.add(entry.controller)
        return entry

    @property
    def active_count(self) -> int:
        return len(self._sessions)

    def pending_turn_tasks(self) -> List[asyncio.Task]:
        """Turns still running, on open and on already closed connections."""
        controllers = [e.controller for e in self._sessions.values()] + list(self._draining)
        tasks = [task for c in controllers for task in c.turn_tasks()]
        self._draining = {c for c in self._draining if c.pending_turns}
        return tasks

    async def drain(self, timeout: float) -> int:
        """Wait up to ``timeout`` seconds for running turns, then cancel the rest.

        :return: Number of turns that had to be cancelled.
        """
        tasks = self.pending_turn_tasks()
        if not tasks:
            return 0
        logger.info(f"[REGISTRY] Waiting for {len(tasks)} running turn(s)")
        _done, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
            logger.warning(f"[REGISTRY] Cancelled {len(still_running)} turn(s) at shutdown")
        self._draining.clear()
        return len(still_running)


# ── WebSocket Relay Controller ──────────────────────────────────────


class WebSocketRelayController:
    """Owns one connection's session and sends its events as JSON over WebSocket."""

    def __init__(
        self,
        *,
        connection_id: str,
        session: ConversationSession,
        websocket: Optional[WebSocket] = None,
    ):
        self.connection_id = connection_id
        self.session = session
        self._ws: Optional[WebSocket] = websocket
        self._pending_turns: Set[asyncio.Task] = set()

    def set_websocket(self, ws: Optional[WebSocket]) -> None:
        self._ws = ws

    @property
    def pending_turns(self) -> int:
        return len(self._pending_turns)

    def turn_tasks(self) -> List[asyncio.Task]:
        return list(self._pending_turns)

    async def _send(self, msg: dict) -> None:
        """Send a JSON message; a no-op once the client is gone."""
        if self._ws and self._ws.client_state == WebSocketState.CONNECTED:
            try:
                await self._ws.send_json(msg)
            except Exception as e:
                logger.debug(f"[WS] Send failed for {self.connection_id}: {e}")
        else:
            logger.debug(f"[WS] Dropped {msg.get('type')} for closed connection {self.connection_id}")

    async def send_bot_message(self, text: str) -> None:
        await self._send({"type": "bot_message", "text": text})

    async def send_error(self, error_type: str, message: str) -> None:
        await self._send({"type": "error", "error_type": error_type, "message": message})

    def submit_user_message(self, payload: Any) -> asyncio.Task:
        """Start a turn in the background so the receive loop keeps reading.

        The session serializes turns, so replies go out in submission order.
        Turns are not cancelled when the connection drops.
        """
        task = asyncio.create_task(self._run_turn(payload))
        self._pending_turns.add(task)
        task.add_done_callback(self._pending_turns.discard)
        return task

    async def _run_turn(self, payload: Any) -> None:
        reply = await self.session.handle_user_message(payload)
        await self.send_bot_message(reply)


# ── WebSocket Router Builder ────────────────────────────────────────


def build_ws_router():
    """Build a FastAPI APIRouter with the WebSocket relay endpoint.

    The endpoint reads the shared provider client and the relay config from
    ``app.state.llm_client`` and ``app.state.relay_config``.
    """
    from fastapi import APIRouter

    router = APIRouter()

    @router.websocket(WS_PATH)
    async def websocket_relay(ws: WebSocket):
        state = ws.app.state
        connection_id = str(uuid4())

        await ws.accept()

        session = ConversationSession(
            client=state.llm_client,
            system_prompt=state.relay_config.system_prompt,
            session_id=connection_id,
        )
        controller = WebSocketRelayController(
            connection_id=connection_id,
            session=session,
            websocket=ws,
        )
        registry = SessionRegistry.get()
        entry = registry.register(connection_id, controller, websocket=ws)

        logger.info(f"[WS] User connected: {connection_id}")

        close_code = 1000
        try:
            while True:
                message = await ws.receive()
                if message["type"] == "websocket.disconnect":
                    raise WebSocketDisconnect(message.get("code", 1000))
                raw = message.get("text")
                if raw is None:
                    await controller.send_error("InvalidMessage", "Binary frames are not supported")
                    continue
                try:
                    msg = json.loads(raw)
                except json.JSONDecodeError:
                    await controller.send_error("InvalidJSON", "Invalid JSON")
                    continue
                if not isinstance(msg, dict):
                    await controller.send_error("InvalidMessage", "Expected a JSON object")
                    continue

                entry.last_activity = time.monotonic()
                await _handle_client_message(controller, entry, msg)

        except WebSocketDisconnect as e:
            logger.info(f"[WS] User disconnected: {connection_id} (code {e.code})")
        except Exception as e:
            logger.error(
                f"[WS] Error in connection {connection_id}: {type(e).__name__}: {e}",
                exc_info=True,
            )
            close_code = 1011
        finally:
            if ws.client_state == WebSocketState.CONNECTED:
                try:
                    await ws.close(code=close_code)
                except Exception as e:
                    logger.debug(f"[WS] Close failed for {connection_id}: {e}")
            controller.set_websocket(None)
            entry.websocket = None
            registry.remove(connection_id)
            if controller.pending_turns:
                logger.info(
                    f"[WS] {controller.pending_turns} turn(s) still running for closed connection {connection_id}"
                )

    return router


async def _handle_client_message(
    controller: WebSocketRelayController,
    entry: SessionEntry,
    msg: dict,
) -> None:
    """Dispatch a client WebSocket message to the appropriate handler."""
    msg_type = msg.get("type", "")

    if msg_type == "user_message":
        controller.submit_user_message(msg.get("text"))

    elif msg_type == "heartbeat":
        await controller._send({"type": "heartbeat_ack"})

    else:
        logger.warning(f"[WS] Unknown message type from {controller.connection_id}: {msg_type!r}")
