"""WebSocket channel between a chat client and the relay server."""

import asyncio
import json
import logging
from typing import Optional

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, InvalidHandshake, InvalidURI

from .chat_client_controller import ChatClientController

logger = logging.getLogger(__name__)

DEFAULT_URL = "ws://localhost:3001/ws"
RECONNECTION_ATTEMPTS = 5
RECONNECTION_DELAY = 3.0

_CONNECT_ERRORS = (OSError, InvalidHandshake, InvalidURI, asyncio.TimeoutError)


class ChannelConnection:
    """Drives a ChatClientController from a WebSocket connection.

    Reports connect / disconnect / connect_error to the controller, forwards
    ``bot_message`` frames to ``on_reply`` and sends queued user messages.
    After a failure it retries up to ``reconnection_attempts`` times with a
    fixed delay; the counter resets once a connection succeeds.
    """

    def __init__(
        self,
        controller: ChatClientController,
        url: str = DEFAULT_URL,
        *,
        reconnection_attempts: int = RECONNECTION_ATTEMPTS,
        reconnection_delay: float = RECONNECTION_DELAY,
    ):
        self.controller = controller
        self.url = url
        self.reconnection_attempts = reconnection_attempts
        self.reconnection_delay = reconnection_delay
        self._outbox: asyncio.Queue = asyncio.Queue()
        # frame taken off the outbox but not yet confirmed sent
        self._unsent: Optional[str] = None
        self._ws: Optional[ClientConnection] = None
        self._closing = False
        controller.attach_channel(self.send_user_message)

    @property
    def connected(self) -> bool:
        return self._ws is not None

    @property
    def closing(self) -> bool:
        return self._closing

    def send_user_message(self, text: str) -> None:
        self.send({"type": "user_message", "text": text})

    def send(self, msg: dict) -> None:
        """Queue a frame; it goes out as soon as the channel is connected."""
        self._outbox.put_nowait(json.dumps(msg))

    async def run(self) -> None:
        """Connect and keep reconnecting until closed or out of attempts."""
        attempt = 0
        first = True
        while not self._closing:
            if not first:
                if attempt >= self.reconnection_attempts:
                    logger.warning(
                        f"[CLIENT] Giving up after {attempt} reconnection attempt(s) to {self.url}"
                    )
                    return
                attempt += 1
                await asyncio.sleep(self.reconnection_delay)
                if self._closing:
                    return
                self.controller.on_reconnect_attempt(attempt)
            first = False

            try:
                async with connect(self.url) as ws:
                    self._ws = ws
                    attempt = 0
                    self.controller.on_connect()
                    reason = await self._serve(ws)
            except _CONNECT_ERRORS as e:
                self.controller.on_connect_error(e)
                continue
            finally:
                self._ws = None

            if self._closing:
                return
            self.controller.on_disconnect(reason)

    async def close(self) -> None:
        """Stop reconnecting and close the current connection."""
        self._closing = True
        if self._ws is not None:
            await self._ws.close()

    async def _serve(self, ws: ClientConnection) -> str:
        """Pump frames both ways until the connection ends; return the close reason."""
        writer = asyncio.create_task(self._pump_outbox(ws))
        try:
            async for raw in ws:
                self._dispatch(raw)
            return f"server closed the connection (code {ws.close_code})"
        except ConnectionClosed as e:
            return str(e)
        finally:
            writer.cancel()

    async def _pump_outbox(self, ws: ClientConnection) -> None:
        """Send queued frames in order.

        A frame whose send fails or is cancelled is kept and goes out first
        on the next connection.
        """
        while True:
            if self._unsent is None:
                self._unsent = await self._outbox.get()
            try:
                await ws.send(self._unsent)
            except ConnectionClosed:
                logger.debug("[CLIENT] Send failed, frame kept for the next connection")
                return
            self._unsent = None

    def _dispatch(self, raw) -> None:
        """Route one inbound frame to the controller."""
        try:
            msg = json.loads(raw)
        except (TypeError, json.JSONDecodeError):
            logger.warning(f"[CLIENT] Ignoring malformed frame: {raw!r}")
            return
        if not isinstance(msg, dict):
            logger.warning(f"[CLIENT] Ignoring non-object frame: {raw!r}")
            return

        msg_type = msg.get("type", "")
        if msg_type == "bot_message":
            self.controller.on_reply(msg.get("text"))
        elif msg_type == "error":
            logger.warning(f"[CLIENT] Server reported {msg.get('error_type')}: {msg.get('message')}")
        elif msg_type == "heartbeat_ack":
            logger.debug("[CLIENT] Heartbeat acknowledged")
        else:
            logger.debug(f"[CLIENT] Unknown message type: {msg_type!r}")
