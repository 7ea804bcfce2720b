"""Client-side chat state machine.

Tracks the connection status, the transcript and the typing indicator, and
translates channel events into state transitions. Views (terminal, tests)
subclass ChatClientController and implement the abstract hooks for rendering.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, List, Optional, Set

from energy_wise.llm_base_models import ChatMessage, Role
from energy_wise.utils import LlmReplyPostProcessor

logger = logging.getLogger(__name__)

REPLY_DISPLAY_DELAY = 0.8

WELCOME_MESSAGE = "Welcome to Energy-Wise! I'm here to help with all your electricity usage questions."
DISCONNECT_NOTICE = "Connection lost. Attempting to reconnect..."
CONNECT_ERROR_NOTICE = "Unable to connect to the server. Please check your internet connection."
INVALID_REPLY_NOTICE = "Something went wrong with the assistant's response."


class ConnectionStatus(str, Enum):
    """Status of the client's channel to the relay server."""
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


STATUS_HINTS = {
    ConnectionStatus.CONNECTED: "Energy-Wise is ready to help with your electricity usage questions",
    ConnectionStatus.CONNECTING: "Connecting to Energy-Wise assistant...",
    ConnectionStatus.DISCONNECTED: "Disconnected. Attempting to reconnect...",
    ConnectionStatus.ERROR: "Connection error. Please try again later.",
}


class ChatClientController(ABC):
    """Client chat state with all transition logic.

    Subclass and implement the abstract hooks for view-specific rendering.
    Replies are shown after a short display delay scheduled on the running
    event loop; call close() when the view goes away to drop pending ones.
    """

    def __init__(
        self,
        *,
        send: Optional[Callable[[str], None]] = None,
        reply_delay: float = REPLY_DISPLAY_DELAY,
        welcome_message: Optional[str] = WELCOME_MESSAGE,
    ):
        """Initialize the client state.

        Args:
            send: Callable that puts user text on the channel; usually attached
                later by the transport via attach_channel()
            reply_delay: Seconds the typing indicator shows before a reply appears
            welcome_message: Assistant entry the transcript starts with, None for an empty transcript
        """
        self.status = ConnectionStatus.CONNECTING
        self.messages: List[ChatMessage] = []
        if welcome_message:
            self.messages.append(ChatMessage(role=Role.ASSISTANT, content=welcome_message))
        self.input_text = ""
        self.is_typing = False
        self.reply_delay = reply_delay
        self._send = send
        self._pending_replies: Set[asyncio.TimerHandle] = set()

    def attach_channel(self, send: Callable[[str], None]) -> None:
        self._send = send

    @property
    def input_enabled(self) -> bool:
        """Input is only accepted while connected."""
        return self.status == ConnectionStatus.CONNECTED

    @property
    def status_hint(self) -> str:
        return STATUS_HINTS[self.status]

    # ========== USER ACTIONS ==========

    def set_input(self, text: str) -> None:
        """Replace the input buffer."""
        self.input_text = text
        self._on_state_changed()

    def submit(self, text: Optional[str] = None) -> bool:
        """Send user text, defaulting to the input buffer.

        Does nothing for blank text or while not connected. The text is sent
        as typed; no acknowledgement is awaited.

        Returns:
            True if the text was sent
        """
        if text is None:
            text = self.input_text
        if text.strip() == "" or self.status != ConnectionStatus.CONNECTED:
            if self.status != ConnectionStatus.CONNECTED:
                logger.warning("[CLIENT] Cannot send message, channel not connected.")
            return False
        if self._send is None:
            logger.warning("[CLIENT] Cannot send message, no channel attached.")
            return False

        self._send(text)
        self._append(ChatMessage(role=Role.USER, content=text))
        self.input_text = ""
        self._on_state_changed()
        return True

    # ========== CHANNEL EVENTS ==========

    def on_connect(self) -> None:
        logger.info("[CLIENT] Channel connected")
        self._set_status(ConnectionStatus.CONNECTED)

    def on_disconnect(self, reason: Any = None) -> None:
        logger.info(f"[CLIENT] Channel disconnected: {reason}")
        self._set_status(ConnectionStatus.DISCONNECTED)
        self._append(ChatMessage(role=Role.SYSTEM, content=DISCONNECT_NOTICE))
        self._on_state_changed()

    def on_connect_error(self, error: Any = None) -> None:
        logger.error(f"[CLIENT] Channel connection error: {error}")
        self._set_status(ConnectionStatus.ERROR)
        self._append(ChatMessage(role=Role.SYSTEM, content=CONNECT_ERROR_NOTICE))
        self._on_state_changed()

    def on_reconnect_attempt(self, attempt: int) -> None:
        logger.info(f"[CLIENT] Reconnection attempt {attempt}")
        self._set_status(ConnectionStatus.CONNECTING)

    def on_reply(self, payload: Any) -> None:
        """Show the typing indicator and schedule the reply for display.

        Must be called from within a running event loop.
        """
        self.is_typing = True
        self._on_state_changed()

        loop = asyncio.get_running_loop()
        handle: Optional[asyncio.TimerHandle] = None

        def _fire():
            self._pending_replies.discard(handle)
            self._deliver_reply(payload)

        handle = loop.call_later(self.reply_delay, _fire)
        self._pending_replies.add(handle)

    def close(self) -> None:
        """Drop replies that have not been displayed yet."""
        for handle in self._pending_replies:
            handle.cancel()
        self._pending_replies.clear()
        self.is_typing = False

    @property
    def pending_replies(self) -> int:
        return len(self._pending_replies)

    # ========== INTERNALS ==========

    def _deliver_reply(self, payload: Any) -> None:
        if isinstance(payload, str):
            cleaned = LlmReplyPostProcessor(payload).process()
            self._append(ChatMessage(role=Role.ASSISTANT, content=cleaned))
        else:
            logger.warning(f"[CLIENT] Received non-string message from bot: {payload!r}")
            self._append(ChatMessage(role=Role.SYSTEM, content=INVALID_REPLY_NOTICE))
        self.is_typing = False
        self._on_state_changed()

    def _append(self, message: ChatMessage) -> None:
        self.messages.append(message)
        self._scroll_to_latest()

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self.status:
            return
        self.status = status
        self._on_state_changed()
        if status == ConnectionStatus.CONNECTED:
            self._focus_input()

    # ========== ABSTRACT HOOKS (subclasses implement) ==========

    @abstractmethod
    def _on_state_changed(self) -> None:
        """Called after any change of status, transcript, input or typing indicator."""
        pass

    @abstractmethod
    def _scroll_to_latest(self) -> None:
        """Called after an entry was appended to the transcript.

        View should bring the newest entry into sight.
        """
        pass

    @abstractmethod
    def _focus_input(self) -> None:
        """Called when the status becomes connected."""
        pass
