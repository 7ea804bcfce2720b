"""Chat client: connection state machine, WebSocket transport and terminal view."""
from .chat_client_controller import ChatClientController, ConnectionStatus
from .connection import ChannelConnection

__all__ = ["ChatClientController", "ConnectionStatus", "ChannelConnection"]
