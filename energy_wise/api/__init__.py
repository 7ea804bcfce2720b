"""WebSocket API for chat clients.

Provides SessionRegistry, WebSocketRelayController, and message handler.
The app wiring lives in energy_wise.server.
"""

from .chat_session_api import (
    SessionRegistry,
    WebSocketRelayController,
    _handle_client_message,
    build_ws_router,
)

__all__ = ["SessionRegistry", "WebSocketRelayController", "_handle_client_message", "build_ws_router"]
