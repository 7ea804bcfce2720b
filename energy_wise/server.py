"""Server integration helpers.

Host apps call these to register static assets and the relay routes.
"""

import os
import logging

logger = logging.getLogger(__name__)

STATIC_PREFIX = "/chat-static"
HEALTH_PATH = "/health"


def get_static_path() -> str:
    """Return absolute path to the static assets directory."""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), 'static')


def get_chat_static_path() -> str:
    """Return absolute path to the browser chat client."""
    return os.path.join(get_static_path(), 'chat')


def setup_routes(app) -> None:
    """Attach the relay WebSocket, the health probe and the browser client to a FastAPI app.

    The app must provide ``state.llm_client`` and ``state.relay_config``
    before the first connection arrives.
    """
    from fastapi.responses import FileResponse
    from fastapi.staticfiles import StaticFiles

    from energy_wise.api.chat_session_api import SessionRegistry, build_ws_router

    app.include_router(build_ws_router())
    app.mount(STATIC_PREFIX, StaticFiles(directory=get_chat_static_path()), name="chat-static")

    @app.get(HEALTH_PATH)
    async def health():
        return {"status": "ok", "connections": SessionRegistry.get().active_count}

    @app.get("/", include_in_schema=False)
    async def index():
        return FileResponse(os.path.join(get_chat_static_path(), "index.html"))

    logger.debug("[SERVER] Routes registered")
