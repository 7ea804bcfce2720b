"""Standalone relay server: run the Energy-Wise chat backend on its own.

Usage::

    poetry run energy-wise

    # Custom port:
    PORT=9000 poetry run energy-wise

Environment variables:
    GOOGLE_API_KEY: Gemini API key (required, the server refuses to start without it)
    PORT: Server port (default: 3001)
    HOST: Bind address (default: 0.0.0.0)
    GEMINI_MODEL: Gemini model (default: gemini-2.0-flash)
    SYSTEM_PROMPT: Replaces the Energy-Wise instruction (optional)
    CORS_ORIGINS: Comma separated browser origins (default: http://localhost:5173)

Loads .env from the current working directory or any parent directory.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from energy_wise.config import ConfigurationError, RelayConfig
from energy_wise.llm_base_client import LlmClient

logger = logging.getLogger(__name__)

# seconds running turns get to finish before shutdown cancels them
SHUTDOWN_GRACE_PERIOD = 10.0


def create_llm_client(config: RelayConfig) -> LlmClient:
    """Create the provider client shared by all connections.

    :raises ValueError: If the configured model is unknown.
    """
    from energy_wise.providers import get_provider

    provider = get_provider("google")(api_key=config.google_api_key)
    return provider.create_client(
        model=config.model,
        temperature=config.temperature,
        max_tokens=config.max_output_tokens,
    )


# ── FastAPI app factory ──────────────────────────────────────────

def create_app(config: Optional[RelayConfig] = None, llm_client: Optional[LlmClient] = None):
    """Create the FastAPI application.

    Heavy imports happen here so that .env is loaded before any provider
    code runs.

    :param config: Relay configuration, read from the environment when omitted.
    :param llm_client: Provider client, built from ``config`` when omitted.
    :raises ConfigurationError: If the environment lacks the credential.
    """
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    from energy_wise.api.chat_session_api import SessionRegistry
    from energy_wise.server import setup_routes

    if config is None:
        config = RelayConfig.from_env()
    if llm_client is None:
        llm_client = create_llm_client(config)
        logger.info(f"Google Generative AI model initialized: {config.model}")

    @asynccontextmanager
    async def lifespan(_a):
        yield
        registry = SessionRegistry.get()
        logger.info(f"Shutting down server ({registry.active_count} connection(s) open)")
        await registry.drain(SHUTDOWN_GRACE_PERIOD)

    _app = FastAPI(title="Energy-Wise Relay", docs_url=None, redoc_url=None, lifespan=lifespan)

    _app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    _app.state.relay_config = config
    _app.state.llm_client = llm_client

    setup_routes(_app)
    return _app


# ── Entry point ──────────────────────────────────────────────────

def main():
    """Load .env, validate configuration and start the server."""
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = RelayConfig.from_env()
        app = create_app(config)
    except ConfigurationError as e:
        logger.error(f"Error: {e}")
        logger.error("Please create a .env file and add your Google API Key.")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Failed to initialize Google Generative AI model: {e}")
        sys.exit(1)

    print(f"\n  Energy-Wise relay → http://localhost:{config.port}\n")
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
