"""
Image Relay Application

Wires the relay router, permissive CORS, static file serving and the
startup asset bootstrap into one FastAPI app.

Run:
    image-relay                 # or: python -m image_relay.app
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response
from fastapi.staticfiles import StaticFiles

from .asset_bootstrap import ensure_asset
from .config import RelayConfig
from .fetcher import ImageRelay
from .routes_fastapi import router as relay_router

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(
    config: Optional[RelayConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the relay app.

    Args:
        config: Service configuration; read from the environment if omitted
        transport: Optional httpx transport for all outbound requests
    """
    config = config or RelayConfig.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await ensure_asset(config, transport=transport)
        yield

    app = FastAPI(title="Image Relay", lifespan=lifespan)
    app.state.config = config
    app.state.relay = ImageRelay(config, transport=transport)

    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.include_router(relay_router)

    # Mounted last so /proxy wins over a same-named file
    static_dir = Path(config.static_dir)
    static_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    return app


def main() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = RelayConfig.from_env()
    logger.info(f"Image relay running on port {config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
