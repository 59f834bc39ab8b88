"""
FastAPI application exposing live feed generator statistics.
"""
import logging
import threading
import time

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from feedgen import __version__
from feedgen.api.routes import router
from feedgen.api.schemas import ErrorResponse
from feedgen.data.generator import TradeFeedGenerator

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(generator: TradeFeedGenerator) -> FastAPI:
    """Build the stats API for a running generator"""
    app = FastAPI(
        title="Trade Feed Generator",
        version=__version__,
        description="Live statistics for the synthetic trade feed",
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.generator = generator

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time to response headers"""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
            ).model_dump()
        )

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "name": "Trade Feed Generator",
            "version": __version__,
            "stats": f"{API_PREFIX}/stats",
            "health": f"{API_PREFIX}/health",
        }

    app.include_router(router, prefix=API_PREFIX)
    return app


def serve_in_background(app: FastAPI, port: int, host: str = "0.0.0.0") -> uvicorn.Server:
    """
    Run the API with uvicorn in a daemon thread.

    Returns:
        The server; set ``should_exit`` on it to stop serving.
    """
    config = uvicorn.Config(app, host=host, port=port, log_level="warning")
    server = uvicorn.Server(config)

    thread = threading.Thread(target=server.run, name="stats-api", daemon=True)
    thread.start()
    logger.info(f"📊 Stats API listening on http://{host}:{port}{API_PREFIX}/stats")
    return server
