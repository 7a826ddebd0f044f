"""FastAPI application for the pool service.

Note: Authentication is not implemented at the application
level. Callers name themselves in each request; put the API behind an
authenticating proxy before exposing it.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cpamm import __version__
from cpamm.api.endpoints import router
from cpamm.errors import PoolError
from cpamm.models.api import ErrorResponse
from cpamm.safe_int import SafeIntError

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("CPAMM_HOST", "0.0.0.0")
PORT = int(os.environ.get("CPAMM_PORT", "8000"))
DEBUG = os.environ.get("CPAMM_DEBUG", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = os.environ.get("CPAMM_LOG_LEVEL", "INFO").upper()

# Maximum request body size (64 KB); pool requests are tiny
MAX_REQUEST_SIZE = 64 * 1024

logger = structlog.get_logger()

app = FastAPI(
    title="Constant-product AMM pool",
    description="Swap and liquidity API over a two-asset constant-product pool",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


@app.exception_handler(PoolError)
async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
    """Pool precondition failures are client errors: 400 with the error code."""
    logger.warning("pool_call_rejected", path=request.url.path, error=exc.code, detail=str(exc))
    body = ErrorResponse(error=exc.code, detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(request: Request, exc: SafeIntError) -> JSONResponse:
    """Amounts that overflow or underflow uint256 math."""
    logger.warning("pool_arithmetic_error", path=request.url.path, detail=str(exc))
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(error="arithmetic_error", detail=str(exc)).model_dump(),
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Configure structlog with a console renderer at ``level``."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
    )


def run() -> None:
    """Run the pool API server.

    Configuration via environment variables:
    - CPAMM_HOST: Host to bind to (default: 0.0.0.0)
    - CPAMM_PORT: Port to bind to (default: 8000)
    - CPAMM_DEBUG: Enable debug/reload mode (default: false)
    - CPAMM_LOG_LEVEL: structlog level (default: INFO)
    """
    configure_logging()
    uvicorn.run(
        "cpamm.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
