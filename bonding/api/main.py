"""FastAPI application for the bonding curve token.

Every BondingCurveError and fixed-point error raised by an operation is
turned into a JSON error body with a status code by error family; the
operation itself has already been aborted without side effects.
"""

import logging
import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bonding.api.endpoints import router
from bonding.errors import (
    AccessError,
    BondingCurveError,
    CurveValidationError,
    FixedPointError,
    FundingError,
    ReentrantCall,
    Unauthorized,
)
from bonding.models.api import ErrorResponse

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("BONDING_HOST", "0.0.0.0")
PORT = int(os.environ.get("BONDING_PORT", "8000"))
DEBUG = os.environ.get("BONDING_DEBUG", "false").lower() in ("true", "1", "yes")


def configure_logging(debug: bool = DEBUG) -> None:
    """Configure structlog with level filtering, ISO timestamps and console output."""
    log_level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )


def status_for(error: Exception) -> int:
    """HTTP status code for an operation error."""
    if isinstance(error, CurveValidationError):
        return 400
    if isinstance(error, Unauthorized):
        return 403
    if isinstance(error, ReentrantCall | FundingError):
        return 409
    if isinstance(error, AccessError):
        return 403
    if isinstance(error, FixedPointError):
        return 422
    return 400


app = FastAPI(
    title="Bonding Curve Token",
    description="Exponential bonding curve issuance against a reserve currency",
    version="0.1.0",
)


@app.exception_handler(BondingCurveError)
@app.exception_handler(FixedPointError)
async def operation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map aborted operations to {"error", "detail"} responses."""
    status_code = status_for(exc)
    logger.info(
        "operation_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
    )


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - BONDING_HOST: Host to bind to (default: 0.0.0.0)
    - BONDING_PORT: Port to bind to (default: 8000)
    - BONDING_DEBUG: Enable debug logging and reload mode (default: false)
    - BONDING_* curve parameters, see bonding.config
    """
    configure_logging(DEBUG)
    uvicorn.run(
        "bonding.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
