"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from api.presentation import error_to_response
from api.routes import table
from api.websocket import router as ws_router
from config import config
from core.exceptions import TableError

logging.basicConfig(
    level=logging.DEBUG if config.debug else config.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[f"{config.rate_limit.requests_per_minute}/minute"],
)


def _rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


def _table_error_handler(request: Request, exc: TableError) -> JSONResponse:
    """Turn engine failures into error responses."""
    status_code, body = error_to_response(exc)
    logger.debug("%s %s -> %d %s", request.method, request.url.path, status_code, body.error)
    return JSONResponse(status_code=status_code, content={"detail": body.model_dump()})


app = FastAPI(
    title="Blackjack Table",
    description="Single-player blackjack against an automated dealer",
    version="0.1.0",
)

# Add rate limiter to app state and exception handlers
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(TableError, _table_error_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(table.router, prefix="/api/table", tags=["table"])
app.include_router(ws_router, prefix="/ws", tags=["websocket"])


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        reload=config.debug,
    )


if __name__ == "__main__":
    run()
