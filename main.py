"""
Opinion Portfolio Tracker API Entry Point
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from contextlib import asynccontextmanager

from api.dependencies import initialize_dependencies, cleanup_dependencies
from api.routes import health, market, positions, trades
from api.exceptions import APIException
from api.schemas.envelope import ErrorEnvelope
from config.settings import settings
from utils.logging_setup import setup_logging

# Set up logging
setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, x-api-key",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown"""
    # Startup
    logger.info("Starting Opinion Portfolio Tracker API...")
    initialize_dependencies()
    yield
    # Shutdown
    logger.info("Shutting down Opinion Portfolio Tracker API...")
    cleanup_dependencies()


# Create FastAPI app
app = FastAPI(
    title="Opinion Portfolio Tracker API",
    description="Proxy for the Opinion Protocol OpenAPI - market detail, wallet positions and trades",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-api-key"],
)


@app.middleware("http")
async def preflight(request: Request, call_next):
    """Answer every OPTIONS request with an empty 200 and stamp CORS headers"""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def _envelope(status_code: int, envelope: ErrorEnvelope) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.to_content(), headers=CORS_HEADERS)


# Global exception handlers
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions"""
    return _envelope(
        exc.status_code,
        ErrorEnvelope(msg=exc.detail, error_code=exc.error_code or "API_ERROR", **exc.extra),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Query parameter validation failures"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    return _envelope(
        400,
        ErrorEnvelope(msg=f"Invalid {field}: {first.get('msg', 'validation failed')}", error_code="VALIDATION_ERROR"),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return _envelope(
        500,
        ErrorEnvelope(msg=str(exc) or "An internal server error occurred", error_code="INTERNAL_SERVER_ERROR"),
    )


# Include routers
app.include_router(health.router)
app.include_router(market.router)
app.include_router(positions.router)
app.include_router(trades.router)


@app.get("/api")
async def api_info():
    """API information endpoint"""
    return {
        "name": "Opinion Portfolio Tracker API",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "market": "/api/market?id=<id>",
            "positions": "/api/positions?address=<addr>&page=&limit=",
            "trades": "/api/trades?address=<addr>&page=&limit=",
        }
    }


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
