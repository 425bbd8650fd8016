"""
Main FastAPI application for Gigboard Service.
Handles application startup, middleware, error mapping and routing.
"""

import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.dependencies import db_connection, jwt_service, redis_connection
from .api.v1.router import router as api_router
from .core.config import config
from .core.exceptions import GigboardError
from .core.logging import setup_logging

setup_logging(config.get_log_level())
logger = logging.getLogger("gigboard.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info("Starting Gigboard Service...")

    try:
        db_connection.initialize(config.get_database_url())
        db_connection.create_tables()
        logger.info("Database initialized")

        if config.is_redis_enabled():
            redis_connection.initialize(config.get_redis_url())
            logger.info("Redis initialized")
        else:
            logger.info("Redis disabled, domain events will not be published")

        jwt_service.initialize()

        logger.info("Gigboard Service started successfully")

    except Exception as e:
        logger.error(f"Failed to start Gigboard Service: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down Gigboard Service...")

    try:
        await redis_connection.close()
        db_connection.close()
        logger.info("Gigboard Service shut down successfully")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


# Create FastAPI application
app = FastAPI(
    title="Gigboard Service",
    description="Event staffing marketplace: events, applications, messaging and ratings",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add request processing time to response headers."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


def _error_body(error_code: str, error_message: str, details: dict) -> dict:
    return {
        "error_code": error_code,
        "error_message": error_message,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.exception_handler(GigboardError)
async def domain_exception_handler(request: Request, exc: GigboardError):
    """Map domain errors to their HTTP status."""
    logger.warning(f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.error_code, exc.message, exc.details)
    )


# Request body / query validation handler
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests in the same shape as domain validation errors."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    logger.warning(f"Request validation failed on {request.method} {request.url.path}: {errors}")

    return JSONResponse(
        status_code=422,
        content=_error_body("VALIDATION_ERROR", "; ".join(errors), {"errors": errors})
    )


# HTTP exception handler
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """HTTP exception handler for FastAPI HTTP exceptions."""
    logger.warning(f"HTTP exception: {exc.status_code} - {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body("HTTP_ERROR", str(exc.detail), {}),
        headers=getattr(exc, "headers", None)
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "INTERNAL_SERVER_ERROR",
            "An internal server error occurred",
            {"exception": str(exc)}
        )
    )


# Include API router
app.include_router(api_router)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": "Gigboard Service",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "api": "/api/v1",
            "health": "/api/v1/health",
            "docs": "/docs"
        }
    }


# Health check endpoint (simple)
@app.get("/health")
async def simple_health_check():
    """Simple health check endpoint."""
    return {"status": "healthy", "service": "gigboard"}
