"""Main FastAPI application."""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from court_reservations.api import admin, courts, maintenance, reservations
from court_reservations.core.config import settings
from court_reservations.core.database import init_models
from court_reservations.core.exceptions import ReservationError

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting court reservation service for {settings.FACILITY_NAME}")
    logger.info(f"Debug mode: {settings.DEBUG}, facility timezone: {settings.FACILITY_TIMEZONE}")

    await init_models()

    yield

    # Shutdown
    logger.info("Shutting down court reservation service")


# Create FastAPI app
app = FastAPI(
    title="Court Reservations",
    description="Book tennis courts in 30-minute slots; manage courts, reservations and maintenance",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    """Render domain errors as ``{"detail": ...}`` with their status code."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    """Unexpected persistence failure outside the services' own handling."""
    logger.error(f"{request.method} {request.url.path} database error: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


# Include routers
app.include_router(courts.router)
app.include_router(reservations.router)
app.include_router(admin.router)
app.include_router(maintenance.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "facility": settings.FACILITY_NAME,
        "timezone": settings.FACILITY_TIMEZONE,
    }
