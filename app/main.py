"""
Coffee Service - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api import coffees
from app.config import settings
from app.db import init_db, close_db
from app.domain.entities import CoffeeNotFoundError, StoreUnavailableError
from app.services.seed_loader import load_seed_data
from app.version import __version__
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - handles startup and shutdown"""
    # Startup
    logger.info("🚀 Starting Coffee Service")
    logger.info(f"📦 Version: {__version__}")
    logger.info(f"📝 Environment: {settings.environment}")

    # Initialize database
    await init_db()

    # Seed before serving; failures are logged inside and never abort startup
    if settings.seed_on_startup:
        await load_seed_data(settings.seed_coffees)
    else:
        logger.info("Seeding disabled (SEED_ON_STARTUP=false)")

    logger.info(f"⏱️  Order stream interval: {settings.order_interval_seconds}s")
    logger.info("✅ Configuration loaded successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()


app = FastAPI(
    title="Coffee Service",
    description="Coffee catalog with live per-coffee order streams",
    version=__version__,
    lifespan=lifespan,
)


# ============================================
# CORS Middleware Configuration
# ============================================
# Set CORS_ORIGINS env var as comma-separated list: "https://example.com,https://www.example.com"
allowed_origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]

if allowed_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    logger.info(f"✅ CORS configured for origins: {allowed_origins}")


# ============================================
# Domain error handlers
# ============================================

@app.exception_handler(CoffeeNotFoundError)
async def coffee_not_found_handler(request: Request, exc: CoffeeNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": f"Coffee {exc.coffee_id} not found"}
    )


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    logger.error(f"Catalog store unavailable for {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Catalog store unavailable"}
    )


# Register catalog routes
app.include_router(coffees.router, tags=["coffees"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": "Coffee Service",
        "version": __version__,
        "status": "running",
        "environment": settings.environment,
    }


@app.get("/health")
async def health_check():
    """Health check endpoint - no dependency checks"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
