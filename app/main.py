"""
Pastebin Lite - Main FastAPI application.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.dependencies import get_store
from app.error_handlers import register_error_handlers
from app.routes import health, pastes

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect storage on startup and report which backend is in use."""
    logger.info("Pastebin Lite application starting...")
    store = app.dependency_overrides.get(get_store, get_store)()
    if store.backend.name == "memory":
        logger.warning("DATABASE: Using IN-MEMORY storage (Redis not available or disabled)")
        logger.warning("   Data will NOT persist across server restarts!")
    else:
        logger.info("DATABASE: Connected to Redis")
    if settings.TEST_MODE:
        logger.warning("TEST_MODE enabled: x-test-now-ms header overrides the clock")
    yield
    logger.info("Pastebin Lite application shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Pastebin Lite",
    description="A lightweight Pastebin-like application for sharing text",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware (optional, for cross-origin requests)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include route modules
app.include_router(health.router)
app.include_router(pastes.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
