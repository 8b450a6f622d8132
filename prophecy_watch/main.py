from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
import os
import uvicorn
from contextlib import asynccontextmanager
import logging

from .api.routes import router as api_router
from .core.config import settings
from .services.notifier import news_notifier

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the news notifier with the app and stop it on shutdown."""
    logger.info("Starting Prophecy Watch...")
    if settings.NOTIFIER_ENABLED:
        news_notifier.start()
    try:
        yield
    finally:
        await news_notifier.stop()
        logger.info("Shutting down Prophecy Watch...")

app = FastAPI(
    title="Prophecy Watch",
    description="RSS news aggregation with topic tagging and Web Push alerts",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # no cookies or auth headers are used by the API
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok", "message": "Service is healthy"}

# Mount all API routes
app.include_router(api_router, prefix="/api")

# The frontend is plain static files (cards UI and service worker).  API
# routes above take precedence over this mount.
static_dir = os.path.abspath(settings.STATIC_DIR)
if os.path.isdir(static_dir):
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
else:
    logger.warning("Static directory %s does not exist; the frontend will not be served.", static_dir)

# Dev entry point
if __name__ == "__main__":
    uvicorn.run(
        "prophecy_watch.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.is_development
    )
