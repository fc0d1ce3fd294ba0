"""
Main FastAPI application for the email relay.
"""
from fastapi import FastAPI
import logging
from contextlib import asynccontextmanager

from .config import get_settings
from .routers.health import router as health_router
from .routers.webhook import router as webhook_router


settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Listening for inbound email on /%s", settings.WEBHOOK_PATH)
    if settings.DRY_RUN:
        logger.warning("DRY RUN enabled: blocks are logged, Discord webhooks are not called")
    if not settings.WEBHOOK_SIGNATURE_KEY:
        logger.warning("WEBHOOK_SIGNATURE_KEY not set: webhook signatures are not verified")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Routers
app.include_router(health_router)
app.include_router(webhook_router, prefix="/" + settings.WEBHOOK_PATH)


@app.get("/", tags=["root"])
async def root() -> dict:
    """Simple root endpoint."""
    return {"name": app.title, "version": app.version}
