"""
FastAPI application entry point for the Closet backend
Reference: https://fastapi.tiangolo.com/tutorial/bigger-applications/
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from closet.api.v1.api import api_router
from closet.core.config import settings
from closet.core.database import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: check the database connection and log how each optional integration is wired.
    Shutdown: dispose of the engine.
    Reference: https://fastapi.tiangolo.com/advanced/events/
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        # Keep serving: /health/ready reports the outage
        logger.error(f"Database connection failed: {type(e).__name__}: {e}")

    for name, state in settings.integrations().items():
        logger.info(f"Integration {name}: {state}")
    if settings.integrations()["cache"] == "memory" and settings.ENVIRONMENT == "production":
        logger.warning("Daily outfit cache is process-local; cached AI outfits are not shared between instances")

    yield

    await engine.dispose()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=(
        "Wardrobe and outfit-planning backend: clothing items, calendar events, "
        "daily outfit suggestions (heuristic or AI), photo storage and weather."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "api": settings.API_V1_PREFIX,
        "docs": "/docs",
    }
