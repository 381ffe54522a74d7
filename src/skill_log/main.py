"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from skill_log.config import settings
from skill_log.database import engine
from skill_log.routers import skills, view
from skill_log.services.migrator import migrate

logger = logging.getLogger(__name__)


def configure_logging(level: str | None = None) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open (and if needed upgrade) the store once before serving."""
    configure_logging()
    version = migrate(engine)
    logger.info("Skill store ready at %s (schema v%d)", settings.database_url, version)
    yield


app = FastAPI(
    title="Skill Log API",
    description="Local note/skill log with filtered, pinned and monthly views",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware to allow a local frontend to call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(skills.router, prefix="/api")
app.include_router(view.router, prefix="/api")
