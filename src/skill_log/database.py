"""Database configuration and session management."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from skill_log.config import settings

# Database URL — derived from DATA_ROOT / settings.database_url.
# The model_validator in Settings always populates this field after init.
assert settings.database_url is not None, "database_url must be set in Settings"
DATABASE_URL: str = settings.database_url


def create_store_engine(url: str, **kwargs) -> Engine:
    """
    Create an engine for a skill log database.

    Args:
        url: SQLAlchemy database URL
        **kwargs: Extra keyword arguments forwarded to ``create_engine``

    Returns:
        Engine bound to the URL
    """
    connect_args = kwargs.pop("connect_args", {})
    if url.startswith("sqlite"):
        connect_args.setdefault("check_same_thread", False)  # Needed for SQLite
    return create_engine(url, connect_args=connect_args, echo=False, **kwargs)


# Opened once per process and held for its lifetime
engine = create_store_engine(DATABASE_URL)

# Create SessionLocal class for database sessions
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for declarative models
Base = declarative_base()
