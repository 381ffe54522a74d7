"""Database initialization script."""

from skill_log.config import settings
from skill_log.database import engine
from skill_log.services.migrator import migrate


def init_database() -> int:
    """
    Create the skill store, or upgrade an older one in place.

    Safe to run multiple times: a store already at the current version is
    left untouched.

    Returns:
        The schema version after migration
    """
    print(f"Opening skill store at {settings.database_url}...")
    version = migrate(engine)
    print(f"Skill store ready (schema version {version}).")
    return version


if __name__ == "__main__":
    init_database()
