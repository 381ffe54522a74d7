"""Skill database model."""

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text

from skill_log.database import Base
from skill_log.utils.coerce import utcnow


class Skill(Base):
    """
    Skill model representing one captured note.

    ``pinned`` and ``completed`` are nullable: rows written before those
    columns existed hold NULL and are read with defaults. ``extra`` keeps
    fields the store does not recognize (from imports) verbatim.

    Attributes:
        id: Primary key, never reused after deletion
        title: Short title
        content: Free text
        category: Category name, empty string for uncategorized
        tags: Comma-separated tag list
        pinned: Pin level 0-5
        completed: Completion flag
        extra: Unrecognized imported fields
        created_at: Timestamp when record was created
        updated_at: Timestamp of the last mutation
    """

    __tablename__ = "skills"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False, default="", index=True)
    tags = Column(String, nullable=False, default="")
    pinned = Column(Integer, nullable=True, default=0)
    completed = Column(Boolean, nullable=True, default=False)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        """String representation of Skill."""
        return f"<Skill(id={self.id}, title='{self.title}', pinned={self.pinned})>"
