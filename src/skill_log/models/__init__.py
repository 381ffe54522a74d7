"""Database models package."""

from skill_log.models.skill import Skill

__all__ = ["Skill"]
