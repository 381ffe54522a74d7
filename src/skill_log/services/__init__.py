"""Services package."""

from skill_log.services.draft import DraftStore
from skill_log.services.migrator import migrate
from skill_log.services.skill_log import SkillLogService
from skill_log.services.skill_store import SkillStore

__all__ = ["DraftStore", "SkillLogService", "SkillStore", "migrate"]
