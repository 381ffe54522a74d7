"""Persistence of the unsent quick-capture draft."""

from __future__ import annotations

import json
import logging
import os

from pydantic import ValidationError

from skill_log.schemas.skill import Draft
from skill_log.utils.file_storage import delete_file, file_exists, load_file, save_file

logger = logging.getLogger(__name__)


class DraftStore:
    """
    Scratch file holding the latest unsent input text and pin level.

    A draft that cannot be read is treated as absent; it is never fatal.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        """
        Initialize the draft store.

        Args:
            path: Draft file (absolute or relative to data_root)
        """
        self.path = path

    def load(self) -> Draft | None:
        """Return the saved draft, or None if there is none or it is unreadable."""
        if not file_exists(self.path):
            return None
        try:
            return Draft.model_validate(json.loads(load_file(self.path)))
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring unreadable draft %s: %s", self.path, exc)
            return None

    def save(self, draft: Draft) -> None:
        """Overwrite the draft."""
        save_file(draft.model_dump_json(), self.path)

    def clear(self) -> None:
        """Remove the draft, if any."""
        delete_file(self.path)
