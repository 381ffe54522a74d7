"""Utility functions package."""

from skill_log.utils.coerce import coerce_pin_level, parse_timestamp, utcnow
from skill_log.utils.file_storage import delete_file, file_exists, load_file, save_file

__all__ = [
    "coerce_pin_level",
    "delete_file",
    "file_exists",
    "load_file",
    "parse_timestamp",
    "save_file",
    "utcnow",
]
