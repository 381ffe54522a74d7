#!/usr/bin/env python3
"""
capture.py — CLI for the skill log.

Stores a quick memo (or exports/imports the whole log) without requiring the
FastAPI server to be running. All data is written to DATA_ROOT (configured in
.env, defaults to ~/Documents/skill_log).

Usage:
    uv run python capture.py <text> [pin-level]
    uv run python capture.py --export [path]
    uv run python capture.py --import <path>

Example:
    uv run python capture.py "Learned how sqlite AUTOINCREMENT works" 3
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

# Ensure the src/ directory is on the path so skill_log imports resolve
# correctly when running this script directly from the repo root.
_SRC = os.path.join(os.path.dirname(__file__), "src")
if _SRC not in sys.path:
    sys.path.insert(0, _SRC)

USAGE = (
    "Usage: uv run python capture.py <text> [pin-level]\n"
    "       uv run python capture.py --export [path]\n"
    "       uv run python capture.py --import <path>"
)


def main() -> None:  # noqa: C901
    args = sys.argv[1:]
    if not args:
        print(USAGE)
        sys.exit(1)

    # ------------------------------------------------------------------ imports
    # Deferred so sys.path manipulation above takes effect first.
    from skill_log.config import settings
    from skill_log.database import SessionLocal, engine
    from skill_log.errors import ImportFormatError, SkillImportError, SkillLogError
    from skill_log.main import configure_logging
    from skill_log.services.codec import import_json, write_export
    from skill_log.services.draft import DraftStore
    from skill_log.services.migrator import migrate
    from skill_log.services.query import pin_stars
    from skill_log.services.skill_log import SkillLogService
    from skill_log.services.skill_store import SkillStore
    from skill_log.utils.file_storage import load_file

    configure_logging("WARNING")

    # -------------------------------------------- bootstrap data directory + DB
    data_root = Path(settings.data_root)
    print(f"📁  Data root : {data_root}")
    print(f"🗄️   Database  : {settings.database_url}")
    print()

    data_root.mkdir(parents=True, exist_ok=True)
    try:
        migrate(engine)
    except SkillLogError as exc:
        print(f"❌  Could not open the skill store: {exc}", file=sys.stderr)
        sys.exit(1)

    store = SkillStore(SessionLocal)

    # ------------------------------------------------------------------ export
    if args[0] == "--export":
        target = args[1] if len(args) > 1 else settings.export_filename
        written = write_export(store, target)
        print(f"✅  Exported {len(store.get_all())} skills → {written}")
        return

    # ------------------------------------------------------------------ import
    if args[0] == "--import":
        if len(args) < 2:
            print(USAGE)
            sys.exit(1)
        try:
            report = import_json(store, load_file(args[1]))
        except (OSError, ImportFormatError, SkillImportError) as exc:
            print(f"❌  Import failed: {exc}", file=sys.stderr)
            sys.exit(1)
        print("✅  Import complete!")
        print(f"    New      : {report.created}")
        print(f"    Replaced : {report.replaced}")
        print(f"    Skipped  : {report.skipped}")
        return

    # ------------------------------------------------------------------- memo
    service = SkillLogService(
        store,
        drafts=DraftStore(settings.draft_path),
        memo_title=settings.memo_title,
    )
    pinned = args[1] if len(args) > 1 else 0
    try:
        skill = service.capture_memo(args[0], pinned)
    except SkillLogError as exc:
        print(f"❌  {exc}", file=sys.stderr)
        sys.exit(1)

    print("✅  Captured!")
    print(f"    ID       : {skill.id}")
    print(f"    Pinned   : {pin_stars(skill.pinned)}")
    print(f"    Created  : {skill.created_at.astimezone():%Y-%m-%d %H:%M}")


if __name__ == "__main__":
    main()
