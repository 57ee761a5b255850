"""Upsert an approved admin account so a fresh database can be logged into.

Usage: python scripts/seed_db.py [email] [password]
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_system.school_system.database.bootstrap import ensure_demo_admin


def main(argv: list[str]) -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    kwargs = {}
    if len(argv) > 0:
        kwargs["email"] = argv[0].strip().lower()
    if len(argv) > 1:
        kwargs["password"] = argv[1]

    user_id = ensure_demo_admin(db_config, **kwargs)
    print(
        f"OK: Admin user_id={user_id} ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main(sys.argv[1:])
