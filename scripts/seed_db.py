from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.event_attendance.event_attendance.common.datetime_utils import now_local
from src.event_attendance.event_attendance.database.bootstrap import ensure_demo_events


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    event_ids = ensure_demo_events(db_config, now=now_local())

    print(
        "OK: Seeded demo events "
        f"{event_ids} -> {db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
