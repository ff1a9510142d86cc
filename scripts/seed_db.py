from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.venue_attendance.venue_attendance.database.bootstrap import ensure_demo_data


def main() -> None:
    """Create the demo admin (dni 'admin', password 'admin123') and a demo venue."""
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_data(db_config)
    print(f"OK: Demo data ready -> {db_config.get('host')}/{db_config.get('database')}")


if __name__ == "__main__":
    main()
