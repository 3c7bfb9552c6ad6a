"""Mark every company account active."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import DATABASE_PATH
from database import Database, init_database, set_all_companies_active


def main() -> None:
    db = Database(DATABASE_PATH)
    init_database(db)
    updated = set_all_companies_active(db)
    print(f"Activated {updated} companies")


if __name__ == "__main__":
    main()
