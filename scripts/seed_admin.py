"""Create the seed admin account (admin@gmail.com by default) if it is missing."""

from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config import settings
from core.context import build_context
from identity.credentials import ensure_admin


def main() -> None:
    ctx = build_context(settings)
    try:
        if ensure_admin(ctx, settings.ADMIN_SEED_EMAIL, settings.ADMIN_SEED_PASSWORD):
            print(f"Admin user created: {settings.ADMIN_SEED_EMAIL}")
        else:
            print("Admin user already exists")
    finally:
        ctx.close()


if __name__ == "__main__":
    main()
