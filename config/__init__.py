"""Configuration for the WorkSphere backend.

``config/settings.py`` is local and never checked in. On first import it is
seeded from ``settings.example.py``; values themselves come from the
environment (or ``config/secret.json``), so the seeded copy rarely needs edits.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).parent
_SETTINGS_FILE = _CONFIG_DIR / "settings.py"
_EXAMPLE_FILE = _CONFIG_DIR / "settings.example.py"


def _seed_settings_file() -> bool:
    """Copy the example settings into place. Returns True when a copy was made."""
    if _SETTINGS_FILE.exists() or not _EXAMPLE_FILE.exists():
        return False
    try:
        shutil.copy2(_EXAMPLE_FILE, _SETTINGS_FILE)
    except OSError as e:
        logger.warning(f"Could not create {_SETTINGS_FILE.name} from the example: {e}")
        return False
    logger.info(f"Created {_SETTINGS_FILE} from {_EXAMPLE_FILE.name}")
    return True


_seed_settings_file()

from .settings import *  # noqa: E402,F401,F403
