"""Local asset storage for uploaded files."""

import os
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from core.errors import ValidationError

# Configure logging with datetime prefix
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"


def _megabytes(size: int) -> str:
    value = size / (1024 * 1024)
    return f"{value:g}MB"


class AssetStore:
    """Saves uploads under ``base_dir`` and hands back stable public paths."""

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir)

    def save(self, file: Optional[FileStorage], folder: str, max_size: int,
             mimetype_prefixes: Optional[Iterable[str]] = None,
             type_error: str = "File type not allowed") -> Dict[str, Any]:
        if file is None or not file.filename:
            raise ValidationError("No file uploaded")

        if mimetype_prefixes is not None:
            mimetype = (file.mimetype or '').lower()
            if not any(mimetype.startswith(prefix) for prefix in mimetype_prefixes):
                raise ValidationError(type_error)

        # Check file size
        file.stream.seek(0, os.SEEK_END)
        file_size = file.stream.tell()
        file.stream.seek(0)
        if file_size > max_size:
            raise ValidationError(f"File size exceeds the maximum limit of {_megabytes(max_size)}.")

        original = secure_filename(file.filename) or "upload"
        stored_name = f"{uuid.uuid4().hex[:12]}-{original}"
        target_dir = self.base_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        file.save(str(target_dir / stored_name))

        logger.info(f"Stored upload {stored_name} ({file_size} bytes) in {folder}")
        return {
            'path': f"{PUBLIC_PREFIX}/{folder}/{stored_name}",
            'original_name': file.filename,
            'size': file_size,
        }

    def resolve(self, public_path: str) -> Optional[Path]:
        """Map a public path back to a file under ``base_dir``."""
        if not public_path or not public_path.startswith(PUBLIC_PREFIX + "/"):
            return None
        relative = public_path[len(PUBLIC_PREFIX) + 1:]
        candidate = (self.base_dir / relative).resolve()
        if self.base_dir.resolve() not in candidate.parents:
            return None
        return candidate

    def delete(self, public_path: str) -> bool:
        """Remove a stored file; missing files are not an error."""
        target = self.resolve(public_path)
        if target is None or not target.exists():
            return False
        try:
            target.unlink()
            return True
        except OSError as e:
            logger.warning(f"Could not delete {target}: {e}")
            return False
