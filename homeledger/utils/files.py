import logging
import re
import secrets
import time
from pathlib import Path

logger = logging.getLogger(__name__)


def safe_file_name(original: str | None, prefix: str | None = None, ext: str = "pdf") -> str:
    """Timestamped, random-suffixed file name with only [A-Za-z0-9_] in the stem.

    The extension is always ``ext``; the client's own extension is ignored.
    """
    stem = re.sub(r"[^a-zA-Z0-9]", "_", Path(original or "document").stem)[:50] or "document"
    name = f"{int(time.time() * 1000)}_{secrets.token_hex(3)}_{stem}.{ext}"
    return f"{prefix}_{name}" if prefix else name


def _resolve(upload_dir: str, relative_path: str) -> Path:
    root = Path(upload_dir).resolve()
    target = (root / relative_path).resolve()
    if not target.is_relative_to(root):
        raise ValueError(f"Path {relative_path!r} escapes the upload directory")
    return target


def save_upload(contents: bytes, *, upload_dir: str, subdir: str, file_name: str) -> str:
    """Write ``contents`` under ``upload_dir/subdir`` and return the path relative to ``upload_dir``."""
    relative_path = f"{subdir}/{file_name}"
    target = _resolve(upload_dir, relative_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "wb") as f:
        f.write(contents)
    return relative_path


def remove_upload(relative_path: str | None, *, upload_dir: str) -> None:
    if not relative_path:
        return
    try:
        _resolve(upload_dir, relative_path).unlink(missing_ok=True)
    except (OSError, ValueError) as e:
        # the database row is already gone, a stale file is only disk space
        logger.error(f"Could not remove upload {relative_path}: {str(e)}", exc_info=True)
