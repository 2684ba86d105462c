"""Upload service: naming and persisting uploaded case documents."""

import logging
import secrets
import string
import time
from pathlib import PurePath
from typing import Dict, Optional, Tuple

from uploads.adapters.repository import AbstractFileStore

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".pdf"
UPLOAD_FIELDS = ("original", "redacted")

_BASE36 = string.digits + string.ascii_lowercase


class NoFilesError(ValueError):
    """Raised when a request carries none of the expected file parts."""


def _random_suffix(length: int = 11) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def generate_file_name(prefix: str, original_name: Optional[str]) -> str:
    """
    Collision-resistant name: prefix, epoch millis, random base36 suffix
    and the uploaded file's extension (.pdf when it has none).
    """
    ext = PurePath(original_name or "").suffix or DEFAULT_EXTENSION
    return f"{prefix}-{int(time.time() * 1000)}-{_random_suffix()}{ext}"


def save_uploads(
    files: Dict[str, Tuple[Optional[str], bytes]],
    store: AbstractFileStore,
) -> Dict[str, Optional[str]]:
    """
    Store each present file part and return a URL per part.

    Args:
        files: part name -> (original filename, content) for present parts
        store: file store to write to

    Returns:
        {"original": url or None, "redacted": url or None}
    """
    if not any(files.get(name) is not None for name in UPLOAD_FIELDS):
        raise NoFilesError("no_files")

    urls = {}
    for name in UPLOAD_FIELDS:
        part = files.get(name)
        if part is None:
            urls[name] = None
            continue
        filename, data = part
        urls[name] = store.save(generate_file_name(name, filename), data)
    return urls
