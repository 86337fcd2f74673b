"""
Stored-name generation for blobs and share files.
"""

import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from ..constants import STORED_NAME_TIMESTAMP_FORMAT


def unique_blob_name(original_filename: str) -> str:
    """Random UUID plus the original extension, e.g. ``'3f1c...e2.png'``."""
    return f"{uuid.uuid4()}{Path(original_filename).suffix}"


def timestamped_name(original_filename: str, now: Optional[datetime] = None) -> str:
    """
    Prefix the original filename with the local upload time.

    Two uploads of the same filename within the same second produce the same
    name and the second one overwrites the first.
    """
    now = now or datetime.now()
    return f"{now.strftime(STORED_NAME_TIMESTAMP_FORMAT)} - {Path(original_filename).name}"


def blob_name_from_url(url: Optional[str]) -> Optional[str]:
    """Blob name (last path segment) of a blob URL, or ``None`` for an empty URL."""
    if not url:
        return None
    path = urlparse(url).path.rstrip("/")
    return unquote(path.rsplit("/", 1)[-1]) or None
