"""
Utility functions for ABC Retailers.
"""

from .concurrency import run_blocking, with_deadline
from .naming import blob_name_from_url, timestamped_name, unique_blob_name
from .secrets import mask_connection_string

__all__ = [
    "run_blocking",
    "with_deadline",
    "blob_name_from_url",
    "mask_connection_string",
    "timestamped_name",
    "unique_blob_name",
]
