"""
Order status values.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Lifecycle of an order. Values are stored verbatim in the Status column."""

    SUBMITTED = "Submitted"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
