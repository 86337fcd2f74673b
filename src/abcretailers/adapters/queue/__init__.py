"""Queue adapters for order and stock notifications."""

from .azure_queue_service import AzureQueueStore

__all__ = [
    "AzureQueueStore",
]
