"""
Azure Queue Storage adapter for order and stock notifications.
"""
import asyncio
import logging
from typing import Any, Callable, Iterable, Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.queue import QueueClient, QueueServiceClient

from ...core.exceptions import BackendUnavailableError, ProvisioningError
from ...core.utils import run_blocking, with_deadline

logger = logging.getLogger(__name__)


class AzureQueueStore:
    """
    Plain-text send/receive over named queues.

    Payloads are opaque to this adapter; callers decide the format.
    """

    def __init__(self, service_client: QueueServiceClient, operation_timeout: float = 300.0):
        self._service = service_client
        self._operation_timeout = operation_timeout

    async def _call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        return await with_deadline(
            run_blocking(func, *args, **kwargs), self._operation_timeout
        )

    def _queue_client(self, queue_name: str) -> QueueClient:
        return self._service.get_queue_client(queue_name)

    async def ensure_queues(self, queue_names: Iterable[str]) -> None:
        """Create each queue unless it already exists."""
        for queue_name in queue_names:
            queue_client = self._queue_client(queue_name)
            try:
                await self._call(queue_client.create_queue)
                logger.info(f"✅ Created queue: {queue_name}")
            except ResourceExistsError:
                logger.info(f"📁 Queue already exists: {queue_name}")
            except (AzureError, asyncio.TimeoutError) as e:
                logger.error(f"❌ Failed to create queue {queue_name}: {e}")
                raise ProvisioningError(f"queue '{queue_name}'", str(e)) from e

    async def send_message(self, queue_name: str, message: str) -> None:
        try:
            response = await self._call(self._queue_client(queue_name).send_message, message)
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to send message to queue {queue_name}: {e}")
            raise BackendUnavailableError("send message", str(e), {"queue": queue_name}) from e
        logger.info(f"✅ Message sent to queue {queue_name}, message_id={getattr(response, 'id', None)}")

    async def receive_message(self, queue_name: str) -> Optional[str]:
        """
        Take one message off the queue, or ``None`` when it is empty.

        The message is deleted before its content is returned, so delivery is
        at-most-once: if the caller fails after this returns, the message is
        gone.
        """
        queue_client = self._queue_client(queue_name)
        try:
            message = await self._call(queue_client.receive_message)
            if message is None:
                return None
            await self._call(queue_client.delete_message, message.id, message.pop_receipt)
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to receive message from queue {queue_name}: {e}")
            raise BackendUnavailableError("receive message", str(e), {"queue": queue_name}) from e
        logger.info(f"✅ Received message from queue {queue_name}, message_id={message.id}")
        return message.content

    async def get_queue_length(self, queue_name: str) -> int:
        """Approximate number of messages in the queue."""
        try:
            properties = await self._call(self._queue_client(queue_name).get_queue_properties)
        except ResourceNotFoundError as e:
            logger.error(f"❌ Queue not found: {queue_name}")
            raise BackendUnavailableError("get queue length", "queue does not exist", {"queue": queue_name}) from e
        except (AzureError, asyncio.TimeoutError) as e:
            logger.error(f"❌ Failed to get queue length for {queue_name}: {e}")
            raise BackendUnavailableError("get queue length", str(e), {"queue": queue_name}) from e
        return properties.approximate_message_count or 0
