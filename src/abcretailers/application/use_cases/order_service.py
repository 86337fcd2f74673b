"""
Order use cases.

Placing an order touches three stores: the product's stock is decremented
through a conditional update, the order row is added, and JSON
notifications are published on the ``order-notifications`` and
``stock-updates`` queues.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from ...core.constants import (
    CONTRACTS_SHARE,
    ORDER_NOTIFICATIONS_QUEUE,
    PAYMENT_PROOFS_CONTAINER,
    PAYMENTS_DIRECTORY,
    STOCK_UPDATES_QUEUE,
)
from ...core.exceptions import StorageError
from ...core.structured_logger import get_logger
from ...domain.entities import CUSTOMER_PARTITION, ORDER_PARTITION, PRODUCT_PARTITION, Customer, Order, Product
from ...domain.enums import OrderStatus
from ...domain.errors import EntityNotFoundError, InsufficientStockError, InvalidEntityDataError
from ..dto import PaymentProofReceipt, UploadedFile
from ..ports import StorageGateway

logger = get_logger(__name__)


def _parse_status(status: Union[OrderStatus, str]) -> OrderStatus:
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise InvalidEntityDataError("status", status, f"must be one of: {allowed}") from None


class OrderService:
    """Place orders, move them through their statuses and attach payment proofs."""

    def __init__(self, gateway: StorageGateway):
        self._gateway = gateway

    async def list_orders(self) -> List[Order]:
        orders = await self._gateway.list_all(Order)
        return sorted(orders, key=lambda o: o.order_date, reverse=True)

    async def get_order(self, order_id: str) -> Order:
        order = await self._gateway.get(Order, ORDER_PARTITION, order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)
        return order

    async def place_order(self, customer_id: str, product_id: str, quantity: int) -> Order:
        """
        Create a Submitted order and take its quantity out of stock.

        The stock decrement is a conditional update, so two orders racing for
        the same product cannot both succeed on the same stock figure; the
        loser gets ``VersionConflictError`` and no order is written for it.
        """
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidEntityDataError("quantity", quantity, "Quantity must be a whole number") from None
        if quantity < 1:
            raise InvalidEntityDataError("quantity", quantity, "Quantity must be atleast 1")

        customer = await self._gateway.get(Customer, CUSTOMER_PARTITION, customer_id)
        if customer is None:
            raise EntityNotFoundError("Customer", customer_id)
        product = await self._gateway.get(Product, PRODUCT_PARTITION, product_id)
        if product is None:
            raise EntityNotFoundError("Product", product_id)
        if product.stock_available < quantity:
            raise InsufficientStockError(product_id, quantity, product.stock_available)

        order = Order(
            customer_id=customer.customer_id,
            username=customer.username,
            product_id=product.product_id,
            product_name=product.product_name,
            order_date=datetime.now(timezone.utc),
            quantity=quantity,
            unit_price=product.price,
            status=OrderStatus.SUBMITTED,
        )
        order.compute_total()

        previous_stock = product.stock_available
        product.stock_available = previous_stock - quantity
        await self._gateway.update(product)

        try:
            order = await self._gateway.add(order)
        except StorageError as e:
            logger.error(
                "Order write failed after stock was decremented",
                order_id=order.order_id,
                product_id=product_id,
                quantity=quantity,
                error_code=e.error_code,
            )
            raise

        logger.info(
            "Order placed",
            order_id=order.order_id,
            customer_id=customer_id,
            product_id=product_id,
            quantity=quantity,
            total_price=order.total_price,
        )

        await self._notify(
            ORDER_NOTIFICATIONS_QUEUE,
            {
                "event": "OrderCreated",
                "order_id": order.order_id,
                "customer_id": order.customer_id,
                "customer_name": f"{customer.name} {customer.surname}".strip(),
                "product_name": order.product_name,
                "quantity": order.quantity,
                "total_price": order.total_price,
                "order_date": order.order_date.isoformat(),
                "status": order.status.value,
            },
        )
        await self._notify(
            STOCK_UPDATES_QUEUE,
            {
                "event": "StockUpdated",
                "product_id": product.product_id,
                "product_name": product.product_name,
                "previous_stock": previous_stock,
                "new_stock": product.stock_available,
                "updated_by": "Order System",
                "updated_date": datetime.now(timezone.utc).isoformat(),
            },
        )
        return order

    async def update_order_status(self, order_id: str, status: Union[OrderStatus, str]) -> Order:
        new_status = _parse_status(status)
        order = await self.get_order(order_id)
        previous_status = order.status
        order.status = new_status
        order = await self._gateway.update(order)

        logger.info(
            "Order status updated",
            order_id=order_id,
            previous_status=previous_status.value,
            new_status=new_status.value,
        )
        await self._notify(
            ORDER_NOTIFICATIONS_QUEUE,
            {
                "event": "OrderStatusUpdated",
                "order_id": order_id,
                "customer_id": order.customer_id,
                "previous_status": previous_status.value,
                "new_status": new_status.value,
                "updated_date": datetime.now(timezone.utc).isoformat(),
            },
        )
        return order

    async def upload_payment_proof(self, order_id: str, file: UploadedFile) -> PaymentProofReceipt:
        """
        Store a proof of payment for an existing order.

        The document goes to the private ``payment-proofs`` container and a
        copy to ``contracts/payments`` on the file share.
        """
        if file.is_empty:
            raise InvalidEntityDataError("file", file.filename, "Please select a file to upload")
        await self.get_order(order_id)

        blob_name = await self._gateway.upload_document(file.data, file.filename, PAYMENT_PROOFS_CONTAINER)
        share_file_name = await self._gateway.upload_to_file_share(
            file.data, CONTRACTS_SHARE, file.filename, PAYMENTS_DIRECTORY
        )
        logger.info(
            "Payment proof uploaded",
            order_id=order_id,
            blob_name=blob_name,
            share_file_name=share_file_name,
            size=len(file.data),
        )
        return PaymentProofReceipt(order_id=order_id, blob_name=blob_name, share_file_name=share_file_name)

    async def download_payment_proof(self, share_file_name: str) -> bytes:
        return await self._gateway.download_from_file_share(
            CONTRACTS_SHARE, share_file_name, PAYMENTS_DIRECTORY
        )

    async def process_next_notification(
        self, queue_name: str = ORDER_NOTIFICATIONS_QUEUE
    ) -> Optional[Dict[str, Any]]:
        """
        Take the next notification off ``queue_name``.

        Returns the decoded JSON payload, ``{"raw": text}`` for a message that
        isn't JSON, or ``None`` when the queue is empty. The message has
        already been removed from the queue when this returns.
        """
        content = await self._gateway.receive_message(queue_name)
        if content is None:
            return None
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning("Queue message is not JSON", queue=queue_name, error=str(e))
            return {"raw": content}
        if not isinstance(payload, dict):
            return {"raw": content}
        logger.info("Notification processed", queue=queue_name, event=payload.get("event"))
        return payload

    async def _notify(self, queue_name: str, payload: Dict[str, Any]) -> None:
        # The order is already committed; a lost notification is logged, not raised
        try:
            await self._gateway.send_message(queue_name, json.dumps(payload, default=str))
        except StorageError as e:
            logger.warning(
                "Notification not sent",
                queue=queue_name,
                event=payload.get("event"),
                error_code=e.error_code,
            )
