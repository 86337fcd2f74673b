"""
Domain-specific error types for business rule violations.
"""

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class InvalidEntityDataError(DomainError):
    """Invalid field value on a customer, product or order."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        message = f"Invalid {field}: {reason}"
        super().__init__(
            message, "INVALID_ENTITY_DATA", {"field": field, "value": value}
        )


class EntityNotFoundError(DomainError):
    """Entity not found."""

    def __init__(self, entity_kind: str, row_key: str) -> None:
        message = f"{entity_kind} with ID '{row_key}' not found"
        super().__init__(
            message, "NOT_FOUND", {"entity_kind": entity_kind, "row_key": row_key}
        )


class InsufficientStockError(DomainError):
    """Order quantity exceeds the stock available."""

    def __init__(self, product_id: str, requested: int, available: int) -> None:
        message = (
            f"Insufficient stock for product '{product_id}'. "
            f"Requested: {requested}, Available: {available}"
        )
        super().__init__(
            message,
            "INSUFFICIENT_STOCK",
            {"product_id": product_id, "requested": requested, "available": available},
        )
