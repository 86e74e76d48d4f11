"""
Custom exceptions for Order Fulfillment.

Every failure raised by the fulfillment services is one of these. The kind
(validation, not found, conflict, transient) decides the HTTP status in
``exception_handler``.
"""

from typing import Dict, Any


class BusinessException(Exception):
    """Base exception for business logic errors."""

    def __init__(self, message: str, code: str = "BUSINESS_ERROR", details: Dict[str, Any] = None):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(BusinessException):
    """Raised when data validation fails."""

    def __init__(self, message: str, field_errors: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", field_errors or {})


class NotFoundException(BusinessException):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity_type: str, identifier, message: str = None, code: str = "NOT_FOUND"):
        super().__init__(message or f"{entity_type} {identifier} not found", code, {
            "entity_type": entity_type,
            "identifier": str(identifier),
        })


class SkuInactiveException(NotFoundException):
    """Raised when an order references a SKU that exists but is no longer sold."""

    def __init__(self, sku: str):
        super().__init__("SKU", sku, message=f"SKU {sku} is inactive", code="SKU_INACTIVE")


class ConflictException(BusinessException):
    """Raised when an operation conflicts with the current state of an entity."""

    def __init__(self, message: str, code: str = "CONFLICT", details: Dict[str, Any] = None):
        super().__init__(message, code, details)


class InvalidTransitionException(ConflictException):
    """Raised when attempting an invalid workflow transition."""

    def __init__(self, current_status: str, attempted_status: str, entity_type: str = "order"):
        message = f"Invalid transition for {entity_type}: cannot move from {current_status} to {attempted_status}"
        super().__init__(message, "INVALID_TRANSITION", {
            "current_status": current_status,
            "attempted_status": attempted_status,
            "entity_type": entity_type
        })


class OrderAlreadyClaimedException(ConflictException):
    """Raised when a picker tries to claim an order another picker holds."""

    def __init__(self, order_number: str, picker):
        super().__init__(
            f"Order {order_number} is already claimed by {picker}",
            "ORDER_ALREADY_CLAIMED",
            {"order_number": order_number, "picker": str(picker)}
        )


class ActiveOrderLimitException(ConflictException):
    """Raised when a picker already holds the maximum number of active orders."""

    def __init__(self, limit: int, active_count: int):
        super().__init__(
            f"You have reached the maximum of {limit} active orders. "
            f"You currently have {active_count} active orders; complete or release one before claiming another.",
            "ACTIVE_ORDER_LIMIT",
            {"limit": limit, "active_orders": active_count}
        )


class InventoryUnavailableException(ConflictException):
    """Raised when inventory is not available for reservation."""

    def __init__(self, sku: str, bin_location: str, requested_qty: int, available_qty: int = 0):
        message = (
            f"Insufficient inventory for SKU {sku} at {bin_location}: "
            f"requested {requested_qty}, available {available_qty}"
        )
        super().__init__(message, "INVENTORY_UNAVAILABLE", {
            "sku": sku,
            "bin_location": bin_location,
            "requested_quantity": requested_qty,
            "available_quantity": available_qty
        })


class TransientStoreException(BusinessException):
    """Raised when the database gave up on a lock; the caller may retry."""

    retryable = True

    def __init__(self, message: str = "The store is busy, please retry", details: Dict[str, Any] = None):
        super().__init__(message, "STORE_BUSY", details)
