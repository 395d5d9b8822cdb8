"""Error kinds surfaced by the order workflow.

Each error carries a stable ``error`` code and the HTTP status the API layer
renders it with, so non-HTTP callers (the CLI) can tell them apart the same way.
"""

from __future__ import annotations


class OrderAdminError(Exception):
    error = "order_admin_error"
    status_code = 500


class OrderNotFoundError(OrderAdminError, LookupError):
    error = "not_found"
    status_code = 404

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"order not found: {order_id}")


class ValidationRejectedError(OrderAdminError, ValueError):
    """Business-rule rejection; the message is meant for the end user."""

    error = "validation_rejected"
    status_code = 422


class UnauthenticatedError(OrderAdminError):
    error = "unauthenticated"
    status_code = 401


class ForbiddenError(OrderAdminError, PermissionError):
    error = "forbidden"
    status_code = 403


class PersistenceError(OrderAdminError, RuntimeError):
    """Storage unavailable or a write failed; callers may retry."""

    error = "persistence_failure"
    status_code = 503
