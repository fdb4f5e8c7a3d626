"""
errors.py — Error taxonomy of the Cart Service

Every failure the orchestrator reports is one of the exceptions below, so the
REST layer (or any other caller) can tell them apart and map them to a response.
None of them is retried inside the service.
"""


class CartServiceError(Exception):
    """Base class for all errors surfaced by the cart orchestrator."""
    code = "cart_service_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(CartServiceError):
    """Malformed input (empty ids, quantity below one, negative price)."""
    code = "invalid_request"


class InsufficientStock(CartServiceError):
    """The Stock Check Service reported that the requested quantity is not available."""
    code = "insufficient_stock"

    def __init__(self, item_id: str, quantity: int):
        super().__init__(f"Not enough stock available for item '{item_id}' (requested {quantity}).")
        self.item_id = item_id
        self.quantity = quantity


class EmptyCart(CartServiceError):
    """Checkout was requested for a cart without items."""
    code = "empty_cart"

    def __init__(self, user_id: str):
        super().__init__(f"Cart of user '{user_id}' is empty. Cannot checkout.")
        self.user_id = user_id


class OrderRejected(CartServiceError):
    """The Order Service answered with a non-success status."""
    code = "order_rejected"

    def __init__(self, reason: str, status: str = ""):
        super().__init__(f"Order failed: {reason}")
        self.reason = reason
        self.status = status


class DependencyUnavailable(CartServiceError):
    """
    A dependency (stock check, order service or cart store) could not be reached,
    timed out, or answered outside of its protocol. The original exception is
    kept as `__cause__`.
    """
    code = "dependency_unavailable"

    def __init__(self, dependency: str, detail: str):
        super().__init__(f"{dependency} unavailable: {detail}")
        self.dependency = dependency
        self.detail = detail
