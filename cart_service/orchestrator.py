"""
orchestrator.py — Core Orchestration Logic for the Cart Service

This module owns the cart lifecycle and coordinates the cart store (Redis) with
the Stock Check Service and the Order Service.

Operations:
1. get_cart     — read-through to the store
2. add_item     — validate, check stock, replace the line, write the full cart
3. remove_item  — filter the line out, write the full cart if it changed
4. clear_cart   — delete the stored cart
5. checkout     — snapshot the cart, place the order, clear the cart on success

Every mutation is a read-modify-write of the whole cart. Nothing is locked:
two concurrent mutations for the same user race and the last write wins.
The sequence is not transactional; there is no compensation of placed orders.
"""

import logging
from typing import Optional

from .clients import OrderPlacer, StockOracle
from .errors import (
    CartServiceError,
    EmptyCart,
    InsufficientStock,
    InvalidRequest,
    OrderRejected,
)
from .models import Cart, CartItem, OrderRequest
from .store import CartStore

log = logging.getLogger(__name__)


def log_prefix_for(user_id: str) -> str:
    return f"[User: {user_id}]"


def _require_user_id(user_id: str):
    if not user_id or not user_id.strip():
        raise InvalidRequest("userId must not be empty.")


def validate_item(item: CartItem):
    """
    Checks a cart item before any side effect.

    Raises:
        InvalidRequest: If the item id is empty, the quantity is below one or the price is negative.
    """
    if not item.itemId or not item.itemId.strip():
        raise InvalidRequest("itemId must not be empty.")
    if item.quantity < 1:
        raise InvalidRequest(f"quantity must be at least 1 (got {item.quantity}).")
    if item.unitPrice < 0:
        raise InvalidRequest(f"unitPrice must not be negative (got {item.unitPrice}).")


class CartOrchestrator:
    """
    Stateless coordinator of the cart operations. All state lives in the store,
    so one instance can serve any number of concurrent requests.
    """

    def __init__(self, store: CartStore, stock_oracle: StockOracle, order_placer: OrderPlacer):
        self.store = store
        self.stock_oracle = stock_oracle
        self.order_placer = order_placer

    def get_cart(self, user_id: str) -> Cart:
        _require_user_id(user_id)
        return self.store.get(user_id)

    def add_item(self, user_id: str, item: CartItem) -> Cart:
        """
        Adds `item` to the cart of `user_id`, replacing any line with the same itemId.

        Re-adding an item overwrites its quantity and price instead of summing them.
        The stock check and the write are not atomic.

        Raises:
            InvalidRequest: Malformed user id or item.
            InsufficientStock: The requested quantity is not available. Cart unchanged.
            DependencyUnavailable: Stock Check Service or store failure.
        """
        _require_user_id(user_id)
        validate_item(item)
        log_prefix = log_prefix_for(user_id)

        log.info(f"{log_prefix} Checking stock for {item.itemId} x{item.quantity}.")
        stock = self.stock_oracle.check_stock(item.itemId, item.quantity)
        if not stock.inStock:
            log.warning(f"{log_prefix} Rejected: {item.itemId} x{item.quantity} not in stock.")
            raise InsufficientStock(item.itemId, item.quantity)

        cart = self.store.get(user_id)
        cart.items = [line for line in cart.items if line.itemId != item.itemId]
        cart.items.append(item.model_copy())
        self.store.put(user_id, cart)

        log.info(f"{log_prefix} Item {item.itemId} stored (quantity {item.quantity}).")
        return cart

    def remove_item(self, user_id: str, item_id: str) -> Cart:
        """Removes every line of `item_id`. Removing an absent item succeeds without change."""
        _require_user_id(user_id)
        if not item_id or not item_id.strip():
            raise InvalidRequest("itemId must not be empty.")

        cart = self.store.get(user_id)
        remaining = [line for line in cart.items if line.itemId != item_id]
        if len(remaining) == len(cart.items):
            return cart

        cart.items = remaining
        self.store.put(user_id, cart)

        log.info(f"{log_prefix_for(user_id)} Item {item_id} removed.")
        return cart

    def clear_cart(self, user_id: str) -> None:
        _require_user_id(user_id)
        self.store.delete(user_id)
        log.info(f"{log_prefix_for(user_id)} Cart cleared.")

    def checkout(self, user_id: str) -> Optional[str]:
        """
        Places an order for the current cart content and clears the cart on success.

        Steps:
            1. Load the cart; an empty cart stops here without external calls.
            2. Snapshot the items into an OrderRequest.
            3. Submit it to the Order Service.
            4. A non-success status leaves the cart untouched.
            5. On success the cart is cleared. A failing clear, or a success
               answer without an order id, is logged as an anomaly only: the
               order is placed and must not look failed.

        Returns:
            Optional[str]: The order identifier reported by the Order Service,
                None if it reported success without one.
        Raises:
            InvalidRequest: Empty user id.
            EmptyCart: The cart has no items.
            OrderRejected: The Order Service answered with a non-success status.
            DependencyUnavailable: Order Service or store failure before the order was placed.
        """
        _require_user_id(user_id)
        log_prefix = log_prefix_for(user_id)

        cart = self.store.get(user_id)
        if cart.is_empty():
            log.warning(f"{log_prefix} Checkout rejected: cart is empty.")
            raise EmptyCart(user_id)

        order = OrderRequest.from_cart(cart)
        log.info(f"{log_prefix} Placing order with {len(order.items)} line(s).")
        outcome = self.order_placer.place_order(order)

        if not outcome.succeeded:
            reason = outcome.message or f"status '{outcome.status}'"
            log.warning(f"{log_prefix} Order rejected by order service: {reason}")
            raise OrderRejected(reason, status=outcome.status)

        if outcome.orderId:
            log.info(f"{log_prefix} Order placed. (OrderId: {outcome.orderId})")
        else:
            log.warning(f"{log_prefix} ANOMALY: order service reported success without an order id.")

        try:
            self.store.delete(user_id)
        except CartServiceError as e:
            log.warning(
                f"{log_prefix} ANOMALY: order {outcome.orderId} placed but cart could not be cleared: {e}"
            )

        return outcome.orderId
