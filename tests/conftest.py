"""
Shared fixtures and test doubles for the cart service tests.

The doubles implement the same Protocols as the production adapters
(CartStore, StockOracle, OrderPlacer) and record every call, so tests can
assert both on results and on which dependencies were touched.
"""
from decimal import Decimal

import pytest

from cart_service.errors import DependencyUnavailable
from cart_service.models import Cart, CartItem, OrderOutcome, StockCheckResult
from cart_service.orchestrator import CartOrchestrator


class InMemoryCartStore:
    """
    Dict-backed CartStore. Carts are kept serialized, like in Redis, so a
    cart returned by `get` never aliases the stored value.
    """

    def __init__(self):
        self.data = {}
        self.fail_on_delete = False
        self.puts = 0
        self.deletes = 0

    def get(self, user_id):
        raw = self.data.get(user_id)
        if raw is None:
            return Cart(userId=user_id)
        return Cart.model_validate_json(raw)

    def put(self, user_id, cart):
        self.puts += 1
        self.data[user_id] = cart.storage_json()

    def delete(self, user_id):
        if self.fail_on_delete:
            raise DependencyUnavailable("cart-store", "connection refused")
        self.deletes += 1
        self.data.pop(user_id, None)


class FakeStockOracle:
    """StockOracle answering from a table; unknown items are in stock."""

    def __init__(self):
        self.out_of_stock = set()
        self.error = None
        self.calls = []

    def check_stock(self, item_id, quantity):
        self.calls.append((item_id, quantity))
        if self.error is not None:
            raise self.error
        return StockCheckResult(inStock=item_id not in self.out_of_stock)


class FakeOrderPlacer:
    """OrderPlacer returning a preset outcome and recording every request."""

    def __init__(self):
        self.outcome = OrderOutcome(status="success", orderId="ord-123")
        self.error = None
        self.requests = []

    @property
    def call_count(self):
        return len(self.requests)

    def place_order(self, order):
        self.requests.append(order)
        if self.error is not None:
            raise self.error
        return self.outcome


@pytest.fixture
def store():
    return InMemoryCartStore()


@pytest.fixture
def stock_oracle():
    return FakeStockOracle()


@pytest.fixture
def order_placer():
    return FakeOrderPlacer()


@pytest.fixture
def orchestrator(store, stock_oracle, order_placer):
    return CartOrchestrator(store=store, stock_oracle=stock_oracle, order_placer=order_placer)


@pytest.fixture
def book_a():
    return CartItem(itemId="bookA", title="Book A", quantity=2, unitPrice=Decimal("10.00"))


@pytest.fixture
def book_b():
    return CartItem(itemId="bookB", title="Book B", quantity=1, unitPrice=Decimal("7.50"))
