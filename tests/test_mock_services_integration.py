"""
Integration tests: real clients against the mock external services

The mock FastAPI apps are served in-process through TestClient (an httpx.Client),
which is injected into the production clients. Only the cart store is in memory.
"""
import pytest
from fastapi.testclient import TestClient

from cart_service.clients import OrderServiceClient, StockCheckClient
from cart_service.errors import DependencyUnavailable, InsufficientStock, OrderRejected
from cart_service.models import CartItem, OrderLine, OrderRequest
from cart_service.orchestrator import CartOrchestrator
from mock_services.mock_order_service import app as order_app
from mock_services.mock_stock_check_service import app as stock_app


@pytest.fixture
def stock_client():
    return StockCheckClient(http_client=TestClient(stock_app))


@pytest.fixture
def order_client():
    return OrderServiceClient(http_client=TestClient(order_app))


@pytest.fixture
def wired_orchestrator(store, stock_client, order_client):
    return CartOrchestrator(store=store, stock_oracle=stock_client, order_placer=order_client)


class TestStockCheckAgainstMock:

    def test_known_item_within_stock(self, stock_client):
        result = stock_client.check_stock("clean_code", 5)

        assert result.inStock is True
        assert result.availableQuantity == 100

    def test_known_item_above_stock(self, stock_client):
        assert stock_client.check_stock("clean_code", 101).inStock is False

    def test_zero_stock_item(self, stock_client):
        assert stock_client.check_stock("mythical_man_month", 1).inStock is False

    def test_unknown_item_defaults_to_in_stock(self, stock_client):
        assert stock_client.check_stock("some-mongo-id", 3).inStock is True

    def test_outage_is_dependency_unavailable(self, stock_client):
        with pytest.raises(DependencyUnavailable):
            stock_client.check_stock("UNAVAILABLE-1", 1)


class TestOrderServiceAgainstMock:

    def test_success(self, order_client):
        outcome = order_client.place_order(OrderRequest(userId="alice", items=[OrderLine(itemId="clean_code", quantity=1)]))

        assert outcome.succeeded
        assert outcome.orderId.startswith("ord-")

    def test_rejection(self, order_client):
        outcome = order_client.place_order(OrderRequest(userId="REJECT-bob", items=[OrderLine(itemId="clean_code", quantity=1)]))

        assert not outcome.succeeded
        assert outcome.message == "Order rejected: account on hold."


class TestCheckoutFlow:

    def test_add_and_checkout(self, wired_orchestrator):
        wired_orchestrator.add_item("alice", CartItem(itemId="clean_code", title="Clean Code", quantity=2, unitPrice="39.99"))
        wired_orchestrator.add_item("alice", CartItem(itemId="refactoring", title="Refactoring", quantity=1, unitPrice="44.50"))

        order_id = wired_orchestrator.checkout("alice")

        assert order_id.startswith("ord-")
        assert wired_orchestrator.get_cart("alice").items == []

    def test_out_of_stock_item_is_not_added(self, wired_orchestrator):
        with pytest.raises(InsufficientStock):
            wired_orchestrator.add_item("alice", CartItem(itemId="OUT-OF-STOCK-42", title="Gone", quantity=1, unitPrice="5"))

        assert wired_orchestrator.get_cart("alice").items == []

    def test_rejected_checkout_keeps_cart(self, wired_orchestrator):
        wired_orchestrator.add_item("REJECT-bob", CartItem(itemId="clean_code", title="Clean Code", quantity=1, unitPrice="39.99"))

        with pytest.raises(OrderRejected) as exc_info:
            wired_orchestrator.checkout("REJECT-bob")

        assert exc_info.value.reason == "Order rejected: account on hold."
        assert len(wired_orchestrator.get_cart("REJECT-bob").items) == 1

    def test_order_service_outage_keeps_cart(self, wired_orchestrator):
        wired_orchestrator.add_item("UNAVAILABLE-carol", CartItem(itemId="clean_code", title="Clean Code", quantity=1, unitPrice="39.99"))

        with pytest.raises(DependencyUnavailable) as exc_info:
            wired_orchestrator.checkout("UNAVAILABLE-carol")

        assert exc_info.value.dependency == "order-service"
        assert len(wired_orchestrator.get_cart("UNAVAILABLE-carol").items) == 1
