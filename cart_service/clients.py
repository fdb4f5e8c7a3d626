"""
This module provides communication clients for the external systems used by the cart service:
- Stock Check Service (REST API)
- Order Service (REST API)
Each class encapsulates its protocol logic, timeout configuration and error handling.
Every transport or protocol failure leaves the client as DependencyUnavailable; no call is retried.
"""

import logging
from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from .errors import DependencyUnavailable
from .models import OrderOutcome, OrderRequest, StockCheckResult

STOCK_CHECK_SERVICE = "stock-check-service"
ORDER_SERVICE = "order-service"

DEFAULT_TIMEOUT = httpx.Timeout(5.0, read=8.0)

log = logging.getLogger(__name__)


class StockOracle(Protocol):
    def check_stock(self, item_id: str, quantity: int) -> StockCheckResult: ...


class OrderPlacer(Protocol):
    def place_order(self, order: OrderRequest) -> OrderOutcome: ...


class _ServiceClient:
    """
    Shared plumbing of the REST clients: owns the httpx client and translates
    httpx/decoding failures into DependencyUnavailable.
    """
    service_name = ""

    def __init__(
            self,
            base_url: Optional[str] = None,
            timeout: httpx.Timeout = DEFAULT_TIMEOUT,
            http_client: Optional[httpx.Client] = None,
    ):
        """
        Args:
            base_url (Optional[str]): Base address of the service. Required unless `http_client` is given.
            timeout (httpx.Timeout): Bound for every request.
            http_client (Optional[httpx.Client]): Preconfigured client (e.g. in tests); used as is.
        """
        if http_client is None:
            if not base_url:
                raise ValueError(f"{self.service_name}: base_url is required")
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        self.client = http_client

    def close(self):
        """Closes the HTTP client session."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, log_prefix: str, method: str, url: str, **kwargs) -> dict:
        try:
            response = self.client.request(method, url, **kwargs)
            response.raise_for_status()  # HTTPStatusError on 4xx/5xx
            return response.json()
        except httpx.TimeoutException as e:
            log.error(f"{log_prefix} {self.service_name} timeout ({type(e).__name__}).")
            raise DependencyUnavailable(self.service_name, "timeout") from e
        except httpx.HTTPStatusError as e:
            log.error(f"{log_prefix} {self.service_name} answered HTTP {e.response.status_code}.")
            raise DependencyUnavailable(self.service_name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            log.error(f"{log_prefix} {self.service_name} not reachable: {e}")
            raise DependencyUnavailable(self.service_name, str(e) or type(e).__name__) from e
        except ValueError as e:
            # JSONDecodeError is a ValueError
            log.error(f"{log_prefix} {self.service_name} returned an undecodable body: {e}")
            raise DependencyUnavailable(self.service_name, "undecodable response") from e


# --- Stock Check Client (REST) ---
class StockCheckClient(_ServiceClient):
    """
    Client for the Stock Check Service (REST API).
    Answers whether a quantity of a single item is available.
    """
    service_name = STOCK_CHECK_SERVICE

    def check_stock(self, item_id: str, quantity: int) -> StockCheckResult:
        """
        Queries the availability of `quantity` units of `item_id`.
        Args:
            item_id (str): Catalog identifier of the item.
            quantity (int): Requested quantity (>= 1).
        Returns:
            StockCheckResult: Availability answer.
        Raises:
            DependencyUnavailable: On timeout, transport error, non-2xx status or malformed body.
        """
        log_prefix = f"[Item: {item_id}]"
        data = self._request(
            log_prefix, "GET", "/api/stock/check",
            params={"itemId": item_id, "quantity": quantity},
        )
        try:
            return StockCheckResult.model_validate(data)
        except ValidationError as e:
            log.error(f"{log_prefix} Unexpected stock check response: {data!r}")
            raise DependencyUnavailable(self.service_name, "unexpected response") from e


# --- Order Service Client (REST) ---
class OrderServiceClient(_ServiceClient):
    """
    Client for the Order Service (REST API).
    Submits orders built from a cart snapshot.
    """
    service_name = ORDER_SERVICE

    def place_order(self, order: OrderRequest) -> OrderOutcome:
        """
        Submits `order` to the Order Service.
        Args:
            order (OrderRequest): User and (itemId, quantity) lines.
        Returns:
            OrderOutcome: The outcome as reported by the service. Its status decides success.
        Raises:
            DependencyUnavailable: On timeout, transport error, non-2xx status or malformed body.
        """
        log_prefix = f"[User: {order.userId}]"
        data = self._request(log_prefix, "POST", "/api/orders", json=order.model_dump(mode="json"))
        try:
            return OrderOutcome.model_validate(data)
        except ValidationError as e:
            log.error(f"{log_prefix} Unexpected order service response: {data!r}")
            raise DependencyUnavailable(self.service_name, "unexpected response") from e
