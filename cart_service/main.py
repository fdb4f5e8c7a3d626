"""
main.py — FastAPI Entry Point for the Cart Service

This module provides the REST API interface of the cart service. It is a thin
presentation layer over the CartOrchestrator: it parses requests, calls the
orchestrator and maps the error taxonomy to HTTP responses.

Responsibilities:
    • Expose the cart operations (get, add, remove, clear, checkout) via HTTP
    • Build the shared orchestrator, store and service clients at startup
    • Translate cart service errors into status codes
    • Provide system health information

Endpoints are plain `def` functions: FastAPI runs them in its thread pool, so a
blocking store or service call only holds up its own request.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import httpx

from .clients import OrderServiceClient, StockCheckClient
from .config import Settings
from .errors import (
    CartServiceError,
    DependencyUnavailable,
    EmptyCart,
    InsufficientStock,
    InvalidRequest,
    OrderRejected,
)
from .logging_config import get_logger, setup_logging
from .models import Cart, CartItem
from .orchestrator import CartOrchestrator
from .store import RedisCartStore

log = get_logger(__name__)

ERROR_STATUS_CODES = {
    InvalidRequest: 400,
    InsufficientStock: 409,
    EmptyCart: 409,
    OrderRejected: 422,
    DependencyUnavailable: 503,
}


def build_orchestrator(settings: Settings) -> CartOrchestrator:
    """
    Wires the orchestrator with the Redis store and both REST clients.

    Args:
        settings (Settings): Addresses, timeouts and store options.

    Returns:
        CartOrchestrator: Ready-to-use orchestrator. Connections are opened lazily.
    """
    timeout = httpx.Timeout(settings.connect_timeout, read=settings.read_timeout)
    store = RedisCartStore.from_url(
        settings.redis_url,
        key_prefix=settings.cart_key_prefix,
        ttl_seconds=settings.cart_ttl_seconds,
        socket_timeout=settings.connect_timeout,
    )
    return CartOrchestrator(
        store=store,
        stock_oracle=StockCheckClient(settings.stock_check_service_url, timeout=timeout),
        order_placer=OrderServiceClient(settings.order_service_url, timeout=timeout),
    )


def close_orchestrator(orchestrator: CartOrchestrator):
    for resource in (orchestrator.stock_oracle, orchestrator.order_placer, orchestrator.store):
        close = getattr(resource, "close", None)
        if close is not None:
            close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan handler.

    Builds the orchestrator once per process unless one was installed already
    (tests install their own), and releases the client connections on shutdown.
    """
    settings = Settings.from_env()
    setup_logging(settings.log_file)
    log.info("Cart service starting...")

    owned = getattr(app.state, "orchestrator", None) is None
    if owned:
        app.state.orchestrator = build_orchestrator(settings)
        log.info(
            f"Orchestrator ready (stock: {settings.stock_check_service_url}, "
            f"orders: {settings.order_service_url})."
        )

    yield

    if owned:
        close_orchestrator(app.state.orchestrator)
        app.state.orchestrator = None
    log.info("Cart service stopped.")


app = FastAPI(title="Cart Service", lifespan=lifespan)


def get_orchestrator(request: Request) -> CartOrchestrator:
    return request.app.state.orchestrator


@app.exception_handler(CartServiceError)
async def cart_service_error_handler(request: Request, exc: CartServiceError):
    """
    Maps every cart service error to its HTTP status and a JSON body
    `{"error": <code>, "detail": <message>}`.
    """
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if status_code >= 500:
        log.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"error": exc.code, "detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """
    Malformed bodies and parameters are invalid requests (400), like the
    orchestrator's own validation; 422 stays reserved for rejected orders.
    """
    errors = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": InvalidRequest.code, "detail": f"Malformed request: {errors}"},
    )


@app.get("/api/cart/{user_id}", response_model=Cart)
def get_cart(user_id: str, orchestrator: CartOrchestrator = Depends(get_orchestrator)):
    return orchestrator.get_cart(user_id)


@app.post("/api/cart/{user_id}/add", response_model=Cart)
def add_item(user_id: str, item: CartItem, orchestrator: CartOrchestrator = Depends(get_orchestrator)):
    """
    Adds an item to the cart after a stock check. Re-adding an item replaces its line.

    Returns:
        Cart: The updated cart.
    """
    return orchestrator.add_item(user_id, item)


@app.delete("/api/cart/{user_id}/remove/{item_id}", response_model=Cart)
def remove_item(user_id: str, item_id: str, orchestrator: CartOrchestrator = Depends(get_orchestrator)):
    return orchestrator.remove_item(user_id, item_id)


@app.delete("/api/cart/{user_id}/clear", status_code=204)
def clear_cart(user_id: str, orchestrator: CartOrchestrator = Depends(get_orchestrator)):
    orchestrator.clear_cart(user_id)
    return Response(status_code=204)


@app.post("/api/cart/{user_id}/checkout")
def checkout(user_id: str, orchestrator: CartOrchestrator = Depends(get_orchestrator)):
    """
    Places an order for the cart content and clears the cart on success.

    Returns:
        dict: JSON response containing:
            - orderId (Optional[str]): Identifier assigned by the Order Service, null if it sent none.
            - message (str): Confirmation text.
    """
    order_id = orchestrator.checkout(user_id)
    message = "Order placed successfully!"
    if order_id:
        message = f"{message} Order Number: {order_id}"
    return {"orderId": order_id, "message": message}


# Health Check Endpoint
@app.get("/health")
def health_check():
    """
    Simple health check endpoint for Docker/Kubernetes probes.

    Returns:
        dict: A basic JSON object indicating service availability.
    """
    return {"status": "ok"}
