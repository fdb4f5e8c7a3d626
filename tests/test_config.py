import logging

import pytest

from cart_service.config import Settings
from cart_service.logging_config import setup_logging
from cart_service.main import build_orchestrator, close_orchestrator


def test_defaults():
    settings = Settings.from_env({})

    assert settings.stock_check_service_url == "http://stock-check-service:8083"
    assert settings.order_service_url == "http://order-service:8082"
    assert settings.redis_url == "redis://localhost:6379/0"
    assert settings.cart_key_prefix == "cart:"
    assert settings.cart_ttl_seconds is None
    assert settings.connect_timeout == 5.0
    assert settings.read_timeout == 8.0
    assert settings.log_file == "cart_service.log"


def test_overrides():
    settings = Settings.from_env({
        "STOCK_CHECK_SERVICE_URL": "http://stock:9000",
        "CART_TTL_SECONDS": "86400",
        "SERVICE_READ_TIMEOUT": "2.5",
        "CART_SERVICE_LOG_FILE": "",
    })

    assert settings.stock_check_service_url == "http://stock:9000"
    assert settings.cart_ttl_seconds == 86400
    assert settings.read_timeout == 2.5
    assert settings.log_file is None


def test_invalid_number_fails_fast():
    with pytest.raises(ValueError):
        Settings.from_env({"SERVICE_CONNECT_TIMEOUT": "soon"})


def test_build_orchestrator_wires_settings():
    settings = Settings.from_env({
        "STOCK_CHECK_SERVICE_URL": "http://stock.test",
        "ORDER_SERVICE_URL": "http://orders.test",
        "CART_KEY_PREFIX": "bookstore:cart:",
        "SERVICE_CONNECT_TIMEOUT": "1.5",
        "SERVICE_READ_TIMEOUT": "3.0",
    })

    orchestrator = build_orchestrator(settings)
    try:
        assert orchestrator.stock_oracle.client.base_url.host == "stock.test"
        assert orchestrator.order_placer.client.base_url.host == "orders.test"
        assert orchestrator.order_placer.client.timeout.connect == 1.5
        assert orchestrator.order_placer.client.timeout.read == 3.0
        assert orchestrator.store.key("alice") == "bookstore:cart:alice"
    finally:
        close_orchestrator(orchestrator)


def test_setup_logging_quiets_http_libraries():
    setup_logging(log_file=None)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
