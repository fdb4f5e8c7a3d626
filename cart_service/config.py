"""
config.py — Environment configuration for the Cart Service

Service addresses, Redis connection and timeouts are read from environment
variables (Docker/Kubernetes style) with local defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() == "":
        return None
    return int(value)


@dataclass(frozen=True)
class Settings:
    stock_check_service_url: str
    order_service_url: str
    redis_url: str
    cart_key_prefix: str
    cart_ttl_seconds: Optional[int]
    connect_timeout: float
    read_timeout: float
    log_file: Optional[str]

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """
        Builds the settings from `environ` (defaults to `os.environ`).

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        return cls(
            stock_check_service_url=env.get("STOCK_CHECK_SERVICE_URL", "http://stock-check-service:8083"),
            order_service_url=env.get("ORDER_SERVICE_URL", "http://order-service:8082"),
            redis_url=env.get("REDIS_URL", "redis://localhost:6379/0"),
            cart_key_prefix=env.get("CART_KEY_PREFIX", "cart:"),
            cart_ttl_seconds=_optional_int(env.get("CART_TTL_SECONDS")),
            connect_timeout=float(env.get("SERVICE_CONNECT_TIMEOUT", "5.0")),
            read_timeout=float(env.get("SERVICE_READ_TIMEOUT", "8.0")),
            log_file=env.get("CART_SERVICE_LOG_FILE", "cart_service.log") or None,
        )
