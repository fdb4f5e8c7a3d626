"""
store.py — Cart Store Adapter (Redis)

Key-value access to per-user cart state. A cart lives under one Redis key
(`<prefix><userId>`) holding the JSON-serialized Cart; every write replaces the
whole value. Concurrent writers for the same user are last-write-wins.
"""

import logging
from typing import Optional, Protocol

import redis
from pydantic import ValidationError

from .errors import DependencyUnavailable
from .models import Cart

log = logging.getLogger(__name__)

STORE_NAME = "cart-store"


class CartStore(Protocol):
    def get(self, user_id: str) -> Cart: ...

    def put(self, user_id: str, cart: Cart) -> None: ...

    def delete(self, user_id: str) -> None: ...


class RedisCartStore:
    """
    Redis-backed cart store.

    Absence of a key is a valid state: `get` returns a fresh empty cart that is
    not written back until the first mutation.
    """

    def __init__(
            self,
            client: redis.Redis,
            key_prefix: str = "cart:",
            ttl_seconds: Optional[int] = None,
    ):
        """
        Args:
            client (redis.Redis): Connected (or lazily connecting) Redis client.
            key_prefix (str): Namespace for cart keys in a shared Redis.
            ttl_seconds (Optional[int]): Expiry refreshed on every write; None keeps carts forever.
        """
        self.client = client
        self.key_prefix = key_prefix
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_url(cls, url: str, key_prefix: str = "cart:", ttl_seconds: Optional[int] = None,
                 socket_timeout: float = 5.0) -> "RedisCartStore":
        client = redis.Redis.from_url(
            url,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
        )
        return cls(client, key_prefix=key_prefix, ttl_seconds=ttl_seconds)

    def key(self, user_id: str) -> str:
        return f"{self.key_prefix}{user_id}"

    def get(self, user_id: str) -> Cart:
        """
        Loads the cart of `user_id`.

        Returns:
            Cart: The stored cart, or an empty one if the user has none.
        Raises:
            DependencyUnavailable: If Redis fails or the stored value is corrupt.
        """
        try:
            raw = self.client.get(self.key(user_id))
        except redis.RedisError as e:
            log.error(f"[User: {user_id}] Redis GET failed: {e}")
            raise DependencyUnavailable(STORE_NAME, str(e)) from e

        if raw is None:
            return Cart(userId=user_id)

        try:
            return Cart.model_validate_json(raw)
        except ValidationError as e:
            log.error(f"[User: {user_id}] Stored cart could not be decoded: {e}")
            raise DependencyUnavailable(STORE_NAME, "stored cart is not decodable") from e

    def put(self, user_id: str, cart: Cart) -> None:
        """Overwrites the stored cart of `user_id` with `cart`."""
        try:
            self.client.set(self.key(user_id), cart.storage_json(), ex=self.ttl_seconds)
        except redis.RedisError as e:
            log.error(f"[User: {user_id}] Redis SET failed: {e}")
            raise DependencyUnavailable(STORE_NAME, str(e)) from e

    def delete(self, user_id: str) -> None:
        """Removes the cart of `user_id`. Deleting a missing cart is not an error."""
        try:
            self.client.delete(self.key(user_id))
        except redis.RedisError as e:
            log.error(f"[User: {user_id}] Redis DEL failed: {e}")
            raise DependencyUnavailable(STORE_NAME, str(e)) from e

    def close(self):
        self.client.close()
