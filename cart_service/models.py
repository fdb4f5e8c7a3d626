"""
models.py — Data Models for the Cart Service

This module defines the data structures exchanged with the cart store and the
external services. It uses Pydantic models for typed (de)serialization of the
wire and storage formats.

The models only declare field types. Business rules (non-empty ids, quantity of
at least one, non-negative price) are enforced by the cart orchestrator before
any side effect happens, so a model instance may well hold invalid values.

Models:
    - CartItem: A single line of a user's cart.
    - Cart: The full per-user cart as stored in Redis.
    - OrderLine / OrderRequest: Order payload sent to the Order Service.
    - StockCheckResult: Answer of the Stock Check Service.
    - OrderOutcome: Answer of the Order Service.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field, field_validator

ORDER_STATUS_SUCCESS = "success"


class CartItem(BaseModel):
    """
    Represents a single catalog item placed in a cart.

    Attributes:
        itemId (str): Identifier of the catalog entry. Unique within a cart.
        title (str): Display title. Not authoritative.
        quantity (int): Requested quantity. Must be at least 1.
        unitPrice (Decimal): Informational unit price, not re-validated at checkout.
    """
    itemId: str
    title: str = ""
    quantity: int
    unitPrice: Decimal = Decimal("0")


class Cart(BaseModel):
    """
    Represents the complete cart of one user.

    The orchestrator keeps `items` unique by `itemId`; the store does not check it.

    Attributes:
        userId (str): Owner of the cart, also the storage key.
        items (List[CartItem]): Cart lines in insertion order.
    """
    userId: str
    items: List[CartItem] = Field(default_factory=list)

    @computed_field
    @property
    def totalItems(self) -> int:
        return sum(item.quantity for item in self.items)

    @computed_field
    @property
    def totalPrice(self) -> Decimal:
        return sum((item.unitPrice * item.quantity for item in self.items), Decimal("0"))

    def is_empty(self) -> bool:
        return not self.items

    def storage_json(self) -> str:
        """JSON value kept in the store; the totals are derived and left out."""
        return self.model_dump_json(exclude={"totalItems", "totalPrice"})


class OrderLine(BaseModel):
    itemId: str
    quantity: int


class OrderRequest(BaseModel):
    """
    Order payload built from a cart snapshot at checkout time. Never persisted.

    Attributes:
        userId (str): The ordering user.
        items (List[OrderLine]): (itemId, quantity) pairs in cart order.
    """
    userId: str
    items: List[OrderLine]

    @classmethod
    def from_cart(cls, cart: Cart) -> "OrderRequest":
        return cls(
            userId=cart.userId,
            items=[OrderLine(itemId=item.itemId, quantity=item.quantity) for item in cart.items],
        )


class StockCheckResult(BaseModel):
    """
    Availability answer for one (itemId, quantity) pair.

    Attributes:
        inStock (bool): True if the requested quantity is available.
        availableQuantity (Optional[int]): Stock level, if the service reports one.
    """
    inStock: bool
    availableQuantity: Optional[int] = None


class OrderOutcome(BaseModel):
    """
    Result of an order placement.

    Only `status` decides success; an `orderId` on its own proves nothing.

    Attributes:
        status (str): "success" or any other value for a failure.
        orderId (Optional[str]): Order identifier, present on success.
        message (Optional[str]): Human-readable reason, present on failure.
    """
    status: str
    orderId: Optional[str] = None
    message: Optional[str] = None

    @field_validator("orderId", mode="before")
    @classmethod
    def _order_id_as_text(cls, value):
        # Some order services answer with numeric ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def succeeded(self) -> bool:
        return self.status == ORDER_STATUS_SUCCESS
