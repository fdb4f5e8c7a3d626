"""
mock_order_service.py — Mock Implementation of the Order Service (REST API)

This module provides a simulated Order Service for local runs and integration tests.
It accepts orders built by the cart service and answers with a structured outcome.

Simulation Scenarios:
    • User ids containing "REJECT" → failure outcome with a message (HTTP 200)
    • User ids containing "UNAVAILABLE" → HTTP 503 (service failure)
    • Any other user id → success outcome with a generated order id

Endpoints:
    POST /api/orders — Places an order.

Port:
    Default: 8082 (HTTP)
"""

from typing import List

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
import logging
import uuid

app = FastAPI(title="Mock Order Service")
logging.basicConfig(level=logging.INFO)


class OrderLine(BaseModel):
    itemId: str
    quantity: int = Field(..., gt=0)


class PlaceOrderRequest(BaseModel):
    """
    Represents an order placement request.

    Attributes:
        userId (str): The ordering user.
        items (List[OrderLine]): Ordered items with quantities. Must not be empty.
    """
    userId: str
    items: List[OrderLine] = Field(..., min_length=1)


@app.post("/api/orders")
def place_order(request: PlaceOrderRequest):
    """
        Places an order and reports the outcome.

        Args:
            request (PlaceOrderRequest): User and order lines.

        Returns:
            dict: Outcome including:
                - status (str): "success" or "failure".
                - orderId (str): Order identifier on success.
                - message (str): Reason on failure.

        Raises:
            HTTPException(503): If the user id triggers the failure scenario.
    """
    logging.info(f"[OS] Order request from {request.userId} with {len(request.items)} line(s)")

    # Scenario simulation
    if "UNAVAILABLE" in request.userId:
        logging.error(f"[OS] Simulated outage for {request.userId}.")
        raise HTTPException(status_code=503, detail="Order database unavailable.")

    if "REJECT" in request.userId:
        logging.warning(f"[OS] Order for {request.userId} rejected.")
        return {"status": "failure", "message": "Order rejected: account on hold."}

    # Success case
    order_id = f"ord-{uuid.uuid4()}"
    logging.info(f"[OS] Order {order_id} placed for {request.userId}.")
    return {"status": "success", "orderId": order_id}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8082)
