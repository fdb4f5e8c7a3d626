"""
mock_stock_check_service.py — Mock Implementation of the Stock Check Service (REST API)

This module provides a simulated Stock Check Service for local runs and integration tests.
It exposes a small FastAPI application answering single-item availability queries.

Simulation Scenarios:
    • Item ids containing "OUT-OF-STOCK" → never in stock
    • Item ids containing "UNAVAILABLE" → HTTP 503 (service failure)
    • Item ids from the stock table → compared against the stocked quantity
    • Any other item id → in stock, with a default quantity of 100

Endpoints:
    GET /api/stock/check?itemId=...&quantity=... — Availability of one item.

Port:
    Default: 8083 (HTTP)
"""

from fastapi import FastAPI, HTTPException, Query
import logging

app = FastAPI(title="Mock Stock Check Service")
logging.basicConfig(level=logging.INFO)

DEFAULT_STOCK_QUANTITY = 100

STOCK = {
    "design_patterns_gof": 100,
    "pragmatic_programmer": 100,
    "clean_code": 100,
    "refactoring": 100,
    "code_complete": 100,
    "mythical_man_month": 0,
}


@app.get("/api/stock/check")
def check_stock(itemId: str = Query(...), quantity: int = Query(..., ge=1)):
    """
        Answers whether `quantity` units of `itemId` are available.

        Args:
            itemId (str): Catalog identifier of the item.
            quantity (int): Requested quantity.

        Returns:
            dict: Availability result including:
                - itemId (str): The queried item.
                - inStock (bool): Whether the requested quantity is available.
                - availableQuantity (int): Current stock level.

        Raises:
            HTTPException(503): If the item id triggers the failure scenario.
    """
    logging.info(f"[SCS] Stock check for {itemId} x{quantity}")

    # Scenario simulation
    if "UNAVAILABLE" in itemId:
        logging.error(f"[SCS] Simulated outage for {itemId}.")
        raise HTTPException(status_code=503, detail="Stock database unavailable.")

    if "OUT-OF-STOCK" in itemId:
        logging.warning(f"[SCS] {itemId} is out of stock.")
        return {"itemId": itemId, "inStock": False, "availableQuantity": 0}

    available = STOCK.get(itemId)
    if available is None:
        # Items unknown to the stock table count as stocked
        logging.info(f"[SCS] {itemId} not in stock table, defaulting to in stock.")
        available = DEFAULT_STOCK_QUANTITY

    return {"itemId": itemId, "inStock": available >= quantity, "availableQuantity": available}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8083)
