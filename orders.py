"""Customer order list operations.

Every function returns a new list and leaves its input untouched, so a list
held in session state can be swapped out in one assignment.
"""

import logging
import re
import uuid
from typing import Callable, Dict, List, Any

from recipes import RECIPES, Recipe

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_int(value: Any) -> int:
    """Read a whole number from user input, 0 when there is none.

    Strings are read up to the first non-digit ("12 bottles" -> 12, "2.7" -> 2).
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return int(value)
    match = _LEADING_INT.match(str(value or ""))
    return int(match.group(1)) if match else 0


def parse_quantity(value: Any) -> int:
    """Like parse_int, with negative numbers clamped to 0."""
    return max(0, parse_int(value))


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def create_order_items(recipes: Dict[str, Recipe] = RECIPES, order_id: str = "") -> List[Dict[str, Any]]:
    prefix = order_id or _new_id()
    return [
        {"id": f"{prefix}-{drink_type}", "drink_type": drink_type, "quantity": 0}
        for drink_type in recipes
    ]


def new_order(recipes: Dict[str, Recipe] = RECIPES) -> Dict[str, Any]:
    order_id = _new_id()
    return {"id": order_id, "customer_name": "", "items": create_order_items(recipes, order_id)}


def add_order(orders: List[Dict[str, Any]], recipes: Dict[str, Recipe] = RECIPES) -> List[Dict[str, Any]]:
    order = new_order(recipes)
    logger.debug("Added order %s", order["id"])
    return [*orders, order]


def update_order_customer(orders: List[Dict[str, Any]], order_id: str, customer_name: str) -> List[Dict[str, Any]]:
    return [
        {**order, "customer_name": customer_name} if order["id"] == order_id else order
        for order in orders
    ]


def update_order_item(orders: List[Dict[str, Any]], order_id: str, item_id: str, quantity: Any) -> List[Dict[str, Any]]:
    """Set one item's quantity; the value is coerced and clamped at zero."""
    qty = parse_quantity(quantity)
    updated = []
    for order in orders:
        if order["id"] == order_id:
            items = [
                {**item, "quantity": qty} if item["id"] == item_id else item
                for item in order["items"]
            ]
            order = {**order, "items": items}
        updated.append(order)
    return updated


def delete_order(orders: List[Dict[str, Any]], order_id: str) -> List[Dict[str, Any]]:
    return [order for order in orders if order["id"] != order_id]


def reset_orders(orders: List[Dict[str, Any]], confirm: Callable[[], bool]) -> List[Dict[str, Any]]:
    """Clear all orders if ``confirm()`` says so, otherwise return them unchanged."""
    if not confirm():
        return orders
    logger.info("Cleared %d order(s)", len(orders))
    return []
