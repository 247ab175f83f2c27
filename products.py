"""Products stocked across locations."""

import logging
import uuid
from typing import Dict, List, Optional, Any

from orders import parse_int

logger = logging.getLogger(__name__)

LOCATIONS = ("Lodgic", "Bake", "Brew")


def new_product(name: str = "", product_id: str = "") -> Dict[str, Any]:
    return {
        "id": product_id or uuid.uuid4().hex[:12],
        "name": name,
        "quantities": {loc: 0 for loc in LOCATIONS},
    }


def from_record(record: Any) -> Optional[Dict[str, Any]]:
    """Rebuild a product from stored data, or None if the record is unusable."""
    if not isinstance(record, dict) or not record.get("id"):
        return None
    stored = record.get("quantities")
    if not isinstance(stored, dict):
        stored = {}
    product = new_product(str(record.get("name") or ""), product_id=str(record["id"]))
    product["quantities"] = {loc: parse_int(stored.get(loc, 0)) for loc in LOCATIONS}
    return product


def load_products(records: List[Any]) -> List[Dict[str, Any]]:
    products = []
    for record in records:
        product = from_record(record)
        if product is None:
            logger.warning("Dropping unreadable product record: %r", record)
            continue
        products.append(product)
    return products


def add_product(products: List[Dict[str, Any]], product: Dict[str, Any] = None) -> List[Dict[str, Any]]:
    return [*products, product or new_product()]


def update_product(products: List[Dict[str, Any]], product_id: str, field: str, value: Any) -> List[Dict[str, Any]]:
    """Update the name or one location quantity of a product.

    Location values are coerced like order quantities; negative input leaves
    the product as it was.
    """
    if field == "name":
        return [{**p, "name": value} if p["id"] == product_id else p for p in products]
    if field not in LOCATIONS:
        raise ValueError(f"Unknown product field: {field!r}")
    qty = parse_int(value)
    if qty < 0:
        return products
    return [
        {**p, "quantities": {**p["quantities"], field: qty}} if p["id"] == product_id else p
        for p in products
    ]


def delete_product(products: List[Dict[str, Any]], product_id: str) -> List[Dict[str, Any]]:
    logger.debug("Deleting product %s", product_id)
    return [p for p in products if p["id"] != product_id]


def validate_product(product: Dict[str, Any]) -> List[Dict[str, str]]:
    """Return validation errors as {"field", "message"} dicts; empty when valid."""
    errors = []
    if not (product.get("name") or "").strip():
        errors.append({"field": "name", "message": "Product name is required"})
    for loc, qty in product.get("quantities", {}).items():
        if qty < 0:
            errors.append({
                "field": f"quantities.{loc}",
                "message": f"{loc} quantity cannot be negative",
            })
    return errors
