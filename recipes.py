"""Recipe catalogs for bottled drinks and helpers to look them up."""

import logging
from typing import Dict, List, Any

logger = logging.getLogger(__name__)

Recipe = Dict[str, Any]


class UnknownRecipeError(ValueError):
    """Raised when a drink identifier is not in the catalog."""

    def __init__(self, drink_type: str):
        super().__init__(f"Unknown recipe: {drink_type!r}")
        self.drink_type = drink_type


def _ing(name: str, amount: float, unit: str, scaling: float = 1) -> Dict[str, Any]:
    return {"name": name, "amount": amount, "unit": unit, "scaling": scaling}


# Per-bottle amounts used by the order calculator
RECIPES: Dict[str, Recipe] = {
    "peach-palmer": {
        "product_id": "peach-palmer",
        "name": "Peach Palmer",
        "ingredients": [
            _ing("Peach Tea", 448, "ml"),
            _ing("Lemon Concentrate", 74, "ml"),
            _ing("Water", 375, "ml"),
            _ing("Cane Syrup", 160, "ml"),
        ],
    },
    "strawberry-lemonade": {
        "product_id": "strawberry-lemonade",
        "name": "Strawberry Lemonade",
        "ingredients": [
            _ing("Water", 743, "ml"),
            _ing("Lemon Concentrate", 144, "ml"),
            _ing("Strawberry Syrup", 96, "ml"),
            _ing("Cane Syrup", 64, "ml"),
        ],
    },
    "cold-brew": {
        "product_id": "cold-brew",
        "name": "Cold Brew",
        "ingredients": [
            _ing("Cold Brew Concentrate", 496, "ml"),
            _ing("Water", 496, "ml"),
        ],
    },
}

# Product view weighs the syrups instead of measuring them
PRODUCT_RECIPES: Dict[str, Recipe] = {
    "peach-palmer": {
        "product_id": "peach-palmer",
        "name": "Peach Palmer",
        "ingredients": [
            _ing("Peach Tea", 448, "ml"),
            _ing("Lemon Concentrate", 74, "ml"),
            _ing("Water", 375, "ml"),
            _ing("Cane Syrup", 160, "g"),
        ],
    },
    "strawberry-lemonade": {
        "product_id": "strawberry-lemonade",
        "name": "Strawberry Lemonade",
        "ingredients": [
            _ing("Water", 743, "ml"),
            _ing("Lemon Concentrate", 144, "ml"),
            _ing("Strawberry Syrup", 96, "g"),
            _ing("Cane Syrup", 64, "g"),
        ],
    },
    "cold-brew": {
        "product_id": "cold-brew",
        "name": "Cold Brew",
        "ingredients": [
            _ing("Cold Brew Concentrate", 496, "ml"),
            _ing("Water", 496, "ml"),
        ],
    },
}


def get_recipe(drink_type: str, recipes: Dict[str, Recipe] = RECIPES) -> Recipe:
    """Return the recipe for ``drink_type`` or raise UnknownRecipeError."""
    try:
        return recipes[drink_type]
    except KeyError:
        raise UnknownRecipeError(drink_type) from None


def add_recipe(recipes: Dict[str, Recipe], recipe: Recipe) -> Dict[str, Recipe]:
    """Return a new catalog with ``recipe`` added (or replaced) under its product id."""
    if recipe["product_id"] in recipes:
        logger.info("Replacing recipe %s", recipe["product_id"])
    updated = dict(recipes)
    updated[recipe["product_id"]] = recipe
    return updated


def update_recipe(recipes: Dict[str, Recipe], product_id: str, updates: Dict[str, Any]) -> Dict[str, Recipe]:
    current = get_recipe(product_id, recipes)
    updated = dict(recipes)
    updated[product_id] = {**current, **updates}
    return updated


def delete_recipe(recipes: Dict[str, Recipe], product_id: str) -> Dict[str, Recipe]:
    return {k: v for k, v in recipes.items() if k != product_id}


def find_unit_conflicts(recipes: Dict[str, Recipe]) -> Dict[str, List[str]]:
    """Ingredient names that appear with more than one unit across ``recipes``.

    Totals are bucketed by ingredient name only, so any entry here means the
    shopping list would add up amounts in different units.
    """
    units: Dict[str, List[str]] = {}
    for recipe in recipes.values():
        for ing in recipe["ingredients"]:
            seen = units.setdefault(ing["name"], [])
            if ing["unit"] not in seen:
                seen.append(ing["unit"])
    return {name: us for name, us in units.items() if len(us) > 1}
