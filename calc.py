"""Pure calculation utilities for bottling orders."""

import logging
from typing import Dict, List, Tuple, Any

from recipes import RECIPES, PRODUCT_RECIPES, Recipe, UnknownRecipeError, get_recipe

logger = logging.getLogger(__name__)


def get_totals_by_drink(orders: List[Dict[str, Any]], recipes: Dict[str, Recipe] = RECIPES) -> Dict[str, int]:
    """Total bottles per drink display name across all orders.

    Drinks ordered zero times are kept with a total of 0.
    """
    totals: Dict[str, int] = {}
    for order in orders:
        for item in order["items"]:
            name = get_recipe(item["drink_type"], recipes)["name"]
            totals[name] = totals.get(name, 0) + item["quantity"]
    return totals


def get_total_ingredients(orders: List[Dict[str, Any]], recipes: Dict[str, Recipe] = RECIPES) -> Dict[str, Dict[str, Any]]:
    """Sum ingredient amounts over every order item.

    Ingredients are bucketed by name; the unit comes from the first recipe
    that uses the name.
    """
    totals: Dict[str, Dict[str, Any]] = {}
    for order in orders:
        for item in order["items"]:
            recipe = get_recipe(item["drink_type"], recipes)
            for ing in recipe["ingredients"]:
                bucket = totals.get(ing["name"])
                if bucket is None:
                    bucket = totals[ing["name"]] = {"amount": 0, "unit": ing["unit"]}
                elif bucket["unit"] != ing["unit"]:
                    logger.warning(
                        "Ingredient %r used as %s in %s but totalled as %s",
                        ing["name"], ing["unit"], recipe["name"], bucket["unit"],
                    )
                bucket["amount"] += ing["amount"] * item["quantity"]
    return totals


def calculate_batch_recipe(drink_type: str, bottle_count: int, recipes: Dict[str, Recipe] = RECIPES) -> List[Dict[str, Any]]:
    """Ingredients for ``bottle_count`` bottles of one drink, in recipe order."""
    recipe = get_recipe(drink_type, recipes)
    return [{**ing, "amount": ing["amount"] * bottle_count} for ing in recipe["ingredients"]]


def drink_type_for_name(name: str, recipes: Dict[str, Recipe] = RECIPES) -> str:
    for drink_type, recipe in recipes.items():
        if recipe["name"] == name:
            return drink_type
    raise UnknownRecipeError(name)


def batch_recipes_for_orders(orders: List[Dict[str, Any]], recipes: Dict[str, Recipe] = RECIPES) -> List[Tuple[str, int, List[Dict[str, Any]]]]:
    """(drink name, bottles, scaled ingredients) for each drink with bottles to make."""
    batches = []
    for name, bottles in get_totals_by_drink(orders, recipes).items():
        if bottles <= 0:
            continue
        drink_type = drink_type_for_name(name, recipes)
        batches.append((name, bottles, calculate_batch_recipe(drink_type, bottles, recipes)))
    return batches


def calculate_ingredient_totals(products: List[Dict[str, Any]], recipes: Dict[str, Recipe] = PRODUCT_RECIPES) -> Dict[str, Dict[str, Any]]:
    """Ingredient totals for products stocked across locations.

    Each product uses the recipe keyed by its id; products without one are
    skipped. Amounts are multiplied by the ingredient's scaling factor.
    """
    totals: Dict[str, Dict[str, Any]] = {}
    for product in products:
        recipe = recipes.get(product["id"])
        if not recipe:
            logger.debug("No recipe for product %r, skipping", product["id"])
            continue
        total_qty = sum(product["quantities"].values())
        for ing in recipe["ingredients"]:
            scaled = ing["amount"] * total_qty * ing.get("scaling", 1)
            bucket = totals.setdefault(ing["name"], {"amount": 0, "unit": ing["unit"]})
            bucket["amount"] += scaled
    return totals
