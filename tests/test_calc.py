import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from calc import (
    get_totals_by_drink,
    get_total_ingredients,
    calculate_batch_recipe,
    batch_recipes_for_orders,
    calculate_ingredient_totals,
    drink_type_for_name,
)
from orders import add_order, update_order_item, delete_order
from recipes import RECIPES, PRODUCT_RECIPES, UnknownRecipeError


def _order(oid, **qty):
    return {
        "id": oid,
        "customer_name": "",
        "items": [
            {"id": f"{oid}-{dt}", "drink_type": dt, "quantity": qty.get(dt.replace("-", "_"), 0)}
            for dt in RECIPES
        ],
    }


def test_totals_by_drink_example():
    orders = [_order("o1", peach_palmer=2)]
    assert get_totals_by_drink(orders) == {
        "Peach Palmer": 2,
        "Strawberry Lemonade": 0,
        "Cold Brew": 0,
    }


def test_total_ingredients_example():
    totals = get_total_ingredients([_order("o1", peach_palmer=2)])
    assert totals["Peach Tea"] == {"amount": 896, "unit": "ml"}
    assert totals["Water"]["amount"] == pytest.approx(750)


def test_all_zero_orders():
    orders = [_order("a"), _order("b")]
    assert all(v == 0 for v in get_totals_by_drink(orders).values())
    totals = get_total_ingredients(orders)
    assert [n for n, t in totals.items() if t["amount"] > 0] == []
    assert batch_recipes_for_orders(orders) == []


def test_no_orders():
    assert get_totals_by_drink([]) == {}
    assert get_total_ingredients([]) == {}


def test_shared_ingredients_accumulate_across_drinks():
    orders = [_order("o1", peach_palmer=1, strawberry_lemonade=2, cold_brew=3)]
    totals = get_total_ingredients(orders)
    assert totals["Water"]["amount"] == pytest.approx(375 + 2 * 743 + 3 * 496)
    assert totals["Lemon Concentrate"]["amount"] == pytest.approx(74 + 2 * 144)
    assert totals["Cane Syrup"]["amount"] == pytest.approx(160 + 2 * 64)


def test_total_ingredients_is_linear():
    first = [_order("a", peach_palmer=3, cold_brew=1), _order("b", strawberry_lemonade=5)]
    second = [_order("c", cold_brew=7, peach_palmer=1)]
    left = get_total_ingredients(first)
    right = get_total_ingredients(second)
    both = get_total_ingredients(first + second)
    for name, tot in both.items():
        expected = left.get(name, {"amount": 0})["amount"] + right.get(name, {"amount": 0})["amount"]
        assert tot["amount"] == pytest.approx(expected)


def test_unit_taken_from_first_occurrence(caplog):
    recipes = {
        "a": {"product_id": "a", "name": "A", "ingredients": [{"name": "Syrup", "amount": 10, "unit": "ml", "scaling": 1}]},
        "b": {"product_id": "b", "name": "B", "ingredients": [{"name": "Syrup", "amount": 5, "unit": "g", "scaling": 1}]},
    }
    orders = [{"id": "o", "customer_name": "", "items": [
        {"id": "1", "drink_type": "a", "quantity": 1},
        {"id": "2", "drink_type": "b", "quantity": 2},
    ]}]
    totals = get_total_ingredients(orders, recipes)
    assert totals["Syrup"] == {"amount": 20, "unit": "ml"}
    assert "Syrup" in caplog.text


@pytest.mark.parametrize("n", [0, 1, 4, 25])
def test_batch_recipe_scales_every_ingredient(n):
    batch = calculate_batch_recipe("strawberry-lemonade", n)
    source = RECIPES["strawberry-lemonade"]["ingredients"]
    assert [i["name"] for i in batch] == [i["name"] for i in source]
    assert [i["unit"] for i in batch] == [i["unit"] for i in source]
    assert [i["amount"] for i in batch] == [i["amount"] * n for i in source]


def test_batch_recipe_does_not_touch_catalog():
    calculate_batch_recipe("cold-brew", 10)
    assert RECIPES["cold-brew"]["ingredients"][0]["amount"] == 496


def test_unknown_drink_raises():
    with pytest.raises(UnknownRecipeError, match="mojito"):
        calculate_batch_recipe("mojito", 1)
    orders = [{"id": "o", "customer_name": "", "items": [{"id": "x", "drink_type": "mojito", "quantity": 1}]}]
    with pytest.raises(ValueError):
        get_totals_by_drink(orders)
    with pytest.raises(ValueError):
        get_total_ingredients(orders)


def test_drink_type_for_name():
    assert drink_type_for_name("Cold Brew") == "cold-brew"
    with pytest.raises(UnknownRecipeError):
        drink_type_for_name("Lemon Tea")


def test_batch_recipes_for_orders():
    orders = [_order("a", cold_brew=2), _order("b", cold_brew=1, peach_palmer=1)]
    batches = batch_recipes_for_orders(orders)
    assert [(name, n) for name, n, _ in batches] == [("Peach Palmer", 1), ("Cold Brew", 3)]
    cold = batches[1][2]
    assert cold[0] == {"name": "Cold Brew Concentrate", "amount": 1488, "unit": "ml", "scaling": 1}


def test_deleting_order_removes_only_its_contribution():
    orders = add_order(add_order([]))
    first, second = orders
    orders = update_order_item(orders, first["id"], first["items"][0]["id"], 3)
    orders = update_order_item(orders, second["id"], second["items"][0]["id"], 2)
    assert get_totals_by_drink(orders)["Peach Palmer"] == 5
    remaining = delete_order(orders, first["id"])
    assert get_totals_by_drink(remaining)["Peach Palmer"] == 2
    assert get_total_ingredients(remaining)["Peach Tea"]["amount"] == 896


def test_ingredient_totals_for_products():
    products = [
        {"id": "peach-palmer", "name": "Peach Palmer", "quantities": {"Lodgic": 1, "Bake": 2, "Brew": 0}},
        {"id": "free-form", "name": "Something else", "quantities": {"Lodgic": 9, "Bake": 9, "Brew": 9}},
    ]
    totals = calculate_ingredient_totals(products)
    assert totals["Peach Tea"] == {"amount": 448 * 3, "unit": "ml"}
    assert totals["Cane Syrup"] == {"amount": 160 * 3, "unit": "g"}
    assert "Cold Brew Concentrate" not in totals


def test_ingredient_totals_apply_scaling():
    recipes = {"x": {"product_id": "x", "name": "X", "ingredients": [
        {"name": "Tea", "amount": 100, "unit": "ml", "scaling": 1.5},
        {"name": "Water", "amount": 10, "unit": "ml"},
    ]}}
    products = [{"id": "x", "name": "X", "quantities": {"Lodgic": 2, "Bake": 0, "Brew": 0}}]
    totals = calculate_ingredient_totals(products, recipes)
    assert totals["Tea"]["amount"] == pytest.approx(300)
    assert totals["Water"]["amount"] == pytest.approx(20)


def test_product_catalog_is_default_for_products():
    assert calculate_ingredient_totals([]) == {}
    assert "cold-brew" in PRODUCT_RECIPES


def test_huge_quantity_totals_stay_exact():
    orders = add_order([])
    order = orders[0]
    orders = update_order_item(orders, order["id"], order["items"][0]["id"], "1" * 30)
    assert get_total_ingredients(orders)["Peach Tea"]["amount"] == 448 * int("1" * 30)
