# app.py
# =============================================================================
# Bottling Calculator: orders, batch recipes and ingredient totals
# =============================================================================

import logging
import os

import streamlit as st
import matplotlib.pyplot as plt
from babel.numbers import format_decimal

from calc import (
    get_totals_by_drink,
    get_total_ingredients,
    batch_recipes_for_orders,
    calculate_ingredient_totals,
)
from formatting import format_amount, format_number, recipe_title
from orders import add_order, update_order_customer, update_order_item, delete_order, reset_orders
from products import (
    LOCATIONS,
    new_product,
    load_products,
    add_product,
    update_product,
    delete_product,
    validate_product,
)
from recipes import (
    PRODUCT_RECIPES,
    UnknownRecipeError,
    get_recipe,
    add_recipe,
    update_recipe,
    delete_recipe,
    find_unit_conflicts,
)
from storage import JsonStorage

# -----------------------------------------------------------------------------
# CONFIG
# -----------------------------------------------------------------------------
logging.basicConfig(level=os.environ.get("BOTTLING_LOG_LEVEL", "INFO").upper())
logger = logging.getLogger("bottling")

st.set_page_config(page_title="Bottling Calculator", layout="wide")

storage = JsonStorage()

# -----------------------------------------------------------------------------
# DATI DI BASE
# -----------------------------------------------------------------------------
if "orders" not in st.session_state:
    st.session_state.orders = []
if "products" not in st.session_state:
    st.session_state.products = load_products(storage.load())
    logger.info("Loaded %d product(s) from %s", len(st.session_state.products), storage.path)
if "recipes" not in st.session_state:
    st.session_state.recipes = dict(PRODUCT_RECIPES)
if "locale" not in st.session_state:
    st.session_state["locale"] = os.environ.get("BOTTLING_LOCALE", "en_US")

# -----------------------------------------------------------------------------
# FUNZIONI DI SUPPORTO
# -----------------------------------------------------------------------------
def format_count(n) -> str:
    """Bottle counts with locale grouping."""
    return format_decimal(n, format="#,##0", locale=st.session_state.get("locale", "en_US"))


def amount_rows(ingredients):
    rows = []
    for ing in ingredients:
        amount, unit = format_amount(ing["amount"], ing["unit"])
        rows.append({"Ingredient": ing["name"], "Amount": amount, "Unit": unit})
    return rows


def totals_rows(totals):
    rows = []
    for name, tot in totals.items():
        if tot["amount"] <= 0:
            continue
        amount, unit = format_amount(tot["amount"], tot["unit"])
        rows.append({"Ingredient": name, "Total Amount": amount, "Unit": unit})
    return rows


def save_products(products):
    st.session_state.products = products
    storage.save(products)


def clear_orders():
    """Reset button callback; the confirmation box is unticked after every clear."""
    cleared = reset_orders(st.session_state.orders, lambda: st.session_state.get("confirm_reset", False))
    if cleared is st.session_state.orders:
        st.session_state["reset_refused"] = True
        return
    st.session_state.orders = cleared
    st.session_state["confirm_reset"] = False


def recipe_card(recipe, scaling: float = 1.0):
    st.subheader(recipe_title(recipe))
    rows = []
    for ing in recipe["ingredients"]:
        row = {"Ingredient": ing["name"], "Amount": format_number(ing["amount"]), "Unit": ing["unit"]}
        if scaling != 1:
            row["Scaled Amount"] = f"{format_number(ing['amount'] * scaling)} {ing['unit']}"
        rows.append(row)
    if rows:
        st.table(rows)
    else:
        st.info("No ingredients yet.")

# -----------------------------------------------------------------------------
# HEADER
# -----------------------------------------------------------------------------
st.title("Bottling Calculator")
h1, h2, h3 = st.columns([1, 1, 2])
if h1.button("➕ Add Order", key="add_order"):
    st.session_state.orders = add_order(st.session_state.orders)
    st.rerun()
h2.button("🔄 Reset All", key="reset_orders", on_click=clear_orders)
h3.checkbox("Yes, clear every order", key="confirm_reset")
if st.session_state.pop("reset_refused", False):
    st.warning("Tick the confirmation box to clear all orders.")

tab_orders, tab_batches, tab_totals, tab_products, tab_recipes, tab_settings = st.tabs(
    ["Orders", "Batch Recipes", "Total Ingredients", "Products", "Recipes", "Settings"]
)

# -----------------------------------------------------------------------------
# ORDERS
# -----------------------------------------------------------------------------
with tab_orders:
    expanded = st.toggle("Show orders", value=True, key="orders_expanded")

    if not st.session_state.orders:
        st.info("No orders available. Please add an order.")

    if expanded:
        for order in list(st.session_state.orders):
            with st.container(border=True):
                c_name, c_del = st.columns([4, 1])
                name = c_name.text_input(
                    "Customer name", value=order["customer_name"],
                    placeholder="Customer name", key=f"cust_{order['id']}",
                )
                if name != order["customer_name"]:
                    st.session_state.orders = update_order_customer(st.session_state.orders, order["id"], name)
                if c_del.button("🗑️", key=f"del_{order['id']}"):
                    st.session_state.orders = delete_order(st.session_state.orders, order["id"])
                    st.rerun()
                for item in order["items"]:
                    try:
                        label = get_recipe(item["drink_type"])["name"]
                    except UnknownRecipeError as e:
                        st.error(str(e))
                        label = f"[missing {item['drink_type']}]"
                    qty = st.number_input(
                        label, min_value=0, value=int(item["quantity"]), step=1,
                        key=f"qty_{item['id']}",
                    )
                    if qty != item["quantity"]:
                        st.session_state.orders = update_order_item(
                            st.session_state.orders, order["id"], item["id"], qty
                        )

    if st.session_state.orders:
        st.subheader("Order Totals")
        try:
            by_drink = get_totals_by_drink(st.session_state.orders)
        except UnknownRecipeError as e:
            st.error(str(e))
            by_drink = {}
        rows = [{"Drink": d, "Total Bottles": format_count(t)} for d, t in by_drink.items() if t > 0]
        if rows:
            st.table(rows)
        else:
            st.caption("Nothing ordered yet.")

# -----------------------------------------------------------------------------
# BATCH RECIPES
# -----------------------------------------------------------------------------
with tab_batches:
    try:
        batches = batch_recipes_for_orders(st.session_state.orders)
    except UnknownRecipeError as e:
        st.error(str(e))
        batches = []
    if not batches:
        st.info("Add bottles to an order to see batch recipes.")
    for drink_name, bottles, ingredients in batches:
        st.subheader(f"{drink_name} ({format_count(bottles)} bottles)")
        st.table(amount_rows(ingredients))

# -----------------------------------------------------------------------------
# TOTAL INGREDIENTS
# -----------------------------------------------------------------------------
with tab_totals:
    st.subheader("Total Ingredients Needed")
    try:
        totals = get_total_ingredients(st.session_state.orders)
    except UnknownRecipeError as e:
        st.error(str(e))
        totals = {}
    rows = totals_rows(totals)
    if rows:
        st.table(rows)
    else:
        st.info("No ingredients needed yet.")

    labels, vals = [], []
    for name, tot in totals.items():
        if tot["unit"] == "ml" and tot["amount"] > 0:
            labels.append(name)
            vals.append(tot["amount"])
    if sum(vals) > 0:
        fig, ax = plt.subplots()
        ax.pie(vals, labels=labels, autopct='%1.1f%%', startangle=90)
        ax.axis('equal')
        st.pyplot(fig)
        plt.close(fig)
        st.caption("Share of total liquid volume per ingredient")

# -----------------------------------------------------------------------------
# PRODUCTS (per location)
# -----------------------------------------------------------------------------
with tab_products:
    st.caption("Bottles to prepare for each location. Saved automatically.")

    with st.form("add_product_form"):
        options = ["(no recipe)"] + list(st.session_state.recipes.keys())
        pick = st.selectbox("Recipe", options, key="prod_new_recipe")
        submitted = st.form_submit_button("Add product")
        if submitted:
            if pick == "(no recipe)":
                prod = new_product()
            else:
                prod = new_product(st.session_state.recipes[pick]["name"], product_id=pick)
            if any(p["id"] == prod["id"] for p in st.session_state.products):
                st.error("This product is already in the list.")
            else:
                save_products(add_product(st.session_state.products, prod))
                st.rerun()

    if not st.session_state.products:
        st.info("No products yet.")
    for prod in list(st.session_state.products):
        cols = st.columns([3] + [1] * len(LOCATIONS) + [1])
        name = cols[0].text_input("Product name", value=prod["name"], placeholder="Product name",
                                  key=f"prod_name_{prod['id']}")
        if name != prod["name"]:
            save_products(update_product(st.session_state.products, prod["id"], "name", name))
        for col, loc in zip(cols[1:], LOCATIONS):
            qty = col.number_input(loc, min_value=0, value=max(0, prod["quantities"].get(loc, 0)), step=1,
                                   key=f"prod_{loc}_{prod['id']}")
            if qty != prod["quantities"].get(loc, 0):
                save_products(update_product(st.session_state.products, prod["id"], loc, qty))
        if cols[-1].button("🗑️", key=f"prod_del_{prod['id']}"):
            save_products(delete_product(st.session_state.products, prod["id"]))
            st.rerun()
        current = next((p for p in st.session_state.products if p["id"] == prod["id"]), prod)
        for err in validate_product(current):
            st.error(err["message"])

    prod_totals = calculate_ingredient_totals(st.session_state.products, st.session_state.recipes)
    rows = totals_rows(prod_totals)
    if rows:
        st.subheader("Ingredients for all locations")
        st.table(rows)

# -----------------------------------------------------------------------------
# RECIPES
# -----------------------------------------------------------------------------
with tab_recipes:
    conflicts = find_unit_conflicts(st.session_state.recipes)
    for ing_name, units in conflicts.items():
        st.warning(f"'{ing_name}' is used with different units ({', '.join(units)}); totals will mix them.")

    scaling = st.number_input("Scale recipes by", min_value=0.0, value=1.0, step=0.5, key="recipes_scaling")
    for pid, recipe in list(st.session_state.recipes.items()):
        with st.container(border=True):
            recipe_card(recipe, scaling)
            with st.form(f"add_ing_form_{pid}"):
                c1, c2, c3 = st.columns([2, 1, 1])
                ing_name = c1.text_input("Ingredient", key=f"ing_name_{pid}")
                ing_amount = c2.number_input("Amount per bottle", min_value=0.0, value=0.0, step=1.0,
                                             key=f"ing_amount_{pid}")
                ing_unit = c3.selectbox("Unit", ["ml", "g"], key=f"ing_unit_{pid}")
                b1, b2 = st.columns([1, 1])
                add_btn = b1.form_submit_button("Add ingredient")
                del_btn = b2.form_submit_button("Delete recipe")
                if add_btn:
                    if not ing_name.strip():
                        st.error("Please enter an ingredient name")
                    else:
                        ingredients = recipe["ingredients"] + [
                            {"name": ing_name.strip(), "amount": float(ing_amount), "unit": ing_unit, "scaling": 1}
                        ]
                        st.session_state.recipes = update_recipe(st.session_state.recipes, pid,
                                                                 {"ingredients": ingredients})
                        st.rerun()
                if del_btn:
                    st.session_state.recipes = delete_recipe(st.session_state.recipes, pid)
                    st.rerun()

    with st.form("create_recipe_form"):
        new_pid = st.text_input("Recipe id (e.g. mint-lemonade)", key="recipes_new_id").strip().lower()
        new_name = st.text_input("Drink name", key="recipes_new_name").strip()
        submitted = st.form_submit_button("Create recipe")
        if submitted:
            if not new_pid:
                st.error("Please enter a recipe id")
            elif new_pid in st.session_state.recipes:
                st.error("A recipe with this id already exists.")
            else:
                recipe = {"product_id": new_pid, "name": new_name or recipe_title({"product_id": new_pid}),
                          "ingredients": []}
                st.session_state.recipes = add_recipe(st.session_state.recipes, recipe)
                st.rerun()

# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
with tab_settings:
    st.subheader("Locale")
    locales = ["en_US", "it_IT", "de_DE"]
    current = st.session_state["locale"]
    loc = st.selectbox("Number format", locales,
                       index=locales.index(current) if current in locales else 0, key="settings_locale")
    st.session_state["locale"] = loc
    st.caption(f"Data directory: {storage.data_dir}")
