# tests/test_core.py
import pytest

from cafe_stock.core import parse_product_form
from cafe_stock.exceptions import ErrorCodes, ProductValidationError

def form(**overrides):
    base = {"id": "", "name": "Cappuccino", "description": "", "category": "Beverages",
            "price": "3.50", "quantity": "25"}
    base.update(overrides)
    return base

def test_parses_typed_strings():
    p = parse_product_form(form())
    assert p.id is None
    assert p.name == "Cappuccino"
    assert p.price == 3.5
    assert p.quantity == 25

def test_accepts_json_numbers_and_whole_floats():
    p = parse_product_form(form(price=4, quantity=8.0))
    assert p.price == 4.0
    assert p.quantity == 8

def test_keeps_id_and_strips_name():
    p = parse_product_form(form(id=" 1712 ", name="  Latte  "))
    assert p.id == "1712"
    assert p.name == "Latte"

def test_missing_optional_text_defaults_to_empty():
    p = parse_product_form({"name": "Tea", "price": "2", "quantity": "3"})
    assert p.description == ""
    assert p.category == ""

@pytest.mark.parametrize("price", ["abc", "", None, "nan", "inf", "-0.01", True, [1]])
def test_rejects_bad_price(price):
    with pytest.raises(ProductValidationError) as exc:
        parse_product_form(form(price=price))
    assert exc.value.fields == ["price"]
    assert exc.value.code == ErrorCodes.INVALID_DATA

@pytest.mark.parametrize("quantity", ["8.5", "eight", "", None, "-3", 2.5, False, float("nan")])
def test_rejects_bad_quantity(quantity):
    with pytest.raises(ProductValidationError) as exc:
        parse_product_form(form(quantity=quantity))
    assert exc.value.fields == ["quantity"]

def test_zero_values_are_allowed():
    p = parse_product_form(form(price="0", quantity="0"))
    assert (p.price, p.quantity) == (0.0, 0)

def test_collects_every_field_error():
    with pytest.raises(ProductValidationError) as exc:
        parse_product_form({"name": "   ", "price": "x", "quantity": "y"})
    err = exc.value
    assert err.fields == ["name", "price", "quantity"]
    assert err.to_dict()["code"] == "INVALID_PRODUCT_DATA"
    assert all(e["message"] for e in err.errors)

@pytest.mark.parametrize("price", ["3_50", "３.５０", "1e308", "1000000.01", 1e308])
def test_rejects_python_only_spellings_and_huge_prices(price):
    with pytest.raises(ProductValidationError) as exc:
        parse_product_form(form(price=price))
    assert exc.value.fields == ["price"]

@pytest.mark.parametrize("quantity", ["1" + "0" * 400, "1" + "0" * 5000, "2_5", "２５", 10**9 + 1, 1e12])
def test_rejects_python_only_spellings_and_huge_quantities(quantity):
    with pytest.raises(ProductValidationError) as exc:
        parse_product_form(form(quantity=quantity))
    assert exc.value.fields == ["quantity"]

def test_largest_allowed_values_are_accepted():
    p = parse_product_form(form(price="1000000", quantity="1000000000"))
    assert (p.price, p.quantity) == (1_000_000.0, 1_000_000_000)
