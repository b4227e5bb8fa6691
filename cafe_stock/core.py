# cafe_stock/core.py
import math
import re
from pydantic import BaseModel
from typing import Optional, Dict, Any, List, Mapping

from .exceptions import ProductValidationError
from .models import MAX_PRICE, MAX_QUANTITY, Product

# Input schemas and the form-parsing boundary used by every view layer.

class ProductIn(BaseModel):
    id: Optional[str] = None
    name: str
    description: str = ""
    category: str = ""
    price: float
    quantity: int

def _text(raw: Any) -> str:
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)

# Plain ASCII decimals only: no "3_50", no full-width digits.
_DECIMAL_RE = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)
_WHOLE_RE = re.compile(r"[+-]?\d+(\.0*)?", re.ASCII)

def _parse_price(raw: Any, errors: List[Dict[str, Any]]) -> Optional[float]:
    if isinstance(raw, str):
        raw = raw.strip()
    if raw is None or raw == "":
        errors.append({"field": "price", "message": "price is required"})
        return None
    if isinstance(raw, bool) or (isinstance(raw, str) and not _DECIMAL_RE.fullmatch(raw)):
        errors.append({"field": "price", "message": "price must be a number"})
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        errors.append({"field": "price", "message": "price must be a number"})
        return None
    if not math.isfinite(value):
        errors.append({"field": "price", "message": "price must be a finite number"})
        return None
    if value < 0:
        errors.append({"field": "price", "message": "price must be >= 0"})
        return None
    if value > MAX_PRICE:
        errors.append({"field": "price", "message": f"price must be <= {MAX_PRICE}"})
        return None
    return value

def _parse_quantity(raw: Any, errors: List[Dict[str, Any]]) -> Optional[int]:
    if isinstance(raw, str):
        raw = raw.strip()
    if raw is None or raw == "":
        errors.append({"field": "quantity", "message": "quantity is required"})
        return None

    value: Optional[int] = None
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if math.isfinite(raw) and raw.is_integer():
            value = int(raw)
    elif isinstance(raw, str) and _WHOLE_RE.fullmatch(raw):
        # "8.0" is a whole number typed into a number field
        digits = raw.split(".")[0]
        if len(digits.lstrip("+-").lstrip("0")) > len(str(MAX_QUANTITY)):
            errors.append({"field": "quantity", "message": f"quantity must be <= {MAX_QUANTITY}"})
            return None
        value = int(digits)

    if value is None:
        errors.append({"field": "quantity", "message": "quantity must be a whole number"})
        return None
    if value < 0:
        errors.append({"field": "quantity", "message": "quantity must be >= 0"})
        return None
    if value > MAX_QUANTITY:
        errors.append({"field": "quantity", "message": f"quantity must be <= {MAX_QUANTITY}"})
        return None
    return value

def parse_product_form(form: Mapping[str, Any]) -> ProductIn:
    """
    Turn raw form values (strings as typed, or JSON values) into a ProductIn.

    Every field problem is collected and raised together as a
    ProductValidationError. A blank id means "new product".
    """
    errors: List[Dict[str, Any]] = []

    name = _text(form.get("name")).strip()
    if not name:
        errors.append({"field": "name", "message": "name must not be empty"})

    price = _parse_price(form.get("price"), errors)
    quantity = _parse_quantity(form.get("quantity"), errors)

    if errors:
        raise ProductValidationError(errors)

    product_id = _text(form.get("id")).strip() or None
    return ProductIn(
        id=product_id,
        name=name,
        description=_text(form.get("description")),
        category=_text(form.get("category")),
        price=price,
        quantity=quantity,
    )

def _make_product(product_id: str, p: ProductIn, low_stock_threshold: int) -> Product:
    return Product(
        id=product_id,
        name=p.name,
        description=p.description,
        category=p.category,
        price=p.price,
        quantity=p.quantity,
        low_stock_threshold=low_stock_threshold,
    )
