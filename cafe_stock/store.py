# cafe_stock/store.py
import json
import logging
import time
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError

from .config import STORAGE_KEY
from .core import ProductIn, parse_product_form, _make_product
from .database import KeyValueSlot
from .exceptions import PersistenceError
from .models import DEFAULT_LOW_STOCK_THRESHOLD, DashboardSummary, Product

logger = logging.getLogger(__name__)

SAMPLE_PRODUCTS = [
    {
        "id": "1",
        "name": "Cappuccino",
        "description": "Classic Italian coffee drink",
        "category": "Beverages",
        "price": 3.50,
        "quantity": 25,
    },
    {
        "id": "2",
        "name": "Chocolate Cake",
        "description": "Rich chocolate cake slice",
        "category": "Desserts",
        "price": 4.75,
        "quantity": 8,
    },
    {
        "id": "3",
        "name": "Turkey Sandwich",
        "description": "Fresh turkey with veggies on whole wheat",
        "category": "Sandwiches",
        "price": 7.25,
        "quantity": 15,
    },
]

def _timestamp_id() -> str:
    return str(time.time_ns() // 1_000_000)

class ProductStore:
    """
    The authoritative, ordered product catalog.

    Every mutation is written through to the persistence slot before it
    returns. If the write fails the in-memory change is undone and
    PersistenceError is raised, so memory and slot never disagree.
    """

    def __init__(
        self,
        slot: KeyValueSlot,
        key: str = STORAGE_KEY,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        id_factory: Callable[[], str] = _timestamp_id,
    ) -> None:
        self._slot = slot
        self._key = key
        self._threshold = low_stock_threshold
        self._id_factory = id_factory
        self._products: List[Product] = []
        self.load()

    @property
    def low_stock_threshold(self) -> int:
        return self._threshold

    # -------- persistence --------

    def load(self) -> None:
        raw = self._slot.get(self._key)
        self._products = self._decode(raw)
        logger.info("Loaded %d product(s) from %r", len(self._products), self._key)

    def _decode(self, raw: Optional[str]) -> List[Product]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.warning("Stored catalog under %r is not valid JSON (%s); starting empty", self._key, e)
            return []
        if not isinstance(data, list):
            logger.warning("Stored catalog under %r is not a list; starting empty", self._key)
            return []

        products: List[Product] = []
        seen = set()
        for item in data:
            try:
                product = Product.model_validate(item)
            except ValidationError as e:
                logger.warning("Skipping malformed stored product %r: %s", item, e.errors())
                continue
            if product.id in seen:
                logger.warning("Skipping duplicate stored product id %r", product.id)
                continue
            seen.add(product.id)
            products.append(product)
        return products

    def persist(self) -> None:
        payload = json.dumps([p.to_record() for p in self._products])
        try:
            self._slot.set(self._key, payload)
        except PersistenceError:
            raise
        except Exception as e:
            # any slot failure must reach _commit so the change is undone
            logger.error("Failed to persist catalog under %r: %s", self._key, e)
            raise PersistenceError(str(e)) from e

    def _commit(self, previous: List[Product]) -> None:
        try:
            self.persist()
        except PersistenceError:
            self._products = previous
            raise

    # -------- reads --------

    def list(self) -> List[Product]:
        return [p.model_copy() for p in self._products]

    def get(self, product_id: str) -> Optional[Product]:
        index = self._index_of(product_id)
        if index is None:
            return None
        return self._products[index].model_copy()

    def aggregate(self) -> DashboardSummary:
        return DashboardSummary(
            total_products=len(self._products),
            low_stock_count=sum(1 for p in self._products if p.is_low_stock),
            total_value=sum(p.stock_value for p in self._products),
        )

    def export_json(self) -> str:
        return json.dumps([p.to_record() for p in self._products], indent=2)

    # -------- writes --------

    def upsert(self, data: Union[ProductIn, Mapping[str, Any]]) -> Product:
        """
        Replace the product with a matching id in place, or append a new one
        with a freshly assigned id. The full record is replaced; there is no
        field-level merge.
        """
        raw = data.model_dump() if isinstance(data, ProductIn) else data
        payload = parse_product_form(raw)

        previous = list(self._products)
        index = self._index_of(payload.id) if payload.id else None
        if index is not None:
            product = _make_product(payload.id, payload, self._threshold)
            self._products[index] = product
            logger.debug("Updated product %s (%s)", product.id, product.name)
        else:
            product = _make_product(self._new_id(), payload, self._threshold)
            self._products.append(product)
            logger.debug("Added product %s (%s)", product.id, product.name)

        self._commit(previous)
        return product.model_copy()

    def remove(self, product_id: str) -> bool:
        index = self._index_of(product_id)
        if index is None:
            logger.debug("Remove of unknown product %s ignored", product_id)
            return False
        previous = list(self._products)
        del self._products[index]
        self._commit(previous)
        logger.debug("Removed product %s", product_id)
        return True

    def seed_sample_data(self) -> bool:
        if self._products:
            return False
        previous = list(self._products)
        self._products = [
            Product(low_stock_threshold=self._threshold, **item) for item in SAMPLE_PRODUCTS
        ]
        self._commit(previous)
        logger.info("Loaded %d sample product(s)", len(self._products))
        return True

    # -------- helpers --------

    def _index_of(self, product_id: str) -> Optional[int]:
        for i, p in enumerate(self._products):
            if p.id == product_id:
                return i
        return None

    def _new_id(self) -> str:
        taken = {p.id for p in self._products}
        base = self._id_factory()
        candidate, bump = base, 0
        while candidate in taken:
            bump += 1
            candidate = str(int(base) + bump) if base.isdigit() else f"{base}-{bump}"
        return candidate
