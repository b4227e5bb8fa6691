# cafe_stock/models.py
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_LOW_STOCK_THRESHOLD = 10
# Keeps price * quantity, and the dashboard total, well inside float range.
MAX_PRICE = 1_000_000
MAX_QUANTITY = 1_000_000_000

class Product(BaseModel):
    # Persisted with the same camelCase keys the café page writes.
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    category: str = ""
    price: float = Field(ge=0, le=MAX_PRICE, allow_inf_nan=False)
    quantity: int = Field(ge=0, le=MAX_QUANTITY)
    low_stock_threshold: int = Field(
        default=DEFAULT_LOW_STOCK_THRESHOLD, ge=0, alias="lowStockThreshold"
    )

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.low_stock_threshold

    @property
    def stock_value(self) -> float:
        return self.price * self.quantity

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)

class DashboardSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_products: int = Field(alias="totalProducts")
    low_stock_count: int = Field(alias="lowStockCount")
    total_value: float = Field(alias="totalValue")
