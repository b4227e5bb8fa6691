# cafe_stock/exceptions.py
from typing import Any, Dict, List, Optional

class ErrorCodes:
    """Centralized error code constants"""
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    INVALID_DATA = "INVALID_PRODUCT_DATA"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"

class InventoryError(Exception):
    """Base exception for catalog operations."""
    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.code = code

    def __str__(self):
        code_details = f" [Code: {self.code}]" if self.code else ""
        return f"{self.message}{code_details}"

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "code": self.code, "errors": self.errors}

class ProductNotFoundError(InventoryError):
    """Raised when a requested product doesn't exist."""
    def __init__(self, product_id: str):
        super().__init__(
            message=f"Product {product_id} not found",
            errors=[{"field": "id", "message": f"no product with id {product_id!r}"}],
            code=ErrorCodes.PRODUCT_NOT_FOUND
        )
        self.product_id = product_id

class ProductValidationError(InventoryError):
    """Raised when submitted product data fails validation."""
    def __init__(self, errors: List[Dict[str, Any]], message: str = "Invalid product data"):
        super().__init__(message=message, errors=errors, code=ErrorCodes.INVALID_DATA)

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

class PersistenceError(InventoryError):
    """Raised when the catalog could not be written to its storage slot."""
    def __init__(self, reason: str):
        super().__init__(
            message=f"Could not save products: {reason}",
            errors=[{"field": None, "message": reason}],
            code=ErrorCodes.PERSISTENCE_FAILED
        )
