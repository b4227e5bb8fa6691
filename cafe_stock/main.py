# cafe_stock/main.py
import logging
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from .config import EXPORT_FILENAME, Settings, configure_logging
from .database import JsonFileSlot
from .exceptions import InventoryError, PersistenceError, ProductNotFoundError, ProductValidationError
from .store import ProductStore

logger = logging.getLogger(__name__)

def _dashboard(store: ProductStore) -> Dict[str, Any]:
    return store.aggregate().model_dump(by_alias=True)

def create_app(store: ProductStore, cors_origins: Optional[list] = None) -> FastAPI:
    app = FastAPI(title="cafe-stock (café inventory)")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Error mapping
    # ---------------------------
    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        if isinstance(exc, ProductValidationError):
            status = 422
        elif isinstance(exc, ProductNotFoundError):
            status = 404
        elif isinstance(exc, PersistenceError):
            status = 503
        else:
            status = 400
        return JSONResponse(status_code=status, content=exc.to_dict())

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/products")
    async def list_products():
        return [p.to_record() for p in store.list()]

    @app.get("/products/{product_id}")
    async def get_product(product_id: str):
        p = store.get(product_id)
        if p is None:
            raise ProductNotFoundError(product_id)
        return p.to_record()

    @app.post("/products", status_code=201)
    async def save_product(form: Dict[str, Any] = Body(...)):
        product = store.upsert(form)
        return {"product": product.to_record(), "dashboard": _dashboard(store)}

    @app.put("/products/{product_id}")
    async def update_product(product_id: str, form: Dict[str, Any] = Body(...)):
        product = store.upsert({**form, "id": product_id})
        return {"product": product.to_record(), "dashboard": _dashboard(store)}

    @app.delete("/products/{product_id}")
    async def delete_product(product_id: str):
        removed = store.remove(product_id)
        return {"removed": removed, "dashboard": _dashboard(store)}

    # ---------------------------
    # Dashboard / export
    # ---------------------------
    @app.get("/dashboard")
    async def dashboard():
        return _dashboard(store)

    @app.get("/export")
    async def export_data():
        return Response(
            content=store.export_json(),
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    @app.post("/sample-data")
    async def load_sample_data():
        seeded = store.seed_sample_data()
        return {"seeded": seeded, "products": [p.to_record() for p in store.list()]}

    return app

def build_default_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)
    store = ProductStore(
        JsonFileSlot(settings.data_file),
        key=settings.storage_key,
        low_stock_threshold=settings.low_stock_threshold,
    )
    logger.info("Serving catalog from %s", settings.data_file)
    return create_app(store, cors_origins=settings.cors_origins)

def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(build_default_app(settings), host="127.0.0.1", port=settings.port)

def __getattr__(name: str):
    # `uvicorn cafe_stock.main:app`; built on first access so importing stays side-effect free
    if name == "app":
        app = build_default_app()
        globals()["app"] = app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

if __name__ == "__main__":
    run()
