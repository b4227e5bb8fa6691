# sdk/stock_client.py
import requests
import httpx
from pathlib import Path
from typing import Any, Dict, Optional, Union

class StockClient:
    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10,
                 session: Optional[requests.Session] = None,
                 async_transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self._async_transport = async_transport

    # Products
    def list_products(self):
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: str):
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def save_product(self, name: Any, price: Any, quantity: Any, description: str = "",
                     category: str = "", product_id: Optional[str] = None):
        # values are sent as typed; the server validates them
        form = {
            "name": name, "description": description, "category": category,
            "price": price, "quantity": quantity,
        }
        if product_id:
            r = self.session.put(f"{self.base_url}/products/{product_id}", json=form, timeout=self.timeout)
        else:
            r = self.session.post(f"{self.base_url}/products", json=form, timeout=self.timeout)
        # do not raise_for_status() on 422 — callers want the field errors
        if r.status_code == 422:
            return r.json()
        r.raise_for_status()
        return r.json()

    def delete_product(self, product_id: str):
        r = self.session.delete(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Dashboard
    def dashboard(self):
        r = self.session.get(f"{self.base_url}/dashboard", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    async def dashboard_async(self) -> Dict[str, Any]:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout,
                                     transport=self._async_transport) as client:
            r = await client.get("/dashboard")
            r.raise_for_status()
            return r.json()

    # Export / sample data
    def export_data(self, path: Union[str, Path]) -> Path:
        r = self.session.get(f"{self.base_url}/export", timeout=self.timeout)
        r.raise_for_status()
        path = Path(path)
        path.write_text(r.text, encoding="utf-8")
        return path

    def load_sample_data(self):
        r = self.session.post(f"{self.base_url}/sample-data", timeout=self.timeout)
        r.raise_for_status()
        return r.json()
