#!/usr/bin/env python
from sdk.stock_client import StockClient

def main():
    c = StockClient(base_url="http://127.0.0.1:8085")

    # -----------------------------
    # Add products
    # -----------------------------
    print("Adding products...")
    latte = c.save_product("Latte", "3.80", "30", category="Beverages")
    muffin = c.save_product("Blueberry Muffin", "2.50", "6", category="Pastries")
    print(latte)
    print(muffin)

    # -----------------------------
    # Invalid input is rejected, not stored
    # -----------------------------
    print("\nSaving a product with a bad price...")
    print(c.save_product("Espresso", "abc", "10"))

    # -----------------------------
    # Edit keeps the product's position
    # -----------------------------
    pid = latte["product"]["id"]
    print(f"\nRestocking {pid}...")
    print(c.save_product("Latte", "3.80", "45", category="Beverages", product_id=pid))

    # -----------------------------
    # List + dashboard
    # -----------------------------
    print("\nListing products...")
    print(c.list_products())
    print("\nDashboard...")
    print(c.dashboard())

    # -----------------------------
    # Delete twice (second is a no-op)
    # -----------------------------
    mid = muffin["product"]["id"]
    print(f"\nDeleting {mid}...")
    print(c.delete_product(mid))
    print(c.delete_product(mid))

    # -----------------------------
    # Export
    # -----------------------------
    print("\nExporting...")
    print(c.export_data("wings-cafe-data.json"))

if __name__ == "__main__":
    main()
