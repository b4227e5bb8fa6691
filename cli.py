# cli.py
from datetime import datetime
from typing import List, Dict, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle

from cafe_stock.config import EXPORT_FILENAME, Settings, configure_logging
from sdk.stock_client import StockClient

console = Console()
settings = Settings.from_env()
c = StockClient(base_url=settings.api_url)


product_cache: List[Dict[str, Any]] = []

custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})


# ---------------------------
# Display helpers
# ---------------------------
def money(amount: float) -> str:
    return f"${amount:.2f}"


def show_products(products: List[Dict[str, Any]]):
    if not products:
        console.print("[italic yellow]No products found. Add your first product![/italic yellow]")
        return

    table = Table(
        title="☕ Products",
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=14)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Category", width=15)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Qty", justify="right", width=8)

    for p in products:
        qty = p.get("quantity", 0)
        low = qty <= p.get("lowStockThreshold", settings.low_stock_threshold)
        table.add_row(
            p.get("id", "N/A"),
            p.get("name", "N/A"),
            p.get("category", ""),
            money(p.get("price", 0)),
            f"[bold red]{qty}[/bold red]" if low else str(qty)
        )
    console.print(table)


def show_dashboard(summary: Optional[Dict[str, Any]]):
    if not summary:
        return
    grid = Table.grid(padding=(0, 4))
    grid.add_column(justify="center")
    grid.add_column(justify="center")
    grid.add_column(justify="center")
    low = summary.get("lowStockCount", 0)
    grid.add_row("[bold]Total Products[/bold]", "[bold]Low Stock Items[/bold]", "[bold]Total Value[/bold]")
    grid.add_row(
        str(summary.get("totalProducts", 0)),
        f"[red]{low}[/red]" if low else "0",
        f"[green]{money(summary.get('totalValue', 0))}[/green]"
    )
    console.print(Panel(grid, title="📊 Dashboard", border_style="green"))


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def show_field_errors(body: Dict[str, Any]) -> bool:
    """Print validation errors from a 422 body. Returns True if there were any."""
    errors = body.get("errors") if isinstance(body, dict) else None
    if not errors or body.get("code") != "INVALID_PRODUCT_DATA":
        return False
    for err in errors:
        console.print(f"[red]• {err.get('field')}: {err.get('message')}[/red]")
    return True


# ---------------------------
# API wrapper with exception handling
# ---------------------------
def try_api(fn, *args, success_msg: Optional[str] = None, **kwargs):
    """
    Calls fn(*args, **kwargs) behind a spinner.
    Catches exceptions and reports them in a status panel.
    """
    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            progress.add_task(description="Processing...", total=None)
            result = fn(*args, **kwargs)

        if success_msg:
            console.print(show_status(success_msg, True))
        return result
    except Exception as e:
        console.print(show_status(f"Error: {e}", False))
        return None


def refresh():
    """Re-read the catalog and dashboard after a change."""
    global product_cache
    product_cache = try_api(c.list_products) or []
    show_dashboard(try_api(c.dashboard))


# ---------------------------
# Autocompletion helpers
# ---------------------------
def get_product_completer():
    if not product_cache:
        refresh()
    ids = [p.get("id", "") for p in product_cache]
    return WordCompleter([i for i in ids if i], ignore_case=True)


def find_cached(product_id: str) -> Optional[Dict[str, Any]]:
    for p in product_cache:
        if p.get("id") == product_id:
            return p
    return None


# ---------------------------
# Layout and Header
# ---------------------------
def create_header():
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "☕ Wings Cafe",
        "[bold blue]Inventory Manager[/bold blue]",
        f"[dim]{now}[/dim]"
    )
    return Panel(header, style="bold blue")


def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


# ---------------------------
# Product form
# ---------------------------
def product_form(existing: Optional[Dict[str, Any]] = None):
    existing = existing or {}
    title = "Edit Product" if existing else "Add Product"
    console.print(f"[bold]{title}[/bold]")
    name = Prompt.ask("Name", default=existing.get("name", ""))
    description = Prompt.ask("Description", default=existing.get("description", ""))
    category = Prompt.ask("🏷️ Category", default=existing.get("category", ""))
    price = Prompt.ask("💰 Price", default=str(existing.get("price", "")))
    quantity = Prompt.ask("📦 Quantity", default=str(existing.get("quantity", "")))

    resp = try_api(
        c.save_product, name, price, quantity,
        description=description, category=category, product_id=existing.get("id")
    )
    if resp is None:
        return
    if show_field_errors(resp):
        console.print(show_status("Product not saved", False))
        return
    console.print(show_status(f"Product '{resp['product']['name']}' saved", True))
    refresh()


# ---------------------------
# Main menu
# ---------------------------
def menu():
    console.clear()
    console.print(create_header())
    refresh()

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "📦 List products", "5", "🗑️ Delete product"),
            ("2", "📊 Dashboard", "6", "💾 Export data"),
            ("3", "➕ Add product", "7", "🧪 Load sample data"),
            ("4", "✏️ Edit product", "q", "👋 Quit"),
        ]
        for row in options:
            menu_table.add_row(*row)

        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 8)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            refresh()
            show_products(product_cache)

        elif choice == "2":
            show_dashboard(try_api(c.dashboard))

        elif choice == "3":
            product_form()

        elif choice == "4":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            existing = find_cached(pid) or try_api(c.get_product, pid)
            if existing:
                product_form(existing)

        elif choice == "5":
            pid = prompt_with_autocomplete("Enter product ID", completer=get_product_completer()).strip()
            if Confirm.ask("Are you sure you want to delete this product?", default=False):
                resp = try_api(c.delete_product, pid)
                if resp is not None:
                    msg = "Product deleted" if resp.get("removed") else f"No product {pid}; nothing deleted"
                    console.print(show_status(msg, True))
                    refresh()

        elif choice == "6":
            target = Prompt.ask("Export to", default=EXPORT_FILENAME)
            try_api(c.export_data, target, success_msg=f"Exported catalog to {target}")

        elif choice == "7":
            resp = try_api(c.load_sample_data)
            if resp is not None:
                msg = "Sample data loaded" if resp.get("seeded") else "Catalog not empty; sample data skipped"
                console.print(show_status(msg, True))
                refresh()

        elif choice.lower() in ("q", "quit", "exit"):
            console.print("[bold]Goodbye 👋[/bold]")
            break

        else:
            console.print(show_status("Invalid option", False))


if __name__ == "__main__":
    configure_logging(settings.log_level)
    menu()
