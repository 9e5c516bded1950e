# cli.py
import logging
import sys
from datetime import datetime
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.logging import RichHandler
from rich import box

from prompt_toolkit import prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.styles import Style as PromptStyle
from pydantic import ValidationError

from sdk.catalog import CatalogView, NO_RESULTS
from sdk.config import get_settings
from sdk.editor import RecordEditor, FIELDS
from sdk.errors import InventoryClientError
from sdk.inventory_client import InventoryClient
from sdk.models import Product

console = Console()
logger = logging.getLogger("inventory.cli")

# Custom prompt style for prompt_toolkit
custom_style = PromptStyle.from_dict({
    'completion-menu.completion': 'bg:#008888 #ffffff',
    'completion-menu.completion.current': 'bg:#00aaaa #000000',
    'scrollbar.background': 'bg:#88aaaa',
    'scrollbar.button': 'bg:#222222',
})

FIELD_LABELS = {
    "name": "Product Name *",
    "description": "Description",
    "price": "Price ($) *",
    "quantity": "Quantity *",
    "category": "Category",
}


def setup_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


# ---------------------------
# Display helpers
# ---------------------------
def show_products(products: List[Product], title: str = "📦 Product Inventory"):
    table = Table(
        title=title,
        box=box.ROUNDED,
        header_style="bold cyan",
        title_style="bold magenta",
        show_lines=True
    )
    table.add_column("ID", style="dim", width=6)
    table.add_column("Name", style="bold", width=22)
    table.add_column("Category", width=14)
    table.add_column("Price", justify="right", width=10)
    table.add_column("Stock", justify="right", width=7)
    table.add_column("Description", width=30)
    table.add_column("Added", width=11)

    for p in products:
        table.add_row(
            str(p.id),
            p.name,
            p.category or "",
            f"${p.price:.2f}" if p.price is not None else "-",
            str(p.quantity) if p.quantity is not None else "-",
            p.description or "[dim]No description available[/dim]",
            p.created_at.strftime("%Y-%m-%d") if p.created_at else "",
        )
    console.print(table)


def show_catalog(view: CatalogView):
    if view.error:
        console.print(show_status(view.error, False))

    products = view.filtered_products
    count = len(products)
    console.print(f"[bold]{count}[/bold] product{'' if count == 1 else 's'}"
                  + (f" matching [cyan]'{view.search_term}'[/cyan]" if view.search_term.strip() else ""))

    state = view.empty_state
    if state == NO_RESULTS:
        console.print(Panel.fit("Try adjusting your search terms", title="No products found", border_style="yellow"))
    elif state:
        console.print(Panel.fit("Get started by adding your first product", title="No products yet", border_style="yellow"))
    else:
        show_products(products)


def show_status(message: str, is_success: bool = True):
    style = "green" if is_success else "red"
    return Panel.fit(f"[{style}]{message}[/{style}]", title="Status")


def with_spinner(fn, *args, description: str = "Processing...", **kwargs):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        progress.add_task(description=description, total=None)
        return fn(*args, **kwargs)


# ---------------------------
# Input helpers with autocomplete
# ---------------------------
def prompt_with_autocomplete(message: str, completer=None, default: str = ""):
    return prompt(f"{message} ", completer=completer, style=custom_style, default=default)


def product_completer(view: CatalogView):
    words = [str(p.id) for p in view.products] + [p.name for p in view.products]
    return WordCompleter(words, ignore_case=True)


def pick_product(view: CatalogView) -> Optional[Product]:
    raw = prompt_with_autocomplete("Enter product ID or name", completer=product_completer(view)).strip()
    for p in view.products:
        if str(p.id) == raw or p.name.lower() == raw.lower():
            return p
    console.print(f"[yellow]No product '{raw}' in the current list[/yellow]")
    return None


# ---------------------------
# Record editor flow
# ---------------------------
def fill_fields(editor: RecordEditor, fields):
    for name in fields:
        value = prompt_with_autocomplete(FIELD_LABELS[name], default=getattr(editor.form, name))
        editor.set_field(name, value)


def run_editor(editor: RecordEditor) -> bool:
    title = "Edit Product" if editor.is_editing else "Add New Product"
    console.print(Panel.fit(
        "Update product information" if editor.is_editing else "Fill in the details to add a new product",
        title=title, border_style="blue",
    ))

    if editor.is_editing and not with_spinner(editor.load, description="Loading product..."):
        console.print(show_status(editor.error, False))
        return False

    fill_fields(editor, FIELDS)
    while True:
        with_spinner(editor.submit, description="Saving...")
        if editor.navigate_to:
            console.print(show_status("Product saved successfully"))
            return True

        if editor.error:
            console.print(show_status(editor.error, False))
        for field, message in editor.validation_errors.items():
            console.print(f"  [red]{FIELD_LABELS.get(field, field)}: {message}[/red]")

        if not Confirm.ask("Fix and retry?", default=True):
            editor.cancel()
            return False
        fill_fields(editor, list(editor.validation_errors) or FIELDS)


# ---------------------------
# Layout and Header
# ---------------------------
def create_header(base_url: str):
    header = Table(show_header=False, box=box.ROUNDED)
    header.add_column("left", width=30)
    header.add_column("center", width=40)
    header.add_column("right", width=30)

    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    header.add_row(
        "📦 PyInventory",
        "[bold blue]Product Management System[/bold blue]",
        f"[dim]{base_url}  {now}[/dim]"
    )
    return Panel(header, style="bold blue")


def show_query(client_call, *args, title: str):
    try:
        resp = with_spinner(client_call, *args)
    except InventoryClientError as e:
        logger.error("query failed: %s", e)
        console.print(show_status(f"Error: {e}", False))
        return
    if not resp.success:
        console.print(show_status(resp.message or "Request failed", False))
        return
    try:
        products = [Product.model_validate(p) for p in resp.data or []]
    except (TypeError, ValidationError) as e:
        logger.error("malformed product list: %s", e)
        console.print(show_status("Error: malformed product list", False))
        return
    if products:
        show_products(products, title=title)
    else:
        console.print("[italic yellow]No products found[/italic yellow]")


# ---------------------------
# Main menu
# ---------------------------
def menu(client: InventoryClient):
    settings = get_settings()
    view = CatalogView(client)

    console.clear()
    console.print(create_header(client.base_url))
    with_spinner(view.load, description="Loading products...")
    show_catalog(view)

    while True:
        menu_table = Table.grid(padding=(0, 2))
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)
        menu_table.add_column("Key", style="bold cyan", width=4)
        menu_table.add_column("Option", width=30)

        options = [
            ("1", "🔄 Reload products", "5", "✏️ Edit product"),
            ("2", "🔍 Search products", "6", "🗑️ Delete product"),
            ("3", "🧹 Clear search", "7", "🏷️ Products by category"),
            ("4", "➕ Add product", "8", "📉 Low stock report"),
            ("", "", "q", "👋 Quit")
        ]
        for row in options:
            menu_table.add_row(*row)
        console.print(Panel(menu_table, title="📋 Menu", border_style="yellow"))

        choice = prompt_with_autocomplete(
            "\nChoose an option",
            completer=WordCompleter([str(i) for i in range(1, 9)] + ["q", "quit", "exit"])
        ).strip()

        if choice == "1":
            with_spinner(view.load, description="Loading products...")
            show_catalog(view)

        elif choice == "2":
            term = prompt_with_autocomplete("Search products...", default=view.search_term)
            view.set_search_term(term)
            show_catalog(view)

        elif choice == "3":
            view.set_search_term("")
            show_catalog(view)

        elif choice == "4":
            if run_editor(RecordEditor(client)):
                with_spinner(view.load, description="Loading products...")
                show_catalog(view)

        elif choice == "5":
            product = pick_product(view)
            if product and run_editor(RecordEditor(client, product.id)):
                with_spinner(view.load, description="Loading products...")
                show_catalog(view)

        elif choice == "6":
            product = pick_product(view)
            if product:
                confirm = lambda _pid: Confirm.ask(
                    f"[red]Are you sure you want to delete '{product.name}'?[/red]", default=False)
                if view.delete(product.id, confirm):
                    console.print(show_status(f"Product '{product.name}' deleted"))
                show_catalog(view)

        elif choice == "7":
            category = prompt_with_autocomplete(
                "🏷️ Category",
                completer=WordCompleter(sorted({p.category for p in view.products if p.category}), ignore_case=True),
            ).strip()
            show_query(client.products_by_category, category, title=f"🏷️ Category '{category}'")

        elif choice == "8":
            threshold = IntPrompt.ask("Stock threshold", default=settings.low_stock_threshold)
            show_query(client.low_stock_products, threshold, title=f"📉 Stock at or below {threshold}")

        elif choice.lower() in ("q", "quit", "exit"):
            if Confirm.ask("Are you sure you want to quit?"):
                console.print(Panel.fit("[bold green]Goodbye! 👋[/bold green]", title="PyInventory"))
                return

        console.print()
        console.rule(style="dim")


def main():
    settings = get_settings()
    setup_logging(settings.log_level)
    client = InventoryClient(base_url=sys.argv[1] if len(sys.argv) > 1 else None)
    try:
        menu(client)
    except KeyboardInterrupt:
        console.print("\n\n[bold red]Interrupted by user[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
