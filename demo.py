#!/usr/bin/env python
# Scripted walk-through against a running server: `python -m app.main` first.
from sdk.catalog import CatalogView
from sdk.editor import RecordEditor
from sdk.inventory_client import InventoryClient


def add(client, **fields):
    editor = RecordEditor(client)
    for name, value in fields.items():
        editor.set_field(name, value)
    if not editor.submit():
        print("  rejected:", editor.error or editor.validation_errors)
    return editor


def main():
    c = InventoryClient(base_url="http://127.0.0.1:8080/api")

    # -----------------------------
    # Reset everything for demo
    # -----------------------------
    print("Resetting store...")
    c.session.post(f"{c.base_url}/reset")

    # -----------------------------
    # Create products through the editor
    # -----------------------------
    print("\nCreating products...")
    add(c, name="Laptop", price="1499.99", quantity="3", category="Electronics")
    add(c, name="Mouse", price="25", quantity="10", category="Electronics", description="Wireless")
    add(c, name="Desk", price="0", quantity="-1")  # fails client-side validation

    # -----------------------------
    # Load and search
    # -----------------------------
    view = CatalogView(c)
    view.load()
    print("\nAll products:", [p.name for p in view.products])
    view.set_search_term("wireless")
    print("Search 'wireless':", [p.name for p in view.filtered_products])

    # -----------------------------
    # Edit, then delete with confirmation
    # -----------------------------
    mouse = view.filtered_products[0]
    editor = RecordEditor(c, mouse.id)
    editor.load()
    editor.set_field("quantity", "8")
    editor.submit()

    token = view.request_delete(mouse.id)
    view.confirm_delete(token)
    view.set_search_term("")
    print("\nAfter delete:", [p.name for p in view.products])


if __name__ == "__main__":
    main()
