from __future__ import annotations

import argparse
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import settings
from .console import warn
from .errors import NotFoundError, StorefrontError
from .money import quantize
from .storage import JsonFileStorage
from .storefront import Storefront

out = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blytz", description="Blytz marketplace client.")
    parser.add_argument("--api", default=None, help=f"Backend base URL (default: {settings.api_base_url})")
    parser.add_argument("--state", default=None, help=f"State file (default: {settings.state_path})")
    sub = parser.add_subparsers(dest="command", required=True)

    products = sub.add_parser("products", help="List the catalog")
    products.add_argument("--category", default=None)

    cart = sub.add_parser("cart", help="Show or change the cart")
    cart_sub = cart.add_subparsers(dest="cart_command", required=True)
    cart_sub.add_parser("show")
    add = cart_sub.add_parser("add")
    add.add_argument("product_id")
    add.add_argument("-q", "--quantity", type=int, default=1)
    remove = cart_sub.add_parser("remove")
    remove.add_argument("product_id")
    update = cart_sub.add_parser("set")
    update.add_argument("product_id")
    update.add_argument("quantity", type=int)
    cart_sub.add_parser("clear")

    login = sub.add_parser("login", help="Sign in and store the session token")
    login.add_argument("email")
    login.add_argument("password")
    sub.add_parser("logout", help="Forget the stored session")

    chat = sub.add_parser("chat", help="Ask the shopping assistant")
    chat.add_argument("message")
    chat.add_argument("--model", default=None, help="Model name from the model config")
    return parser


def render_products(store: Storefront, category: Optional[str]) -> None:
    catalog = store.load_catalog(category)
    table = Table(title=f"Catalog ({catalog.source})")
    table.add_column("ID")
    table.add_column("Product")
    table.add_column("Price", justify="right")
    table.add_column("Category")
    table.add_column("Deal")
    for product in catalog:
        deal = f"flash {product.time_left or ''}".strip() if product.is_flash else ("hot" if product.is_hot else "")
        table.add_row(product.id, product.title, f"${quantize(product.price)}", product.category, deal)
    out.print(table)


def render_cart(store: Storefront) -> None:
    cart = store.cart
    table = Table(title="Cart")
    table.add_column("ID")
    table.add_column("Product")
    table.add_column("Qty", justify="right")
    table.add_column("Line total", justify="right")
    for item in cart.items:
        table.add_row(item.id, item.title, str(item.quantity), f"${quantize(item.line_total)}")
    out.print(table)
    out.print(f"[bold]{cart.get_item_count()} items, total ${cart.get_total()}[/bold]")
    if cart.pending_sync:
        out.print("[yellow]Not yet synced with the server.[/yellow]")


def run_cart(store: Storefront, args: argparse.Namespace) -> None:
    cart = store.cart
    if args.cart_command == "show":
        cart.load_cart()
    elif args.cart_command == "add":
        product = store.products.get_product(args.product_id) or store.load_catalog().find(args.product_id)
        if product is None:
            raise NotFoundError(f"Unknown product {args.product_id}")
        cart.add_item(product, args.quantity)
    elif args.cart_command == "remove":
        cart.remove_item(args.product_id)
    elif args.cart_command == "set":
        cart.update_quantity(args.product_id, args.quantity)
    elif args.cart_command == "clear":
        cart.clear_cart()
    render_cart(store)


def run_chat(store: Storefront, message: str, model: Optional[str]) -> None:
    from .llm_client import LLMClient

    try:
        generator = LLMClient(model_name=model)
    except (ImportError, OSError, ValueError) as exc:
        warn("Chat model unavailable", exc)
        reply_text = settings.chat_fallback_message
    else:
        reply_text = store.chat(generator).send(message).text
    out.print(f"[bold magenta]Blytz:[/bold magenta] {escape(reply_text)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    store = Storefront.create(storage=JsonFileStorage(args.state or settings.state_path), base_url=args.api)

    try:
        if args.command == "products":
            render_products(store, args.category)
        elif args.command == "cart":
            run_cart(store, args)
        elif args.command == "login":
            auth = store.auth.login(args.email, args.password)
            out.print(f"[green]✓ Signed in as {auth.user.email}[/green]")
        elif args.command == "logout":
            store.auth.logout()
            out.print("[green]✓ Signed out[/green]")
        elif args.command == "chat":
            run_chat(store, args.message, args.model)
    except StorefrontError as exc:
        out.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
