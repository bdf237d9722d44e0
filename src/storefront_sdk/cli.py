from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from .config import load_config
from .context import StorefrontContext, build_context
from .exceptions import ApiError
from .pagination import paginate


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _fail(error: ApiError) -> None:
    _emit({"error": error.code, "message": error.message, "status": error.status_code})
    raise SystemExit(1)


async def cmd_login(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    result = await ctx.login(args.email, args.password, remember=not args.no_remember)
    if result.error:
        _fail(result.error)
    _emit({"user": ctx.session.user.model_dump() if ctx.session.user else None})


async def cmd_logout(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    ctx.logout()
    _emit({"logged_out": True})


async def cmd_search(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    controller = ctx.new_search()
    controller.set_text(args.query)
    await controller.drain()
    controller.close()
    if controller.error:
        _emit({"error": controller.error})
        raise SystemExit(1)
    _emit(
        [
            {"id": product.id, "name": product.name, "price": product.effective_price}
            for product in controller.results
        ]
    )


async def cmd_cart(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    if not await ctx.cart.load():
        _emit({"error": ctx.cart.error})
        raise SystemExit(1)
    _emit(
        {
            "items": [
                {
                    "product_id": line.product.id,
                    "name": line.product.name,
                    "color": line.selected_color,
                    "quantity": line.quantity,
                }
                for line in ctx.cart.items
            ],
            "total_items": ctx.cart.total_items,
            "total_price": ctx.cart.total_price,
        }
    )


async def cmd_wishlist(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    if not await ctx.wishlist.load():
        _emit({"error": ctx.wishlist.error})
        raise SystemExit(1)
    _emit(
        {
            "items": [{"product_id": item.product.id, "name": item.product.name} for item in ctx.wishlist.items],
            "total_items": ctx.wishlist.total_items,
        }
    )


async def cmd_list(ctx: StorefrontContext, args: argparse.Namespace) -> None:
    result = await ctx.listings.fetch_page(args.resource, page=args.page, page_size=args.page_size)
    if result.error:
        _fail(result.error)
    page = result.data
    window = paginate(page.page, page.total_pages, ctx.config.pagination_window)
    _emit(
        {
            "items": page.items,
            "page": page.page,
            "total_pages": page.total_pages,
            "buttons": window.buttons,
        }
    )


async def _run(args: argparse.Namespace) -> None:
    config = load_config(args.env_file)
    async with build_context(config) as ctx:
        await args.func(ctx, args)


def main() -> None:
    parser = argparse.ArgumentParser(description="Storefront SDK smoke CLI")
    parser.add_argument("--env-file", default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login")
    login_parser.add_argument("--email", required=True)
    login_parser.add_argument("--password", required=True)
    login_parser.add_argument("--no-remember", action="store_true")
    login_parser.set_defaults(func=cmd_login)

    logout_parser = subparsers.add_parser("logout")
    logout_parser.set_defaults(func=cmd_logout)

    search_parser = subparsers.add_parser("search")
    search_parser.add_argument("query")
    search_parser.set_defaults(func=cmd_search)

    cart_parser = subparsers.add_parser("cart")
    cart_parser.set_defaults(func=cmd_cart)

    wishlist_parser = subparsers.add_parser("wishlist")
    wishlist_parser.set_defaults(func=cmd_wishlist)

    list_parser = subparsers.add_parser("list")
    list_parser.add_argument("resource", help="listing path, e.g. users")
    list_parser.add_argument("--page", type=int, default=1)
    list_parser.add_argument("--page-size", type=int, default=10)
    list_parser.set_defaults(func=cmd_list)

    args = parser.parse_args()
    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
