from __future__ import annotations

import argparse
import json
import sys

from app.core.config import get_settings
from app.core.errors import OrderAdminError
from app.core.logging import configure_logging
from app.core.security import load_principal
from app.demo import seed_default_scenario
from app.domain.orders.aggregates import ORDER_STATUSES, PAYMENT_STATUSES
from app.domain.orders.coordinator import OrderUpdateCoordinator
from app.domain.orders.listing import OrderListQuery, refresh
from app.persistence.pg import init_db, session_scope
from app.persistence.repositories import OrderRepository


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Order Admin CLI")
    top = parser.add_subparsers(dest="command", required=True)

    orders = top.add_parser("orders", help="Order operations")
    orders_sub = orders.add_subparsers(dest="orders_command", required=True)

    listing = orders_sub.add_parser("list", help="List orders, paginated or filtered by status")
    listing.add_argument("--status", choices=ORDER_STATUSES, default=None)
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--limit", type=int, default=settings.default_page_limit)

    update = orders_sub.add_parser("update", help="Change an order's status and/or payment status")
    update.add_argument("order_id")
    update.add_argument("--status", choices=ORDER_STATUSES, default=None)
    update.add_argument("--payment-status", choices=PAYMENT_STATUSES, default=None)
    update.add_argument("--user-id", default=settings.admin_user_id, help="Acting user (must be an admin)")
    update.add_argument("--filter-status", choices=ORDER_STATUSES, default=None, help="Status filter for the refreshed listing")
    update.add_argument("--page", type=int, default=1)
    update.add_argument("--limit", type=int, default=settings.default_page_limit)

    demo = top.add_parser("demo", help="Demo data")
    demo_sub = demo.add_subparsers(dest="demo_command", required=True)
    demo_sub.add_parser("seed", help="Seed demo users, products and orders")

    return parser


def _print(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _list_orders(args: argparse.Namespace) -> int:
    with session_scope() as session:
        view = OrderListQuery(status=args.status, page=args.page, limit=args.limit)
        _print(refresh(OrderRepository(session), view).to_dict())
    return 0


def _update_order(args: argparse.Namespace) -> int:
    with session_scope() as session:
        principal = load_principal(session, args.user_id)
        result = OrderUpdateCoordinator(OrderRepository(session)).apply(
            principal,
            args.order_id,
            requested_payment_status=args.payment_status,
            requested_status=args.status,
            view=OrderListQuery(status=args.filter_status, page=args.page, limit=args.limit),
        )
        _print(result.to_dict())
    return 0


def _seed_demo(_: argparse.Namespace) -> int:
    with session_scope() as session:
        _print(seed_default_scenario(session))
    return 0


def main(argv: list[str] | None = None) -> int:
    configure_logging(stream=sys.stderr)
    parser = _build_parser()
    args = parser.parse_args(argv)
    init_db()

    handlers = {
        ("orders", "list"): lambda: _list_orders(args),
        ("orders", "update"): lambda: _update_order(args),
        ("demo", "seed"): lambda: _seed_demo(args),
    }
    sub = getattr(args, "orders_command", None) or getattr(args, "demo_command", None)
    handler = handlers.get((args.command, sub))
    if handler is None:
        parser.error("unsupported command")
        return 2

    try:
        return handler()
    except OrderAdminError as exc:
        _print({"error": exc.error, "detail": str(exc)})
        return 1
    except ValueError as exc:
        _print({"error": "bad_request", "detail": str(exc)})
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
