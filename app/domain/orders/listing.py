from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable

from app.core.config import get_settings
from app.domain.orders.aggregates import ORDER_STATUSES, OrderAggregate
from app.domain.orders.projections import order_from_row, order_row_view
from app.persistence.models import OrderModel
from app.persistence.repositories import OrderRepository

logger = logging.getLogger(__name__)


@dataclass
class OrderListQuery:
    """View state owned by the caller: an optional status filter and a page."""

    status: str | None = None
    page: int = 1
    limit: int = field(default_factory=lambda: get_settings().default_page_limit)

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.status is not None and self.status not in ORDER_STATUSES:
            raise ValueError(f"unknown order status: {self.status}")
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")


@dataclass(frozen=True)
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "total_pages": self.total_pages,
        }


@dataclass
class OrderPage:
    items: list[OrderAggregate]
    pagination: Pagination

    def to_dict(self) -> dict[str, Any]:
        return {
            "orders": [order_row_view(order) for order in self.items],
            "pagination": self.pagination.to_dict(),
        }


def displayable_orders(rows: Iterable[OrderModel]) -> list[OrderAggregate]:
    orders: list[OrderAggregate] = []
    for row in rows:
        try:
            order = order_from_row(row)
        except (KeyError, TypeError, ValueError) as exc:
            logger.debug("skipping malformed order %s: %s", row.order_id, exc)
            continue
        if order.is_displayable:
            orders.append(order)
        else:
            logger.debug("skipping partial order %s", row.order_id)
    return orders


def list_orders(repository: OrderRepository, page: int, limit: int) -> OrderPage:
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    limit = min(limit, get_settings().max_page_limit)

    rows, total = repository.find_paginated(page, limit)
    pagination = Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=max(1, math.ceil(total / limit)),
    )
    return OrderPage(items=displayable_orders(rows), pagination=pagination)


def list_orders_by_status(repository: OrderRepository, status: str) -> OrderPage:
    if status not in ORDER_STATUSES:
        raise ValueError(f"unknown order status: {status}")
    items = displayable_orders(repository.find_by_status(status))
    return OrderPage(
        items=items,
        pagination=Pagination(total=len(items), page=1, limit=len(items), total_pages=1),
    )


def refresh(repository: OrderRepository, view: OrderListQuery) -> OrderPage:
    if view.status:
        return list_orders_by_status(repository, view.status)
    return list_orders(repository, view.page, view.limit)
