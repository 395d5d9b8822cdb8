from __future__ import annotations

from datetime import datetime

from app.domain.orders.aggregates import ORDER_STATUSES, PAYMENT_STATUSES, OrderLine
from app.persistence.models import OrderModel
from app.persistence.repositories import OrderRepository


def place_order(
    repository: OrderRepository,
    user_id: str | None,
    items: list[dict],
    shipping_address: dict | None = None,
    payment_info: dict | None = None,
    shipping_estimate: int = 0,
    tax_estimate: int = 0,
    status: str = "pending",
    payment_status: str = "pending",
    order_id: str | None = None,
    created_at: datetime | None = None,
) -> OrderModel:
    if status not in ORDER_STATUSES:
        raise ValueError(f"unknown order status: {status}")
    if payment_status not in PAYMENT_STATUSES:
        raise ValueError(f"unknown payment status: {payment_status}")
    if shipping_estimate < 0 or tax_estimate < 0:
        raise ValueError("estimates cannot be negative")

    lines = [OrderLine.from_dict(item) for item in items]
    subtotal = sum(line.line_total for line in lines)
    order = OrderModel(
        user_id=user_id,
        status=status,
        payment_status=payment_status,
        items=[
            {
                "product_id": line.product_id,
                "size": line.size,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
            }
            for line in lines
        ],
        order_summary={
            "subtotal": subtotal,
            "shipping_estimate": shipping_estimate,
            "tax_estimate": tax_estimate,
            "total": subtotal + shipping_estimate + tax_estimate,
        },
        shipping_address=shipping_address or {},
        payment_info=payment_info or {},
        created_at=created_at,
    )
    if order_id is not None:
        order.order_id = order_id
    return repository.add(order)
