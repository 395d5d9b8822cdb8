from __future__ import annotations

from typing import Any

from app.api.utils import format_currency, isoformat_z, mask_card
from app.domain.orders.aggregates import OrderAggregate, OrderLine, OrderSummary
from app.persistence.models import OrderModel, ProductModel, UserModel


def order_from_row(row: OrderModel) -> OrderAggregate:
    """Build an aggregate from a stored row; raises ValueError/KeyError/TypeError on malformed documents."""
    if not isinstance(row.items, list):
        raise ValueError(f"order {row.order_id} items must be a list")
    return OrderAggregate(
        order_id=row.order_id,
        user_id=row.user_id,
        status=row.status,
        payment_status=row.payment_status,
        items=[OrderLine.from_dict(item) for item in row.items],
        summary=OrderSummary.from_dict(row.order_summary),
        shipping_address=dict(row.shipping_address or {}),
        payment_info=dict(row.payment_info or {}),
        created_at=row.created_at,
        modified_at=row.modified_at,
    )


def order_row_view(order: OrderAggregate) -> dict[str, Any]:
    total = order.summary.total if order.summary else None
    return {
        "order_id": order.order_id,
        "customer_id": order.user_id,
        "status": order.status,
        "payment_status": order.payment_status,
        "total": total,
        "total_display": format_currency(total),
        "item_count": sum(item.quantity for item in order.items),
        "created_at": isoformat_z(order.created_at),
    }


def order_detail_view(
    order: OrderAggregate,
    customer: UserModel | None = None,
    products: dict[str, ProductModel] | None = None,
) -> dict[str, Any]:
    products = products or {}
    summary = order.summary
    payment = order.payment_info
    shipping = order.shipping_address

    items = []
    for line in order.items:
        product = products.get(line.product_id) if line.product_id else None
        items.append(
            {
                "product_id": line.product_id,
                "product_name": product.name if product else None,
                "size": line.size,
                "quantity": line.quantity,
                "unit_price": line.unit_price,
                "unit_price_display": format_currency(line.unit_price),
            }
        )

    return {
        **order_row_view(order),
        "modified_at": isoformat_z(order.modified_at),
        "status_editable": order.status_editable,
        "customer": {
            "customer_id": order.user_id,
            "email": customer.email if customer else None,
            "name": customer.name if customer else None,
        },
        "payment_info": {
            "payment_method": (payment.get("payment_method") or "").replace("_", " ") or None,
            "card_number": mask_card(payment.get("card_last4")),
            "name_on_card": payment.get("name_on_card"),
        },
        "shipping_address": {
            "first_name": shipping.get("first_name"),
            "last_name": shipping.get("last_name"),
            "address_line1": shipping.get("address_line1"),
            "city": shipping.get("city"),
            "country": shipping.get("country"),
        },
        "items": items,
        "order_summary": {
            "subtotal": summary.subtotal if summary else None,
            "shipping_estimate": summary.shipping_estimate if summary else None,
            "tax_estimate": summary.tax_estimate if summary else None,
            "total": summary.total if summary else None,
            "subtotal_display": format_currency(summary.subtotal if summary else None),
            "shipping_estimate_display": format_currency(summary.shipping_estimate if summary else None),
            "tax_estimate_display": format_currency(summary.tax_estimate if summary else None),
            "total_display": format_currency(summary.total if summary else None),
        },
    }
