from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

ORDER_STATUSES: tuple[str, ...] = ("pending", "confirmed", "shipping", "delivered", "cancelled")
PAYMENT_STATUSES: tuple[str, ...] = ("pending", "paid", "failed")
PRODUCT_SIZES: tuple[str, ...] = ("S", "M", "L", "XL", "XXL")


def as_whole_number(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"{name} must be a number: {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{name} must be a whole number: {value}")
    return int(value)


@dataclass
class OrderLine:
    product_id: str | None
    size: str | None
    quantity: int
    unit_price: int

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_price

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OrderLine":
        if not isinstance(data, dict):
            raise TypeError("order line must be a mapping")
        quantity = as_whole_number(data["quantity"], "quantity")
        unit_price = as_whole_number(data["unit_price"], "unit_price")
        if quantity < 1:
            raise ValueError(f"line quantity must be positive: {quantity}")
        if unit_price < 0:
            raise ValueError(f"line unit price cannot be negative: {unit_price}")
        size = data.get("size")
        if size is not None and size not in PRODUCT_SIZES:
            raise ValueError(f"unknown size: {size}")
        return cls(
            product_id=data.get("product_id"),
            size=size,
            quantity=quantity,
            unit_price=unit_price,
        )


@dataclass
class OrderSummary:
    subtotal: int | None
    shipping_estimate: int | None
    tax_estimate: int | None
    total: int | None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "OrderSummary | None":
        if not data:
            return None
        if not isinstance(data, dict):
            raise TypeError("order summary must be a mapping")

        def _amount(key: str) -> int | None:
            value = data.get(key)
            return None if value is None else as_whole_number(value, key)

        return cls(
            subtotal=_amount("subtotal"),
            shipping_estimate=_amount("shipping_estimate"),
            tax_estimate=_amount("tax_estimate"),
            total=_amount("total"),
        )


@dataclass
class OrderAggregate:
    order_id: str
    user_id: str | None
    status: str
    payment_status: str
    items: list[OrderLine] = field(default_factory=list)
    summary: OrderSummary | None = None
    shipping_address: dict[str, Any] = field(default_factory=dict)
    payment_info: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    modified_at: datetime | None = None

    @property
    def is_displayable(self) -> bool:
        return bool(self.items) and self.summary is not None and self.summary.total is not None

    @property
    def status_editable(self) -> bool:
        return self.payment_status == "paid"
