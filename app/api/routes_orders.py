from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import OrderNotFoundError
from app.core.security import Principal, get_admin
from app.domain.orders.aggregates import ORDER_STATUSES, PAYMENT_STATUSES
from app.domain.orders.coordinator import OrderUpdateCoordinator
from app.domain.orders.listing import OrderListQuery, list_orders, list_orders_by_status
from app.domain.orders.projections import order_detail_view, order_from_row
from app.persistence.pg import get_session
from app.persistence.repositories import OrderRepository, ProductRepository, UserRepository

router = APIRouter(prefix="/admin/orders", tags=["orders"])

OrderStatus = Literal["pending", "confirmed", "shipping", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed"]


class ViewState(BaseModel):
    status: OrderStatus | None = None
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)

    def to_query(self) -> OrderListQuery:
        return OrderListQuery(
            status=self.status,
            page=self.page,
            limit=self.limit or get_settings().default_page_limit,
        )


class OrderUpdateRequest(BaseModel):
    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    view: ViewState = Field(default_factory=ViewState)


class PaymentStatusUpdateRequest(BaseModel):
    payment_status: PaymentStatus


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus


@router.get("")
def get_orders(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    _: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    try:
        result = list_orders(OrderRepository(session), page, limit or get_settings().default_page_limit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.to_dict()


@router.get("/search")
def search_orders(
    status: OrderStatus = Query(...),
    _: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    return list_orders_by_status(OrderRepository(session), status).to_dict()


@router.get("/options")
def get_order_options(_: Principal = Depends(get_admin)):
    return {
        "status_options": list(ORDER_STATUSES),
        "payment_status_options": list(PAYMENT_STATUSES),
    }


@router.get("/{order_id}")
def get_order(
    order_id: str,
    _: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    row = OrderRepository(session).find_by_id(order_id)
    if row is None:
        raise OrderNotFoundError(order_id)
    try:
        order = order_from_row(row)
    except (KeyError, TypeError, ValueError) as exc:
        raise HTTPException(status_code=409, detail=f"order {order_id} is malformed: {exc}") from exc

    customer = UserRepository(session).find_by_id(order.user_id) if order.user_id else None
    products = ProductRepository(session).find_many({i.product_id for i in order.items if i.product_id})
    return order_detail_view(order, customer=customer, products=products)


@router.patch("/{order_id}")
def update_order(
    order_id: str,
    request: OrderUpdateRequest,
    principal: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    result = OrderUpdateCoordinator(OrderRepository(session)).apply(
        principal,
        order_id,
        requested_payment_status=request.payment_status,
        requested_status=request.status,
        view=request.view.to_query(),
    )
    return result.to_dict()


@router.put("/{order_id}/payment")
def update_payment_status(
    order_id: str,
    request: PaymentStatusUpdateRequest,
    principal: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    result = OrderUpdateCoordinator(OrderRepository(session)).update_payment_status(
        principal, order_id, request.payment_status
    )
    return result.to_dict()


@router.put("/{order_id}/status")
def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    principal: Principal = Depends(get_admin),
    session: Session = Depends(get_session),
):
    result = OrderUpdateCoordinator(OrderRepository(session)).update_order_status(
        principal, order_id, request.status
    )
    return result.to_dict()
