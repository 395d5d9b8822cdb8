"""Orders and Users collection contracts over a SQLAlchemy session.

Every storage failure leaves this module as ``PersistenceError``.
"""

from __future__ import annotations

import logging

from sqlalchemy import desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.utils import now_utc
from app.core.errors import OrderNotFoundError, PersistenceError
from app.persistence.models import OrderModel, ProductModel, UserModel

logger = logging.getLogger(__name__)

UPDATABLE_ORDER_FIELDS = {"status", "payment_status"}


class OrderRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, order_id: str) -> OrderModel | None:
        try:
            return self.session.get(OrderModel, order_id, populate_existing=True)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to load order {order_id}") from exc

    def update_one(self, order_id: str, fields: dict[str, str]) -> None:
        unknown = set(fields) - UPDATABLE_ORDER_FIELDS
        if unknown:
            raise ValueError(f"fields not updatable: {', '.join(sorted(unknown))}")

        stmt = (
            update(OrderModel)
            .where(OrderModel.order_id == order_id)
            .values(**fields, modified_at=now_utc())
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                self.session.rollback()
                raise OrderNotFoundError(order_id)
            # Commit per write so the next write is issued against durable state.
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("order write failed: order_id=%s fields=%s err=%s", order_id, fields, exc)
            raise PersistenceError(f"failed to update order {order_id}") from exc

    def find_paginated(self, page: int, limit: int) -> tuple[list[OrderModel], int]:
        offset = (page - 1) * limit
        stmt = (
            select(OrderModel)
            .order_by(desc(OrderModel.created_at), OrderModel.order_id)
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        try:
            total = int(self.session.scalar(select(func.count()).select_from(OrderModel)) or 0)
            rows = list(self.session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise PersistenceError("failed to list orders") from exc
        return rows, total

    def find_by_status(self, status: str) -> list[OrderModel]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.status == status)
            .order_by(desc(OrderModel.created_at), OrderModel.order_id)
            .execution_options(populate_existing=True)
        )
        try:
            return list(self.session.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to list orders with status {status}") from exc

    def add(self, order: OrderModel) -> OrderModel:
        now = now_utc()
        if order.created_at is None:
            order.created_at = now
        if order.modified_at is None:
            order.modified_at = order.created_at
        try:
            self.session.add(order)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("failed to insert order") from exc
        return order


class UserRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, user_id: str) -> UserModel | None:
        try:
            return self.session.get(UserModel, user_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"failed to load user {user_id}") from exc

    def add(self, user: UserModel) -> UserModel:
        now = now_utc()
        if user.created_at is None:
            user.created_at = now
        if user.modified_at is None:
            user.modified_at = user.created_at
        try:
            self.session.add(user)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("failed to insert user") from exc
        return user


class ProductRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_many(self, product_ids: set[str]) -> dict[str, ProductModel]:
        if not product_ids:
            return {}
        try:
            rows = self.session.scalars(
                select(ProductModel).where(ProductModel.product_id.in_(product_ids))
            ).all()
        except SQLAlchemyError as exc:
            raise PersistenceError("failed to load products") from exc
        return {row.product_id: row for row in rows}

    def add(self, product: ProductModel) -> ProductModel:
        now = now_utc()
        if product.created_at is None:
            product.created_at = now
        if product.modified_at is None:
            product.modified_at = product.created_at
        try:
            self.session.add(product)
            self.session.flush()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError("failed to insert product") from exc
        return product
