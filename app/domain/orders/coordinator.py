"""Admin order updates: load, decide, write payment then status, refresh.

The coordinator re-reads the order on every call and never trusts prior
client state. Writes are issued one after another and each is committed
before the next; nothing is rolled back if a later step fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.core.errors import OrderNotFoundError, ValidationRejectedError
from app.core.security import ADMIN_ROLE, Principal, Role, require_role
from app.domain.orders.listing import OrderListQuery, OrderPage, refresh
from app.domain.orders.transitions import AuthorizedWrite, Decision, decide
from app.persistence.repositories import OrderRepository

logger = logging.getLogger(__name__)


@dataclass
class OrderUpdateResult:
    order_id: str
    status: str
    payment_status: str
    writes: tuple[AuthorizedWrite, ...]
    listing: OrderPage | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "order_id": self.order_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "writes": [{"field": w.field, "value": w.value} for w in self.writes],
        }
        if self.listing is not None:
            payload["listing"] = self.listing.to_dict()
        return payload


class OrderUpdateCoordinator:
    def __init__(self, repository: OrderRepository, required_role: Role = ADMIN_ROLE):
        self.repository = repository
        self.required_role = required_role

    def apply(
        self,
        principal: Principal,
        order_id: str,
        requested_payment_status: str | None = None,
        requested_status: str | None = None,
        view: OrderListQuery | None = None,
    ) -> OrderUpdateResult:
        view = view or OrderListQuery()
        # A bad view must fail before any write is issued.
        view.validate()
        result = self._update(principal, order_id, requested_payment_status, requested_status)
        result.listing = refresh(self.repository, view)
        return result

    def update_payment_status(self, principal: Principal, order_id: str, value: str) -> OrderUpdateResult:
        return self._update(principal, order_id, requested_payment_status=value, requested_status=None)

    def update_order_status(self, principal: Principal, order_id: str, value: str) -> OrderUpdateResult:
        return self._update(principal, order_id, requested_payment_status=None, requested_status=value)

    def _update(
        self,
        principal: Principal,
        order_id: str,
        requested_payment_status: str | None,
        requested_status: str | None,
    ) -> OrderUpdateResult:
        require_role(principal, self.required_role)

        current = self.repository.find_by_id(order_id)
        if current is None:
            raise OrderNotFoundError(order_id)

        decision = decide(current, requested_payment_status, requested_status)
        self._log_decision(principal, current.order_id, decision)
        if decision.rejected:
            raise ValidationRejectedError(decision.rejection_reason)

        status = current.status
        payment_status = current.payment_status
        for write in decision.writes:
            self.repository.update_one(order_id, write.as_fields())
            if write.field == "payment_status":
                payment_status = write.value
            else:
                status = write.value

        return OrderUpdateResult(
            order_id=order_id,
            status=status,
            payment_status=payment_status,
            writes=decision.writes,
        )

    @staticmethod
    def _log_decision(principal: Principal, order_id: str, decision: Decision) -> None:
        if decision.rejected:
            logger.info(
                "order update rejected: order_id=%s principal=%s reason=%s",
                order_id,
                principal.id,
                decision.rejection_reason,
            )
        elif decision.is_noop:
            logger.info("order update is a no-op: order_id=%s principal=%s", order_id, principal.id)
        else:
            logger.info(
                "order update authorized: order_id=%s principal=%s writes=%s",
                order_id,
                principal.id,
                ",".join(f"{w.field}={w.value}" for w in decision.writes),
            )
