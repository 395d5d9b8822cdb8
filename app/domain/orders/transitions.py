"""Payment-before-status gate for admin order updates.

``decide`` is a pure function of the persisted order state and the requested
changes; it never touches storage.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from app.domain.orders.aggregates import ORDER_STATUSES, PAYMENT_STATUSES

PAYMENT_REQUIRED_REASON = "payment must be paid before status change"

WriteField = Literal["payment_status", "status"]


class HasOrderState(Protocol):
    status: str
    payment_status: str


@dataclass(frozen=True)
class AuthorizedWrite:
    field: WriteField
    value: str

    def as_fields(self) -> dict[str, str]:
        return {self.field: self.value}


@dataclass(frozen=True)
class Decision:
    writes: tuple[AuthorizedWrite, ...] = ()
    rejection_reason: str | None = None
    effective_payment_status: str | None = None

    @property
    def rejected(self) -> bool:
        return self.rejection_reason is not None

    @property
    def is_noop(self) -> bool:
        return not self.rejected and not self.writes


def _reject(reason: str, effective_payment_status: str | None = None) -> Decision:
    return Decision(writes=(), rejection_reason=reason, effective_payment_status=effective_payment_status)


def decide(
    current: HasOrderState,
    requested_payment_status: str | None = None,
    requested_status: str | None = None,
) -> Decision:
    # An empty form value means the field was left alone.
    requested_payment_status = requested_payment_status or None
    requested_status = requested_status or None

    if requested_payment_status is not None and requested_payment_status not in PAYMENT_STATUSES:
        return _reject(f"unknown payment status: {requested_payment_status}")
    if requested_status is not None and requested_status not in ORDER_STATUSES:
        return _reject(f"unknown order status: {requested_status}")

    payment_changed = (
        requested_payment_status is not None and requested_payment_status != current.payment_status
    )
    status_changed = requested_status is not None and requested_status != current.status
    effective = requested_payment_status if payment_changed else current.payment_status

    # Cancellation is gated like every other target status.
    if status_changed and effective != "paid":
        return _reject(PAYMENT_REQUIRED_REASON, effective_payment_status=effective)

    writes: list[AuthorizedWrite] = []
    if payment_changed:
        writes.append(AuthorizedWrite(field="payment_status", value=requested_payment_status))
    if status_changed:
        writes.append(AuthorizedWrite(field="status", value=requested_status))
    return Decision(writes=tuple(writes), effective_payment_status=effective)
