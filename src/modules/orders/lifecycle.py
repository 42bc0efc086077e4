"""Order status state machine.

``check_transition`` is a pure function: given the current and the
requested status it either returns what the service must do or raises
``InvalidOrderStatus``.

Rules, checked in this order:

1. CANCELLED is terminal: every update is rejected.
2. DELIVERED is terminal: DELIVERED -> DELIVERED is a no-op, anything
   else is rejected.
3. Requesting the current status is an idempotent no-op.
4. PENDING is only ever set by order creation.
5. CANCELLED as a target is routed to the cancellation protocol, which
   restores stock (and only accepts PENDING orders).
6. Every other pair is applied as-is.
"""

from __future__ import annotations

import enum

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import InvalidOrderStatus, InvalidStatusValue


class Transition(enum.Enum):
    APPLY = "apply"
    NOOP = "noop"
    CANCEL = "cancel"


def parse_status(value: str) -> OrderStatus:
    """Normalise user input (case-insensitive) into an ``OrderStatus``."""
    try:
        return OrderStatus(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(OrderStatus.values)
        raise InvalidStatusValue(
            f"Unknown order status '{value}'. Expected one of: {allowed}."
        ) from None


def check_transition(current: str, target: str) -> Transition:
    if current == OrderStatus.CANCELLED:
        raise InvalidOrderStatus("Cannot update status of cancelled order.")

    if current == OrderStatus.DELIVERED:
        if target == OrderStatus.DELIVERED:
            return Transition.NOOP
        raise InvalidOrderStatus("Cannot change status of delivered order.")

    if target == current:
        return Transition.NOOP

    if target == OrderStatus.PENDING:
        raise InvalidOrderStatus(
            f"Cannot move order from {current} back to {OrderStatus.PENDING}."
        )

    if target == OrderStatus.CANCELLED:
        return Transition.CANCEL

    return Transition.APPLY


def ensure_cancellable(current: str) -> None:
    if current != OrderStatus.PENDING:
        raise InvalidOrderStatus(
            f"Only pending orders can be cancelled (current status: {current})."
        )


def ensure_deletable(current: str) -> None:
    if current == OrderStatus.PENDING:
        raise InvalidOrderStatus("Cannot delete pending orders.")
