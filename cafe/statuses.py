"""Order, payment and role enumerations plus the kitchen transition table."""

from enum import Enum
from typing import Dict, Optional


class UserRole(str, Enum):
    CUSTOMER = "customer"
    KITCHEN_STAFF = "kitchen_staff"


class OrderStatus(str, Enum):
    """Lifecycle states an order moves through in the kitchen."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class PaymentType(str, Enum):
    PREPAYMENT = "prepayment"
    FULL_PAYMENT = "full_payment"


# Single forward step offered by the kitchen dashboard.
STATUS_FLOW: Dict[str, str] = {
    OrderStatus.PENDING.value: OrderStatus.PREPARING.value,
    OrderStatus.PREPARING.value: OrderStatus.READY.value,
    OrderStatus.READY.value: OrderStatus.COMPLETED.value,
}

FINISHED_STATUSES = (OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value)


def next_status(current: str) -> Optional[str]:
    """Return the status following ``current``, or ``None`` at the end of the flow."""
    return STATUS_FLOW.get(current)


def is_finished(status: str) -> bool:
    return status in FINISHED_STATUSES


def payment_amount(total: int, payment_type: PaymentType) -> int:
    """Split ``total`` into a floored half for prepayment and the remainder."""
    prepayment = total // 2
    if payment_type == PaymentType.PREPAYMENT:
        return prepayment
    return total - prepayment


def payment_status_after(payment_type: PaymentType) -> str:
    if payment_type == PaymentType.PREPAYMENT:
        return PaymentStatus.PARTIALLY_PAID.value
    return PaymentStatus.PAID.value
