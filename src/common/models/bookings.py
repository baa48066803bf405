from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


CANCELLABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


@dataclass
class Booking:
    booking_id: str
    user_id: str
    property_id: str
    check_in_date: datetime
    check_out_date: datetime
    total_amount: Decimal
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING

    agent_id: Optional[str] = None
    owner_id: Optional[str] = None

    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    booking_details: dict = field(default_factory=dict)

    booked_at: Optional[datetime] = None

    @property
    def is_cancellable(self) -> bool:
        return self.status in CANCELLABLE_STATUSES
