from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from common.models.bookings import PaymentStatus
from common.utils.currency import quantize


class CancellationType(str, Enum):
    PERSONAL_REASON = "personal_reason"
    TRAVEL_RESTRICTION = "travel_restriction"
    EMERGENCY = "emergency"
    FOUND_BETTER_OPTION = "found_better_option"
    PROPERTY_ISSUE = "property_issue"
    OTHER = "other"


class BookingAction(str, Enum):
    CUSTOMER_CANCELLATION = "customer_cancellation"
    AGENT_CANCELLATION = "agent_cancellation"
    OWNER_CANCELLATION = "owner_cancellation"
    ADMIN_CANCELLATION = "admin_cancellation"


@dataclass(frozen=True)
class CancellationQuote:
    total_amount: Decimal
    fee_amount: Decimal
    fee_percentage: int
    refund_amount: Decimal
    policy_message: str
    hours_until_check_in: float

    def to_dict(self) -> dict:
        return {
            "total_amount": quantize(self.total_amount),
            "cancellation_fee": quantize(self.fee_amount),
            "cancellation_percentage": self.fee_percentage,
            "refund_amount": quantize(self.refund_amount),
            "policy_message": self.policy_message,
            "hours_until_check_in": round(self.hours_until_check_in, 2),
        }


@dataclass
class BookingActionLog:
    log_id: str
    booking_id: str
    actor_id: str
    action: BookingAction
    reason: str
    metadata: dict = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class CancellationResult:
    booking_id: str
    quote: CancellationQuote
    payment_status: PaymentStatus
    cancelled_at: datetime
    log: Optional[BookingActionLog] = None
