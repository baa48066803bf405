"""Cancellation fee policy.

The fee depends only on how long before check-in the booking is cancelled:

    more than 48h      ->   0%  (free cancellation)
    24h to 48h         ->  25%
    0h to 24h          ->  50%
    at/after check-in  -> 100%  (no refund)

Each band is exclusive at its lower edge, so exactly 48h falls in the 25%
band, exactly 24h in the 50% band and exactly 0h in the 100% band.
The current time is always passed in; nothing here reads the clock.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Tuple

from common.models.bookings import PaymentStatus
from common.models.cancellations import CancellationQuote
from common.utils.constants import (
    CANCELLATION_TIERS,
    PAST_CHECK_IN_FEE_PERCENTAGE,
    PAST_CHECK_IN_MESSAGE,
)
from common.utils.currency import Number, quantize, to_decimal
from common.utils.custom_exceptions import InvalidArgument
from common.utils.datetime_normaliser import hours_between


def fee_tier(time_until_check_in: timedelta) -> Tuple[int, str]:
    for threshold_hours, percentage, message in CANCELLATION_TIERS:
        if time_until_check_in > timedelta(hours=threshold_hours):
            return percentage, message
    return PAST_CHECK_IN_FEE_PERCENTAGE, PAST_CHECK_IN_MESSAGE


def quote(check_in_date: datetime, total_amount: Number, now: datetime) -> CancellationQuote:
    """Price a cancellation of a booking worth ``total_amount``.

    Raises:
        InvalidArgument: if the amount is negative or not finite, or if either
            datetime is naive.
    """
    total = to_decimal(total_amount)
    if not total.is_finite() or total < 0:
        raise InvalidArgument(f"total_amount must be a non-negative number, got {total_amount}")

    try:
        hours = hours_between(now, check_in_date)
    except ValueError as err:
        raise InvalidArgument(str(err)) from err

    percentage, message = fee_tier(check_in_date - now)

    if percentage == PAST_CHECK_IN_FEE_PERCENTAGE:
        fee = total
    else:
        fee = min(quantize(total * Decimal(percentage) / Decimal(100)), total)

    return CancellationQuote(
        total_amount=total,
        fee_amount=fee,
        fee_percentage=percentage,
        refund_amount=total - fee,
        policy_message=message,
        hours_until_check_in=hours,
    )


def resulting_payment_status(cancellation_quote: CancellationQuote) -> PaymentStatus:
    if cancellation_quote.fee_amount >= cancellation_quote.total_amount:
        # covers a zero-value booking too: nothing is owed back
        return PaymentStatus.COMPLETED
    if cancellation_quote.fee_amount == 0:
        return PaymentStatus.REFUNDED
    return PaymentStatus.PARTIALLY_REFUNDED
