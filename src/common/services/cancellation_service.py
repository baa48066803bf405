import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from common.models.bookings import Booking, PaymentStatus
from common.models.cancellations import (
    BookingAction,
    BookingActionLog,
    CancellationQuote,
    CancellationResult,
)
from common.models.users import Actor, UserRole
from common.repository.booking_repo import BookingRepository
from common.schemas.cancellations import CancellationRequest
from common.services import cancellation_policy
from common.utils.currency import format_amount
from common.utils.custom_exceptions import (
    BookingNotCancellable,
    ForbiddenAction,
    NotFoundException,
)

logger = logging.getLogger(__name__)

ACTION_BY_ROLE = {
    UserRole.CUSTOMER: BookingAction.CUSTOMER_CANCELLATION,
    UserRole.AGENT: BookingAction.AGENT_CANCELLATION,
    UserRole.OWNER: BookingAction.OWNER_CANCELLATION,
    UserRole.ADMIN: BookingAction.ADMIN_CANCELLATION,
}


class CancellationService:
    def __init__(self, booking_repo: BookingRepository):
        self.booking_repo = booking_repo

    def preview(
        self, booking_id: str, actor: Actor, now: Optional[datetime] = None
    ) -> Tuple[Booking, CancellationQuote, PaymentStatus]:
        now = now or datetime.now(timezone.utc)
        booking = self._get_cancellable_booking(booking_id, actor)
        quote = cancellation_policy.quote(booking.check_in_date, booking.total_amount, now)
        return booking, quote, cancellation_policy.resulting_payment_status(quote)

    def cancel_booking(
        self,
        booking_id: str,
        actor: Actor,
        req: CancellationRequest,
        now: Optional[datetime] = None,
    ) -> CancellationResult:
        now = now or datetime.now(timezone.utc)
        booking = self._get_cancellable_booking(booking_id, actor)

        quote = cancellation_policy.quote(booking.check_in_date, booking.total_amount, now)
        payment_status = cancellation_policy.resulting_payment_status(quote)

        log = self.booking_repo.apply_cancellation(
            booking=booking,
            quote=quote,
            payment_status=payment_status,
            cancellation_type=req.cancellation_type,
            reason=req.reason,
            actor_id=actor.user_id,
            action=ACTION_BY_ROLE[actor.role],
            cancelled_at=now,
        )
        logger.info(
            f"Booking {booking_id} cancelled by {actor.role.value} {actor.user_id}: "
            f"fee {format_amount(quote.fee_amount)} ({quote.fee_percentage}%), "
            f"refund {format_amount(quote.refund_amount)}"
        )

        return CancellationResult(
            booking_id=booking_id,
            quote=quote,
            payment_status=payment_status,
            cancelled_at=now,
            log=log,
        )

    def get_history(self, booking_id: str, actor: Actor) -> List[BookingActionLog]:
        booking = self._get_booking(booking_id)
        self._authorise(booking, actor)
        return self.booking_repo.get_booking_logs(booking_id)

    def _get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("booking", booking_id, 404)
        return booking

    def _get_cancellable_booking(self, booking_id: str, actor: Actor) -> Booking:
        booking = self._get_booking(booking_id)
        self._authorise(booking, actor)
        if not booking.is_cancellable:
            raise BookingNotCancellable(booking_id, booking.status.value)
        return booking

    @staticmethod
    def _authorise(booking: Booking, actor: Actor):
        if actor.role == UserRole.ADMIN:
            return
        if actor.role == UserRole.CUSTOMER and booking.user_id == actor.user_id:
            return
        if actor.role == UserRole.AGENT and booking.agent_id == actor.user_id:
            return
        if actor.role == UserRole.OWNER and booking.owner_id == actor.user_id:
            return
        raise ForbiddenAction(
            f"{actor.role.value.lower()} '{actor.user_id}' may not manage booking '{booking.booking_id}'"
        )
