import logging
import os
from boto3 import resource

from common.repository.booking_repo import BookingRepository
from common.schemas.cancellations import CancellationRequest
from common.services.cancellation_service import CancellationService
from common.utils.constants import DEFAULT_REGION
from common.utils.currency import format_amount
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import (
    BookingNotCancellable,
    ForbiddenAction,
    InvalidArgument,
    NotFoundException,
)
from common.utils.request_context import get_actor, get_path_parameter
from pydantic import ValidationError

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
cancellation_service = CancellationService(booking_repo=booking_repo)


def cancel_booking(event, context):
    booking_id = get_path_parameter(event, "booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required")

    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = CancellationRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        actor = get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        result = cancellation_service.cancel_booking(booking_id, actor, request_body)

        quote = result.quote
        if quote.refund_amount > 0:
            message = (
                f"Booking cancelled. Refund of {format_amount(quote.refund_amount)} "
                "will be processed within 5-7 business days."
            )
        else:
            message = "Booking cancelled. No refund applicable."

        return send_custom_response(
            200,
            message,
            {
                "booking_id": result.booking_id,
                "status": "cancelled",
                "payment_status": result.payment_status.value,
                "cancelled_at": result.cancelled_at,
                **quote.to_dict(),
            },
        )

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except ForbiddenAction as err:
        return send_custom_response(403, str(err))

    except BookingNotCancellable as err:
        return send_custom_response(409, str(err))

    except InvalidArgument as err:
        return send_custom_response(400, str(err))

    except Exception:
        logger.exception(f"Unhandled error cancelling booking {booking_id}")
        return send_custom_response(500, "Internal server error")
