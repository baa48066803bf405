import logging
import os
from boto3 import resource

from common.repository.booking_repo import BookingRepository
from common.services.cancellation_service import CancellationService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import (
    BookingNotCancellable,
    ForbiddenAction,
    InvalidArgument,
    NotFoundException,
)
from common.utils.request_context import get_actor, get_path_parameter

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
cancellation_service = CancellationService(booking_repo=booking_repo)


def get_cancellation_quote(event, context):
    booking_id = get_path_parameter(event, "booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required")

    try:
        actor = get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        booking, quote, payment_status = cancellation_service.preview(booking_id, actor)

        return send_custom_response(
            200,
            quote.policy_message,
            {
                "booking_id": booking.booking_id,
                "check_in_date": booking.check_in_date,
                "status": booking.status.value,
                "payment_status_after_cancellation": payment_status.value,
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
        logger.exception(f"Unhandled error quoting cancellation for {booking_id}")
        return send_custom_response(500, "Internal server error")
