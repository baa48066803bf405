import logging
import os
from boto3 import resource

from common.repository.booking_repo import BookingRepository
from common.services.cancellation_service import CancellationService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import ForbiddenAction, NotFoundException
from common.utils.request_context import get_actor, get_path_parameter

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

booking_repo = BookingRepository(table)
cancellation_service = CancellationService(booking_repo=booking_repo)


def get_booking_history(event, context):
    booking_id = get_path_parameter(event, "booking_id")
    if not booking_id:
        return send_custom_response(400, "booking_id is required")

    try:
        actor = get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        logs = cancellation_service.get_history(booking_id, actor)

        result = []
        for log in logs:
            result.append({
                "log_id": log.log_id,
                "actor_id": log.actor_id,
                "action": log.action.value,
                "reason": log.reason,
                "metadata": log.metadata,
                "created_at": log.created_at,
            })

        return send_custom_response(
            200,
            "Booking history retrieved successfully",
            {
                "count": len(result),
                "logs": result,
            },
        )

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except ForbiddenAction as err:
        return send_custom_response(403, str(err))

    except Exception:
        logger.exception(f"Unhandled error retrieving history for {booking_id}")
        return send_custom_response(500, "Internal server error")
