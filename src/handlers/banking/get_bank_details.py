import logging
import os
from boto3 import resource

from common.repository.bank_details_repo import BankDetailsRepository
from common.services.banking_service import BankingService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import ForbiddenAction, NotFoundException
from common.utils.request_context import get_actor, get_path_parameter

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

bank_details_repo = BankDetailsRepository(table)
banking_service = BankingService(bank_details_repo=bank_details_repo)


def get_bank_details(event, context):
    try:
        actor = get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    owner_id = get_path_parameter(event, "owner_id") or actor.user_id

    try:
        details = banking_service.get_bank_details(owner_id, actor)
        return send_custom_response(200, "Bank details fetched successfully", details)

    except NotFoundException as err:
        return send_custom_response(err.status_code, str(err))

    except ForbiddenAction as err:
        return send_custom_response(403, str(err))

    except Exception:
        logger.exception(f"Unhandled error fetching bank details for owner {owner_id}")
        return send_custom_response(500, "Internal server error")
