import logging
import os
from boto3 import resource

from common.repository.bank_details_repo import BankDetailsRepository
from common.schemas.banking import BankDetailsRequest
from common.services.banking_service import BankingService
from common.utils.constants import DEFAULT_REGION
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import ForbiddenAction
from common.utils.request_context import get_actor, get_path_parameter
from pydantic import ValidationError

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

bank_details_repo = BankDetailsRepository(table)
banking_service = BankingService(bank_details_repo=bank_details_repo)


def save_bank_details(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = BankDetailsRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        actor = get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    # owners save their own details; admins pass the owner in the path
    owner_id = get_path_parameter(event, "owner_id") or actor.user_id

    try:
        details = banking_service.save_bank_details(owner_id, actor, request_body)
        return send_custom_response(200, "Bank details saved successfully", details)

    except ForbiddenAction as err:
        return send_custom_response(403, str(err))

    except Exception:
        logger.exception(f"Unhandled error saving bank details for owner {owner_id}")
        return send_custom_response(500, "Internal server error")
