import logging
import os
from boto3 import resource

from common.repository.coupon_repo import CouponRepository
from common.schemas.coupons import ApplyCouponRequest
from common.services.coupon_service import CouponService, calculate_discount
from common.utils.constants import DEFAULT_REGION
from common.utils.currency import format_amount
from common.utils.custom_response import send_custom_response
from common.utils.request_context import get_actor
from pydantic import ValidationError

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

coupon_repo = CouponRepository(table)
coupon_service = CouponService(coupon_repo=coupon_repo)


def apply_coupon(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = ApplyCouponRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        coupon = coupon_service.validate_coupon(
            request_body.code, request_body.property_id
        )
        if coupon is None:
            return send_custom_response(404, "Invalid or expired coupon code")

        if request_body.amount < coupon.min_order_amount:
            return send_custom_response(
                400,
                f"Minimum order amount for this coupon is {format_amount(coupon.min_order_amount)}",
            )
        discount = calculate_discount(coupon, request_body.amount)

        return send_custom_response(
            200,
            f"Coupon applied. You save {format_amount(discount)}",
            {
                "code": coupon.code,
                "description": coupon.description,
                "discount": discount,
                "amount_after_discount": request_body.amount - discount,
            },
        )

    except Exception:
        logger.exception("Unhandled error applying coupon")
        return send_custom_response(500, "Internal server error")
