import logging
import os
from dataclasses import asdict
from boto3 import resource

from common.repository.coupon_repo import CouponRepository
from common.schemas.pricing import PackageType, PriceBreakdownRequest
from common.services.coupon_service import CouponService
from common.services.pricing_service import price_day_picnic, price_stay
from common.utils.constants import DEFAULT_REGION
from common.utils.currency import format_amount
from common.utils.custom_response import send_custom_response
from common.utils.custom_exceptions import InvalidArgument
from common.utils.request_context import get_actor
from pydantic import ValidationError

logger = logging.getLogger(__name__)

TABLE_NAME = os.environ.get("TABLE_NAME")
AWS_REGION = os.environ.get("AWS_REGION", DEFAULT_REGION)

dynamodb = resource("dynamodb", region_name=AWS_REGION)
table = dynamodb.Table(TABLE_NAME)

coupon_repo = CouponRepository(table)
coupon_service = CouponService(coupon_repo=coupon_repo)


def get_price_breakdown(event, context):
    if not event.get("body"):
        return send_custom_response(400, "Request body is required")

    try:
        request_body = PriceBreakdownRequest.model_validate_json(event["body"])
    except ValidationError as e:
        formatted = "; ".join(f"{err['msg']}" for err in e.errors())
        return send_custom_response(400, formatted)

    try:
        get_actor(event)
    except KeyError:
        return send_custom_response(401, "Unauthorized")

    try:
        coupon = None
        if request_body.coupon_code:
            coupon = coupon_service.validate_coupon(
                request_body.coupon_code, request_body.property_id
            )
            if coupon is None:
                return send_custom_response(404, "Invalid or expired coupon code")

        if request_body.package_type == PackageType.DAY_PICNIC:
            breakdown = price_day_picnic(
                request_body.adult_price,
                request_body.child_price,
                request_body.adults,
                request_body.children,
                coupon=coupon,
            )
        else:
            pricing = request_body.pricing.to_property_pricing() if request_body.pricing else None
            breakdown = price_stay(
                request_body.nightly_rate,
                request_body.nights,
                request_body.adults,
                request_body.child_ages,
                pricing=pricing,
                coupon=coupon,
            )

        return send_custom_response(
            200,
            f"Total payable {format_amount(breakdown.total)}",
            {**asdict(breakdown), "gst": breakdown.gst},
        )

    except InvalidArgument as err:
        return send_custom_response(400, str(err))

    except Exception:
        logger.exception("Unhandled error pricing booking")
        return send_custom_response(500, "Internal server error")
