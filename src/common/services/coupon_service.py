import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from common.models.coupons import Coupon, CouponStatus, DiscountType
from common.repository.coupon_repo import CouponRepository
from common.utils.currency import Number, quantize, to_decimal
from common.utils.custom_exceptions import InvalidArgument

logger = logging.getLogger(__name__)


def calculate_discount(coupon: Coupon, total_amount: Number) -> Decimal:
    total = to_decimal(total_amount)
    if total < 0:
        raise InvalidArgument(f"total_amount must be non-negative, got {total_amount}")
    if total < coupon.min_order_amount:
        return Decimal("0.00")

    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = total * coupon.discount_value / Decimal(100)
    else:
        discount = coupon.discount_value
    return quantize(min(discount, total))


class CouponService:
    def __init__(self, coupon_repo: CouponRepository):
        self.coupon_repo = coupon_repo

    def validate_coupon(
        self,
        code: str,
        property_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[Coupon]:
        if not code or not code.strip():
            return None
        now = now or datetime.now(timezone.utc)

        coupon = self.coupon_repo.get_by_code(code)
        if coupon is None or coupon.status != CouponStatus.ACTIVE:
            logger.info(f"Coupon not found or inactive: {code}")
            return None

        if coupon.property_ids and property_id and property_id not in coupon.property_ids:
            logger.info(f"Coupon {coupon.code} not valid for property {property_id}")
            return None

        if coupon.valid_from and now < coupon.valid_from:
            return None
        if coupon.valid_to and now > coupon.valid_to:
            return None

        return coupon
