from botocore.exceptions import ClientError
import logging
from decimal import Decimal
from typing import Optional
from common.models.coupons import Coupon, CouponStatus, DiscountType
from common.utils.datetime_normaliser import from_iso_string
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from types_boto3_dynamodb.service_resource import Table
else:
    Table = object


logger = logging.getLogger(__name__)


class CouponRepository:
    def __init__(self, table: Table):
        self.table = table

    def get_by_code(self, code: str) -> Optional[Coupon]:
        # codes are stored upper-cased so lookups are case-insensitive
        normalised = code.strip().upper()
        try:
            response = self.table.get_item(
                Key={"pk": f"COUPON#{normalised}", "sk": "DETAILS"}
            )
        except ClientError as err:
            logger.error(f"Error retrieving coupon {normalised}: {err}")
            raise

        item = response.get("Item")
        if not item:
            return None

        valid_from = item.get("valid_from")
        valid_to = item.get("valid_to")
        return Coupon(
            code=item.get("code", normalised),
            description=item.get("description"),
            discount_type=DiscountType(item["discount_type"]),
            discount_value=Decimal(str(item["discount_value"])),
            min_order_amount=Decimal(str(item.get("min_order_amount", 0))),
            valid_from=from_iso_string(valid_from) if valid_from else None,
            valid_to=from_iso_string(valid_to) if valid_to else None,
            status=CouponStatus(item.get("coupon_status", CouponStatus.ACTIVE.value)),
            property_ids=list(item.get("property_ids") or []),
        )
