from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Coupon:
    code: str
    discount_type: DiscountType
    discount_value: Decimal
    min_order_amount: Decimal = Decimal("0")
    description: Optional[str] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    status: CouponStatus = CouponStatus.ACTIVE
    property_ids: List[str] = field(default_factory=list)
