from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ApplyCouponRequest(BaseModel):
    code: str = Field(min_length=1, max_length=64)
    amount: Decimal = Field(ge=0)
    property_id: Optional[str] = None
