from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class ChildPricing:
    free_age_limit: int = 5
    half_price_age_limit: int = 10
    half_price_percentage: int = 50


@dataclass
class PropertyPricing:
    base_guests: int = 2
    extra_adult_charge: Decimal = Decimal("0")
    extra_child_charge: Decimal = Decimal("0")
    child_pricing: Optional[ChildPricing] = None


@dataclass
class LineItem:
    label: str
    amount: Decimal
    description: Optional[str] = None


@dataclass
class PriceBreakdown:
    base_price: Decimal
    service_fee: Decimal
    cgst: Decimal
    sgst: Decimal
    subtotal: Decimal
    total: Decimal
    nights: int = 0
    extra_guest_charges: Decimal = Decimal("0")
    child_discounts: Decimal = Decimal("0")
    coupon_discount: Decimal = Decimal("0")
    items: List[LineItem] = field(default_factory=list)

    @property
    def gst(self) -> Decimal:
        return self.cgst + self.sgst
