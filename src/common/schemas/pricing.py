from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from common.models.pricing import ChildPricing, PropertyPricing


class PackageType(str, Enum):
    STAY = "stay"
    DAY_PICNIC = "day_picnic"


class ChildPricingRules(BaseModel):
    free_age_limit: int = Field(default=5, ge=0)
    half_price_age_limit: int = Field(default=10, ge=0)
    half_price_percentage: int = Field(default=50, ge=0, le=100)


class PricingRules(BaseModel):
    base_guests: int = Field(default=2, ge=0)
    extra_adult_charge: Decimal = Field(default=Decimal("0"), ge=0)
    extra_child_charge: Decimal = Field(default=Decimal("0"), ge=0)
    child_pricing: Optional[ChildPricingRules] = None

    def to_property_pricing(self) -> PropertyPricing:
        child_pricing = None
        if self.child_pricing:
            child_pricing = ChildPricing(**self.child_pricing.model_dump())
        return PropertyPricing(
            base_guests=self.base_guests,
            extra_adult_charge=self.extra_adult_charge,
            extra_child_charge=self.extra_child_charge,
            child_pricing=child_pricing,
        )


class PriceBreakdownRequest(BaseModel):
    package_type: PackageType = PackageType.STAY
    property_id: Optional[str] = None
    adults: int = Field(default=1, ge=0)
    coupon_code: Optional[str] = None

    # stays
    nightly_rate: Optional[Decimal] = Field(default=None, ge=0)
    nights: int = Field(default=1, ge=1)
    child_ages: List[int] = Field(default_factory=list)
    pricing: Optional[PricingRules] = None

    # day picnics
    adult_price: Decimal = Field(default=Decimal("0"), ge=0)
    child_price: Decimal = Field(default=Decimal("0"), ge=0)
    children: int = Field(default=0, ge=0)

    @field_validator("child_ages")
    @classmethod
    def validate_child_ages(cls, v: List[int]):
        if any(age < 0 for age in v):
            raise ValueError("Child ages must be non-negative")
        return v

    @field_validator("coupon_code")
    @classmethod
    def blank_coupon_is_none(cls, v: Optional[str]):
        if v is None:
            return None
        return v.strip() or None

    @model_validator(mode="after")
    def stay_needs_rate(self):
        if self.package_type == PackageType.STAY and self.nightly_rate is None:
            raise ValueError("Nightly rate is required for stays")
        return self
