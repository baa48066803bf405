"""Guest-based price breakdowns for stays and day-picnic packages.

Service fee and both GST halves are charged on the base price and rounded to
whole currency units. Coupons never push the pre-tax amount below zero; GST is
always added on top.
"""

from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from common.models.coupons import Coupon
from common.models.pricing import LineItem, PriceBreakdown, PropertyPricing
from common.services.coupon_service import calculate_discount
from common.utils.constants import CGST_RATE, SERVICE_FEE_RATE, SGST_RATE
from common.utils.currency import Number, format_amount, quantize, to_decimal
from common.utils.custom_exceptions import InvalidArgument

WHOLE_UNIT = Decimal("1")


def _fees_and_taxes(base: Decimal) -> Tuple[Decimal, Decimal, Decimal, List[LineItem]]:
    service_fee = quantize(base * SERVICE_FEE_RATE, WHOLE_UNIT)
    cgst = quantize(base * CGST_RATE, WHOLE_UNIT)
    sgst = quantize(base * SGST_RATE, WHOLE_UNIT)
    items = [
        LineItem("Service fee", service_fee, "10% of room rate"),
        LineItem("CGST", cgst, "9% of room rate"),
        LineItem("SGST", sgst, "9% of room rate"),
        LineItem("GST", cgst + sgst, "Total GST"),
    ]
    return service_fee, cgst, sgst, items


def _check_guests(adults: int, children: int):
    if adults < 0 or children < 0:
        raise InvalidArgument("guest counts must be non-negative")


def price_stay(
    nightly_rate: Number,
    nights: int,
    adults: int,
    child_ages: Sequence[int] = (),
    pricing: Optional[PropertyPricing] = None,
    coupon: Optional[Coupon] = None,
) -> PriceBreakdown:
    if nights < 1:
        raise InvalidArgument("a stay must be at least one night")
    _check_guests(adults, len(child_ages))

    rate = to_decimal(nightly_rate)
    base = rate * nights
    service_fee, cgst, sgst, fee_items = _fees_and_taxes(base)
    items = [
        LineItem(
            f"Room rate ({nights} night{'s' if nights > 1 else ''})",
            base,
            f"{format_amount(rate)}/night",
        ),
        *fee_items,
    ]

    extra_guest_charges = Decimal("0")
    child_discounts = Decimal("0")

    if pricing:
        total_guests = adults + len(child_ages)
        if total_guests > pricing.base_guests:
            # extra adults are counted first, children fill the remainder
            extra_guests = total_guests - pricing.base_guests
            extra_adults = max(0, adults - pricing.base_guests)
            extra_children = max(0, extra_guests - extra_adults)

            if extra_adults and pricing.extra_adult_charge:
                amount = extra_adults * pricing.extra_adult_charge * nights
                extra_guest_charges += amount
                items.append(LineItem(
                    f"Extra adults ({extra_adults})",
                    amount,
                    f"{format_amount(pricing.extra_adult_charge)}/adult/night",
                ))
            if extra_children and pricing.extra_child_charge:
                amount = extra_children * pricing.extra_child_charge * nights
                extra_guest_charges += amount
                items.append(LineItem(
                    f"Extra children ({extra_children})",
                    amount,
                    f"{format_amount(pricing.extra_child_charge)}/child/night",
                ))

        child_pricing = pricing.child_pricing
        if child_pricing:
            for index, age in enumerate(child_ages, start=1):
                label = f"Child {index} (Age {age})"
                if age <= child_pricing.free_age_limit:
                    items.append(LineItem(label, Decimal("0"), "Free"))
                elif age <= child_pricing.half_price_age_limit:
                    discount = base * (100 - child_pricing.half_price_percentage) / Decimal(100)
                    child_discounts += discount
                    items.append(LineItem(
                        label, -discount, f"{child_pricing.half_price_percentage}% discount"
                    ))

    subtotal = base + service_fee + extra_guest_charges - child_discounts
    coupon_discount = _apply_coupon(coupon, subtotal, items)

    return PriceBreakdown(
        base_price=base,
        service_fee=service_fee,
        cgst=cgst,
        sgst=sgst,
        subtotal=subtotal,
        total=max(Decimal("0"), subtotal - coupon_discount) + cgst + sgst,
        nights=nights,
        extra_guest_charges=extra_guest_charges,
        child_discounts=child_discounts,
        coupon_discount=coupon_discount,
        items=items,
    )


def price_day_picnic(
    adult_price: Number,
    child_price: Number,
    adults: int,
    children: int = 0,
    coupon: Optional[Coupon] = None,
    per_person: bool = True,
) -> PriceBreakdown:
    _check_guests(adults, children)

    base = to_decimal(adult_price) * adults + to_decimal(child_price) * children
    service_fee, cgst, sgst, fee_items = _fees_and_taxes(base)
    label = f"Package rate ({adults + children} guests)" if per_person else "Package rate"
    items = [LineItem(label, base, "Day Picnic Package"), *fee_items]

    subtotal = base + service_fee
    # package coupons are computed on the package rate alone
    coupon_discount = _apply_coupon(coupon, base, items)

    return PriceBreakdown(
        base_price=base,
        service_fee=service_fee,
        cgst=cgst,
        sgst=sgst,
        subtotal=subtotal,
        total=max(Decimal("0"), subtotal - coupon_discount) + cgst + sgst,
        coupon_discount=coupon_discount,
        items=items,
    )


def _apply_coupon(coupon: Optional[Coupon], amount: Decimal, items: List[LineItem]) -> Decimal:
    if coupon is None:
        return Decimal("0")
    discount = calculate_discount(coupon, max(Decimal("0"), amount))
    items.append(LineItem(f"Coupon ({coupon.code})", -discount, coupon.description))
    return discount
