from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from common.utils.constants import CURRENCY_PRECISION, CURRENCY_SYMBOL

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so floats keep their printed value, not their binary one
    return Decimal(str(value))


def quantize(value: Number, precision: Decimal = CURRENCY_PRECISION) -> Decimal:
    return to_decimal(value).quantize(precision, rounding=ROUND_HALF_UP)


def format_amount(value: Number) -> str:
    return f"{CURRENCY_SYMBOL}{quantize(value):,.2f}"
