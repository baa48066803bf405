from decimal import Decimal

# (hours strictly above which the tier applies, fee percentage, message)
CANCELLATION_TIERS = (
    (48, 0, "Free cancellation."),
    (24, 25, "25% cancellation fee."),
    (0, 50, "50% cancellation fee."),
)
PAST_CHECK_IN_FEE_PERCENTAGE = 100
PAST_CHECK_IN_MESSAGE = "No refund (past check-in date)."

CURRENCY_SYMBOL = "₹"
CURRENCY_PRECISION = Decimal("0.01")

SERVICE_FEE_RATE = Decimal("0.10")
CGST_RATE = Decimal("0.09")
SGST_RATE = Decimal("0.09")

DEFAULT_REGION = "ap-south-1"
