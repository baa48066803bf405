import unittest
from datetime import datetime, timezone, timedelta
from decimal import Decimal

from common.models.bookings import PaymentStatus
from common.services.cancellation_policy import (
    fee_tier,
    quote,
    resulting_payment_status,
)
from common.utils.custom_exceptions import InvalidArgument


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def check_in_after(hours: float) -> datetime:
    return NOW + timedelta(hours=hours)


class TestCancellationQuote(unittest.TestCase):

    def test_free_cancellation_72_hours_before(self):
        q = quote(check_in_after(72), Decimal("1000"), NOW)

        self.assertEqual(q.fee_percentage, 0)
        self.assertEqual(q.fee_amount, Decimal("0"))
        self.assertEqual(q.refund_amount, Decimal("1000"))
        self.assertEqual(q.policy_message, "Free cancellation.")

    def test_quarter_fee_36_hours_before(self):
        q = quote(check_in_after(36), Decimal("1000"), NOW)

        self.assertEqual(q.fee_percentage, 25)
        self.assertEqual(q.fee_amount, Decimal("250"))
        self.assertEqual(q.refund_amount, Decimal("750"))
        self.assertEqual(q.policy_message, "25% cancellation fee.")

    def test_half_fee_10_hours_before(self):
        q = quote(check_in_after(10), Decimal("1000"), NOW)

        self.assertEqual(q.fee_percentage, 50)
        self.assertEqual(q.fee_amount, Decimal("500"))
        self.assertEqual(q.refund_amount, Decimal("500"))
        self.assertEqual(q.policy_message, "50% cancellation fee.")

    def test_no_refund_2_hours_after_check_in(self):
        q = quote(check_in_after(-2), Decimal("1000"), NOW)

        self.assertEqual(q.fee_percentage, 100)
        self.assertEqual(q.fee_amount, Decimal("1000"))
        self.assertEqual(q.refund_amount, Decimal("0"))
        self.assertEqual(q.policy_message, "No refund (past check-in date).")
        self.assertAlmostEqual(q.hours_until_check_in, -2.0)

    def test_exactly_48_hours_is_quarter_fee(self):
        self.assertEqual(quote(check_in_after(48), 1000, NOW).fee_percentage, 25)

    def test_just_over_48_hours_is_free(self):
        check_in = check_in_after(48) + timedelta(seconds=1)
        self.assertEqual(quote(check_in, 1000, NOW).fee_percentage, 0)

    def test_exactly_24_hours_is_half_fee(self):
        self.assertEqual(quote(check_in_after(24), 1000, NOW).fee_percentage, 50)

    def test_exactly_at_check_in_is_no_refund(self):
        self.assertEqual(quote(check_in_after(0), 1000, NOW).fee_percentage, 100)

    def test_fee_percentage_never_decreases_as_check_in_approaches(self):
        previous = -1
        hours = 100.0
        while hours >= -10:
            percentage = quote(check_in_after(hours), 1000, NOW).fee_percentage
            self.assertGreaterEqual(percentage, previous)
            previous = percentage
            hours -= 0.5

    def test_fee_and_refund_add_up_to_total(self):
        amounts = ["0", "0.01", "1", "333.33", "999.99", "1000", "12345.67", "0.005"]
        offsets = [100, 48, 30, 24, 5, 0, -24]
        for amount in amounts:
            for offset in offsets:
                q = quote(check_in_after(offset), Decimal(amount), NOW)
                self.assertEqual(q.fee_amount + q.refund_amount, Decimal(amount))
                self.assertLessEqual(q.fee_amount, Decimal(amount))

    def test_fee_rounded_to_currency_precision(self):
        q = quote(check_in_after(30), Decimal("333.33"), NOW)

        self.assertEqual(q.fee_amount, Decimal("83.33"))
        self.assertEqual(q.refund_amount, Decimal("250.00"))

    def test_float_and_int_amounts_accepted(self):
        self.assertEqual(quote(check_in_after(10), 99.9, NOW).fee_amount, Decimal("49.95"))
        self.assertEqual(quote(check_in_after(10), 100, NOW).total_amount, Decimal("100"))

    def test_same_inputs_give_same_quote(self):
        first = quote(check_in_after(30), Decimal("1000"), NOW)
        second = quote(check_in_after(30), Decimal("1000"), NOW)

        self.assertEqual(first, second)

    def test_negative_amount_rejected(self):
        with self.assertRaises(InvalidArgument):
            quote(check_in_after(72), Decimal("-1"), NOW)

    def test_non_finite_amount_rejected(self):
        with self.assertRaises(InvalidArgument):
            quote(check_in_after(72), float("nan"), NOW)

    def test_naive_datetime_rejected(self):
        with self.assertRaises(InvalidArgument):
            quote(datetime(2026, 3, 5), Decimal("1000"), NOW)

    def test_invalid_argument_is_value_error(self):
        with self.assertRaises(ValueError):
            quote(check_in_after(72), -5, NOW)

    def test_to_dict_exposes_breakdown(self):
        data = quote(check_in_after(36), Decimal("1000"), NOW).to_dict()

        self.assertEqual(data["cancellation_fee"], Decimal("250"))
        self.assertEqual(data["refund_amount"], Decimal("750"))
        self.assertEqual(data["cancellation_percentage"], 25)
        self.assertEqual(data["hours_until_check_in"], 36.0)

    def test_to_dict_amounts_share_currency_precision(self):
        for hours in (72, 36, 10, -2):
            data = quote(check_in_after(hours), Decimal("1000"), NOW).to_dict()
            for key in ("total_amount", "cancellation_fee", "refund_amount"):
                self.assertEqual(data[key].as_tuple().exponent, -2, (hours, key))

        full_fee = quote(check_in_after(-2), Decimal("1000"), NOW)
        self.assertEqual(str(full_fee.to_dict()["total_amount"]), "1000.00")
        self.assertEqual(str(full_fee.to_dict()["cancellation_fee"]), "1000.00")
        self.assertEqual(full_fee.fee_amount + full_fee.refund_amount, full_fee.total_amount)


class TestFeeTier(unittest.TestCase):

    def test_tiers(self):
        self.assertEqual(fee_tier(timedelta(days=10))[0], 0)
        self.assertEqual(fee_tier(timedelta(hours=47))[0], 25)
        self.assertEqual(fee_tier(timedelta(minutes=1))[0], 50)
        self.assertEqual(fee_tier(timedelta(0))[0], 100)
        self.assertEqual(fee_tier(timedelta(days=-3))[0], 100)


class TestResultingPaymentStatus(unittest.TestCase):

    def test_free_cancellation_is_refunded(self):
        q = quote(check_in_after(72), Decimal("1000"), NOW)
        self.assertEqual(resulting_payment_status(q), PaymentStatus.REFUNDED)

    def test_partial_fee_is_partially_refunded(self):
        for hours in (36, 10):
            q = quote(check_in_after(hours), Decimal("1000"), NOW)
            self.assertEqual(resulting_payment_status(q), PaymentStatus.PARTIALLY_REFUNDED)

    def test_full_fee_is_completed(self):
        q = quote(check_in_after(-2), Decimal("1000"), NOW)
        self.assertEqual(resulting_payment_status(q), PaymentStatus.COMPLETED)

    def test_zero_value_booking_is_completed(self):
        q = quote(check_in_after(72), Decimal("0"), NOW)
        self.assertEqual(resulting_payment_status(q), PaymentStatus.COMPLETED)


if __name__ == "__main__":
    unittest.main()
