import unittest
from decimal import Decimal
from common.utils.currency import format_amount, quantize, to_decimal


class TestCurrency(unittest.TestCase):
    def test_to_decimal_keeps_printed_float_value(self):
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))
        self.assertEqual(to_decimal("12.50"), Decimal("12.50"))

    def test_quantize_half_up(self):
        self.assertEqual(quantize(Decimal("2.345")), Decimal("2.35"))
        self.assertEqual(quantize(Decimal("100.5"), Decimal("1")), Decimal("101"))

    def test_format_amount(self):
        self.assertEqual(format_amount(Decimal("750")), "₹750.00")
        self.assertEqual(format_amount(1234567.891), "₹1,234,567.89")


if __name__ == "__main__":
    unittest.main()
