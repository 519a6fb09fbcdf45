import unittest
from decimal import Decimal

from apps.orders.pricing import (
    PricingPolicy,
    compute_totals,
    line_total,
    subtotal_of,
    to_money,
)


class ToMoneyTests(unittest.TestCase):
    def test_rounds_half_up_to_cents(self):
        self.assertEqual(to_money(Decimal("1.005")), Decimal("1.01"))
        self.assertEqual(to_money(Decimal("1.004")), Decimal("1.00"))
        self.assertEqual(to_money(Decimal("2.675")), Decimal("2.68"))

    def test_accepts_floats_and_ints_without_binary_drift(self):
        self.assertEqual(to_money(0.1 + 0.2), Decimal("0.30"))
        self.assertEqual(to_money(7), Decimal("7.00"))
        self.assertEqual(to_money("19.999"), Decimal("20.00"))


class LineAndSubtotalTests(unittest.TestCase):
    def test_line_total_multiplies_rounded_unit_price(self):
        self.assertEqual(line_total(Decimal("100.00"), 2), Decimal("200.00"))
        self.assertEqual(line_total("0.333", 3), Decimal("0.99"))

    def test_subtotal_of_empty_is_zero(self):
        self.assertEqual(subtotal_of([]), Decimal("0.00"))

    def test_subtotal_of_sums_lines(self):
        lines = [(Decimal("100.00"), 2), (Decimal("50.00"), 1), (Decimal("9.99"), 3)]
        self.assertEqual(subtotal_of(lines), Decimal("279.97"))


class ComputeTotalsTests(unittest.TestCase):
    def test_reference_basket(self):
        totals = compute_totals(Decimal("250"))
        self.assertEqual(totals.subtotal, Decimal("250.00"))
        self.assertEqual(totals.shipping, Decimal("50.00"))
        self.assertEqual(totals.vat, Decimal("50.00"))
        self.assertEqual(totals.total, Decimal("350.00"))

    def test_empty_subtotal_ships_free(self):
        totals = compute_totals(Decimal("0"))
        self.assertEqual(totals.shipping, Decimal("0.00"))
        self.assertEqual(totals.vat, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("0.00"))

    def test_smallest_positive_subtotal_pays_shipping(self):
        totals = compute_totals(Decimal("0.01"))
        self.assertEqual(totals.shipping, Decimal("50.00"))
        self.assertEqual(totals.vat, Decimal("0.00"))
        self.assertEqual(totals.total, Decimal("50.01"))

    def test_vat_rounds_half_up(self):
        totals = compute_totals(Decimal("0.25"), vat_rate=Decimal("0.1"))
        self.assertEqual(totals.vat, Decimal("0.03"))
        totals = compute_totals(Decimal("10.02"))
        self.assertEqual(totals.vat, Decimal("2.00"))

    def test_total_is_exact_sum_of_rounded_parts(self):
        cents = range(0, 100001, 137)
        for value in cents:
            subtotal = Decimal(value) / 100
            totals = compute_totals(subtotal)
            self.assertEqual(
                totals.total, totals.subtotal + totals.shipping + totals.vat, subtotal
            )
            self.assertEqual(totals.total.as_tuple().exponent, -2)

    def test_deterministic(self):
        first = compute_totals(Decimal("123.45"))
        second = compute_totals(Decimal("123.45"))
        self.assertEqual(first, second)
        self.assertEqual(first.as_dict(), second.as_dict())

    def test_negative_subtotal_rejected(self):
        with self.assertRaises(ValueError):
            compute_totals(Decimal("-0.01"))

    def test_custom_fee_and_rate(self):
        totals = compute_totals(
            Decimal("100"), shipping_fee=Decimal("4.99"), vat_rate=Decimal("0.08")
        )
        self.assertEqual(totals.shipping, Decimal("4.99"))
        self.assertEqual(totals.vat, Decimal("8.00"))
        self.assertEqual(totals.total, Decimal("112.99"))

    def test_as_dict_renders_strings(self):
        self.assertEqual(
            compute_totals(Decimal("250")).as_dict(),
            {"subtotal": "250.00", "shipping": "50.00", "vat": "50.00", "total": "350.00"},
        )


class PricingPolicyTests(unittest.TestCase):
    def test_defaults_match_compute_totals(self):
        self.assertEqual(PricingPolicy().totals("250"), compute_totals("250"))

    def test_from_settings_reads_overrides(self):
        from django.test import override_settings

        with override_settings(STOREFRONT_SHIPPING_FEE="10", STOREFRONT_VAT_RATE="0.1"):
            policy = PricingPolicy.from_settings()
        self.assertEqual(policy.shipping_fee, Decimal("10.00"))
        self.assertEqual(policy.vat_rate, Decimal("0.1"))
        self.assertEqual(policy.totals("100").total, Decimal("120.00"))
