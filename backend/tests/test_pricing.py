# tests/test_pricing.py
"""Tests for pricing totals."""

import pytest

from proposal_builder.domain.document.pricing import content_total, pricing_totals


def pricing(line_items, discount=None, currency="USD"):
    return {
        "lineItems": line_items,
        "discount": discount or {"type": "none", "value": 0},
        "currency": currency,
    }


class TestPricingTotals:
    """Subtotal, discount and total."""

    def test_no_discount(self):
        totals = pricing_totals(pricing([
            {"id": "1", "description": "Design", "quantity": 2, "unit_price": 500},
            {"id": "2", "description": "Build", "quantity": 1, "unit_price": 1250.5},
        ]))

        assert totals == {
            "currency": "USD",
            "subtotal": 2250.5,
            "discount_amount": 0.0,
            "total": 2250.5,
        }

    def test_percentage_discount(self):
        totals = pricing_totals(pricing(
            [{"quantity": 4, "unit_price": 250}],
            {"type": "percentage", "value": 10},
        ))

        assert totals["subtotal"] == 1000.0
        assert totals["discount_amount"] == 100.0
        assert totals["total"] == 900.0

    def test_fixed_discount(self):
        totals = pricing_totals(pricing(
            [{"quantity": 1, "unit_price": 300}],
            {"type": "fixed", "value": 50},
        ))

        assert totals["total"] == 250.0

    def test_empty_payload_defaults(self):
        assert pricing_totals({}) == {
            "currency": "USD",
            "subtotal": 0.0,
            "discount_amount": 0.0,
            "total": 0.0,
        }

    @pytest.mark.parametrize("item", [
        {"quantity": "two", "unit_price": 10},
        {"quantity": None, "unit_price": 10},
        {"quantity": True, "unit_price": 10},
        {},
    ])
    def test_malformed_numbers_count_as_zero(self, item):
        assert pricing_totals(pricing([item]))["subtotal"] == 0.0

    def test_numeric_strings_are_accepted(self):
        assert pricing_totals(pricing([{"quantity": "3", "unit_price": "1.5"}]))["total"] == 4.5


class TestContentTotal:
    def test_sums_pricing_elements_across_blocks(self):
        contents = [
            {"elements": [
                {"type": "text", "content": {"html": "<p>x</p>"}},
                {"type": "pricing", "content": pricing([{"quantity": 1, "unit_price": 100}])},
            ]},
            {"elements": [
                {"type": "pricing", "content": pricing([{"quantity": 2, "unit_price": 50}], {"type": "fixed", "value": 20})},
            ]},
            {},
        ]

        assert content_total(contents) == 180.0
