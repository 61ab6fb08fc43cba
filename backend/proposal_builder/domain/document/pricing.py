"""
Totals for pricing elements.

A pricing payload looks like:

    {
        "lineItems": [{"id": ..., "description": ..., "quantity": 2, "unit_price": 150}],
        "discount": {"type": "none" | "percentage" | "fixed", "value": 10},
        "currency": "USD"
    }

Missing or malformed numbers count as zero.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Mapping, TypedDict

from .elements import DEFAULT_CURRENCY, ElementType


class PricingTotals(TypedDict):
    currency: str
    subtotal: float
    discount_amount: float
    total: float


def _number(value: Any) -> Decimal:
    if isinstance(value, bool):
        return Decimal(0)
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)


def line_item_total(item: Mapping[str, Any]) -> Decimal:
    return _number(item.get("quantity")) * _number(item.get("unit_price"))


def pricing_totals(content: Mapping[str, Any]) -> PricingTotals:
    line_items = content.get("lineItems") or []
    discount = content.get("discount") or {"type": "none", "value": 0}

    subtotal = sum(
        (line_item_total(item) for item in line_items if isinstance(item, Mapping)),
        Decimal(0),
    )

    discount_type = discount.get("type", "none")
    if discount_type == "percentage":
        discount_amount = subtotal * _number(discount.get("value")) / Decimal(100)
    elif discount_type == "fixed":
        discount_amount = _number(discount.get("value"))
    else:
        discount_amount = Decimal(0)

    return {
        "currency": content.get("currency") or DEFAULT_CURRENCY,
        "subtotal": float(subtotal),
        "discount_amount": float(discount_amount),
        "total": float(subtotal - discount_amount),
    }


def content_total(block_contents: Iterable[Dict[str, Any]]) -> float:
    """Sum of every pricing element total across stored block contents."""
    total = 0.0
    for content in block_contents:
        for element in (content or {}).get("elements") or []:
            if isinstance(element, Mapping) and element.get("type") == ElementType.PRICING.value:
                total += pricing_totals(element.get("content") or {})["total"]
    return total
