"""
Configuration normalization for discount functions.

Turns the loosely typed configuration block submitted with a discount
(percentages and quantities as strings) into numbers. Values that do not
parse become NaN instead of raising; by default NaN is forwarded to Shopify
and any rejection comes back as a service-side error.
"""
import math
import re
from typing import Any, List, NamedTuple

from discount_provisioner.schemas.discount import (
    DiscountError,
    NormalizedConfiguration,
    RawConfiguration,
)

# Longest numeric prefix, the way a lenient float parser reads "12.5%" as 12.5
_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_INT_PREFIX = re.compile(r"[+-]?\d+")

NUMERIC_FIELDS = {
    "cart_line_percentage": "cartLinePercentage",
    "order_percentage": "orderPercentage",
    "delivery_percentage": "deliveryPercentage",
    "minimum_quantity": "minimumQuantity",
    "quantity_to_discount": "quantityToDiscount",
}


class ParsedNumber(NamedTuple):
    raw: Any
    value: float
    ok: bool


def _as_text(raw: Any) -> str:
    if raw is None or isinstance(raw, bool):
        return ""
    if isinstance(raw, float) and math.isnan(raw):
        return ""
    return str(raw)


def parse_float(raw: Any) -> ParsedNumber:
    """Parse a float from the start of `raw`, NaN when there is no number."""
    match = _FLOAT_PREFIX.match(_as_text(raw).strip())
    if not match:
        return ParsedNumber(raw, math.nan, False)
    return ParsedNumber(raw, float(match.group(0).replace("Infinity", "inf")), True)


def parse_int(raw: Any, default: int = 0) -> int:
    """Parse a base-10 integer from the start of `raw`; `default` when there is none."""
    text = _as_text(raw).strip() if raw else str(default)
    match = _INT_PREFIX.match(text)
    return int(match.group(0)) if match else default


def normalize_configuration(raw: RawConfiguration) -> NormalizedConfiguration:
    values = {}
    failures: List[str] = []
    for attr, wire_name in NUMERIC_FIELDS.items():
        parsed = parse_float(getattr(raw, attr))
        values[attr] = parsed.value
        if not parsed.ok:
            failures.append(wire_name)

    return NormalizedConfiguration(
        collection_ids=raw.collection_ids or [],
        apply_to_cheapest_line_only=raw.apply_to_cheapest_line_only,
        parse_failures=failures,
        **values,
    )


def configuration_parse_errors(configuration: NormalizedConfiguration) -> List[DiscountError]:
    return [
        DiscountError(
            message=f"{name} must be a number",
            field=["configuration", name],
        )
        for name in configuration.parse_failures
    ]
