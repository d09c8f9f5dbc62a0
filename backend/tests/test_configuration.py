import math

import pytest

from discount_provisioner.schemas.discount import RawConfiguration
from discount_provisioner.services.configuration import (
    configuration_parse_errors,
    normalize_configuration,
    parse_float,
    parse_int,
)


@pytest.mark.parametrize("raw, expected", [
    ("10", 10.0),
    ("12.5", 12.5),
    (" 7 ", 7.0),
    ("12abc", 12.0),
    (".5", 0.5),
    ("-3", -3.0),
    ("1e2", 100.0),
    (15, 15.0),
])
def test_parse_float_reads_numeric_prefix(raw, expected):
    parsed = parse_float(raw)
    assert parsed.ok
    assert parsed.value == expected


@pytest.mark.parametrize("raw", ["abc", "", None, True, "%10"])
def test_parse_float_failure_is_nan_not_exception(raw):
    parsed = parse_float(raw)
    assert not parsed.ok
    assert math.isnan(parsed.value)
    assert parsed.raw == raw


@pytest.mark.parametrize("raw, expected", [
    ("3", 3),
    ("3.9", 3),
    ("10 codes", 10),
    (None, 0),
    ("", 0),
    ("abc", 0),
    (0, 0),
    ("-2", -2),
])
def test_parse_int(raw, expected):
    assert parse_int(raw) == expected


def test_normalize_configuration_coerces_numbers():
    raw = RawConfiguration.model_validate({
        "cartLinePercentage": "10",
        "orderPercentage": "5.5",
        "deliveryPercentage": "0",
        "collectionIds": ["gid://shopify/Collection/1"],
        "applyToCheapestLineOnly": True,
        "minimumQuantity": "2",
        "quantityToDiscount": "1",
    })

    normalized = normalize_configuration(raw)

    assert normalized.cart_line_percentage == 10.0
    assert normalized.order_percentage == 5.5
    assert normalized.delivery_percentage == 0.0
    assert normalized.collection_ids == ["gid://shopify/Collection/1"]
    assert normalized.apply_to_cheapest_line_only is True
    assert normalized.minimum_quantity == 2.0
    assert normalized.quantity_to_discount == 1.0
    assert normalized.parse_failures == []


def test_normalize_configuration_defaults_and_nan_passthrough():
    raw = RawConfiguration.model_validate({"cartLinePercentage": "ten", "collectionIds": None})

    normalized = normalize_configuration(raw)

    assert normalized.collection_ids == []
    assert math.isnan(normalized.cart_line_percentage)
    assert normalized.parse_failures == [
        "cartLinePercentage",
        "orderPercentage",
        "deliveryPercentage",
        "minimumQuantity",
        "quantityToDiscount",
    ]


def test_no_range_validation():
    raw = RawConfiguration.model_validate({
        "cartLinePercentage": "150",
        "orderPercentage": "-20",
        "deliveryPercentage": "0",
        "minimumQuantity": "0",
        "quantityToDiscount": "0",
    })
    normalized = normalize_configuration(raw)
    assert normalized.cart_line_percentage == 150.0
    assert normalized.order_percentage == -20.0


def test_function_configuration_sends_nan_as_null():
    raw = RawConfiguration.model_validate({
        "cartLinePercentage": "x",
        "orderPercentage": "1",
        "deliveryPercentage": "2",
        "minimumQuantity": "3",
        "quantityToDiscount": "4",
    })
    payload = normalize_configuration(raw).to_function_configuration()
    assert payload == {
        "cartLinePercentage": None,
        "orderPercentage": 1.0,
        "deliveryPercentage": 2.0,
        "collectionIds": [],
        "applyToCheapestLineOnly": None,
        "minimumQuantity": 3.0,
        "quantityToDiscount": 4.0,
    }


def test_configuration_parse_errors_point_at_fields():
    raw = RawConfiguration.model_validate({
        "cartLinePercentage": "10",
        "orderPercentage": "oops",
        "deliveryPercentage": "0",
        "minimumQuantity": "0",
        "quantityToDiscount": "0",
    })
    errors = configuration_parse_errors(normalize_configuration(raw))
    assert len(errors) == 1
    assert errors[0].field == ["configuration", "orderPercentage"]
    assert errors[0].message == "orderPercentage must be a number"
