import json

import pytest

from discount_provisioner.schemas.discount import CreationOutcome, ShopContext


class FakeDiscountClient:
    """Records create calls; returns queued outcomes (or raises queued exceptions)."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.code_calls = []
        self.automatic_calls = []

    def _next(self):
        if not self.outcomes:
            return CreationOutcome.ok()
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def create_code_discount(self, context, base, code, usage_limit, applies_once_per_customer, configuration):
        self.code_calls.append({
            "context": context,
            "base": base,
            "code": code,
            "usage_limit": usage_limit,
            "applies_once_per_customer": applies_once_per_customer,
            "configuration": configuration,
        })
        return self._next()

    def create_automatic_discount(self, context, base, configuration):
        self.automatic_calls.append({"context": context, "base": base, "configuration": configuration})
        return self._next()

    @property
    def call_count(self):
        return len(self.code_calls) + len(self.automatic_calls)


@pytest.fixture
def fake_client():
    return FakeDiscountClient()


@pytest.fixture
def shop_context():
    return ShopContext(
        shop_domain="test-shop.myshopify.com",
        access_token="shpat_test",
        api_version="2025-07",
    )


def make_discount(method="CODE", configuration=None, **overrides):
    discount = {
        "title": "Spring sale",
        "method": method,
        "code": "WELCOME10",
        "combinesWith": {
            "orderDiscounts": False,
            "productDiscounts": True,
            "shippingDiscounts": False,
        },
        "usageLimit": None,
        "appliesOncePerCustomer": False,
        "startsAt": "2026-03-01T00:00:00.000Z",
        "endsAt": None,
        "discountClasses": ["PRODUCT"],
        "configuration": {
            "cartLinePercentage": "10",
            "orderPercentage": "0",
            "deliveryPercentage": "0",
            "collectionIds": [],
            "applyToCheapestLineOnly": False,
            "minimumQuantity": "0",
            "quantityToDiscount": "0",
            **(configuration or {}),
        },
    }
    discount.update(overrides)
    return json.dumps(discount)


@pytest.fixture
def discount_payload():
    return make_discount
