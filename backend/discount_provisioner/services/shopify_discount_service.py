"""
Shopify discount client

Creates code and automatic app discounts through the Shopify Admin GraphQL
API. The discount function configuration travels as a JSON metafield on the
discount.
"""
import json
import threading
from typing import Any, Dict, List, Optional

import requests

from discount_provisioner.core.config import settings
from discount_provisioner.core.logging_config import get_logger
from discount_provisioner.schemas.discount import (
    BaseDiscount,
    CreationOutcome,
    DiscountError,
    NormalizedConfiguration,
    ShopContext,
)

logger = get_logger("shopify_discount_service")

CREATE_CODE_DISCOUNT_MUTATION = """
mutation CreateCodeDiscount($discount: DiscountCodeAppInput!) {
  discountCreate: discountCodeAppCreate(codeAppDiscount: $discount) {
    codeAppDiscount {
      discountId
    }
    userErrors {
      code
      message
      field
    }
  }
}
"""

CREATE_AUTOMATIC_DISCOUNT_MUTATION = """
mutation CreateAutomaticDiscount($discount: DiscountAutomaticAppInput!) {
  discountCreate: discountAutomaticAppCreate(automaticAppDiscount: $discount) {
    automaticAppDiscount {
      discountId
    }
    userErrors {
      code
      message
      field
    }
  }
}
"""


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def build_discount_input(base: BaseDiscount, configuration: NormalizedConfiguration) -> Dict[str, Any]:
    """Fields shared by code and automatic discount inputs."""
    return {
        "functionId": base.function_id,
        "title": base.title,
        "combinesWith": base.combines_with.model_dump(by_alias=True),
        "discountClasses": base.discount_classes,
        "startsAt": _isoformat(base.starts_at),
        "endsAt": _isoformat(base.ends_at),
        "metafields": [
            {
                "namespace": settings.DISCOUNT_METAFIELD_NAMESPACE,
                "key": settings.DISCOUNT_METAFIELD_KEY,
                "type": "json",
                "value": json.dumps(configuration.to_function_configuration(), allow_nan=False),
            }
        ],
    }


def map_user_errors(user_errors: List[Dict[str, Any]]) -> List[DiscountError]:
    return [
        DiscountError(
            message=error.get("message") or "Unknown error",
            field=[str(part) for part in (error.get("field") or [])],
            code=error.get("code"),
        )
        for error in user_errors
    ]


class ShopifyDiscountClient:
    """
    Each thread gets its own requests.Session, so pooled bulk creation never
    shares one. A session passed in explicitly is used as-is by every thread.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[int] = None):
        self._session = session
        self._local = threading.local()
        self.timeout = timeout if timeout is not None else settings.SHOPIFY_REQUEST_TIMEOUT

    @property
    def session(self) -> requests.Session:
        if self._session is not None:
            return self._session
        if not hasattr(self._local, "session"):
            self._local.session = requests.Session()
        return self._local.session

    def create_code_discount(
        self,
        context: ShopContext,
        base: BaseDiscount,
        code: Optional[str],
        usage_limit: Optional[int],
        applies_once_per_customer: bool,
        configuration: NormalizedConfiguration,
    ) -> CreationOutcome:
        discount = build_discount_input(base, configuration)
        discount.update({
            "code": code,
            "usageLimit": usage_limit,
            "appliesOncePerCustomer": applies_once_per_customer,
        })
        return self._create(context, CREATE_CODE_DISCOUNT_MUTATION, discount, code=code)

    def create_automatic_discount(
        self,
        context: ShopContext,
        base: BaseDiscount,
        configuration: NormalizedConfiguration,
    ) -> CreationOutcome:
        discount = build_discount_input(base, configuration)
        return self._create(context, CREATE_AUTOMATIC_DISCOUNT_MUTATION, discount)

    def _create(
        self,
        context: ShopContext,
        mutation: str,
        discount: Dict[str, Any],
        code: Optional[str] = None,
    ) -> CreationOutcome:
        body = self._execute(context, mutation, {"discount": discount})

        if body.get("errors"):
            # Query-level failures (throttling, schema errors) have no field path
            errors = [
                DiscountError(message=error.get("message") or "Unknown error", field=[])
                for error in body["errors"]
            ]
            logger.warning(
                f"Shopify rejected discount mutation for {context.shop_domain}: {errors[0].message}",
                extra={"shop": context.shop_domain, "code": code, "error_count": len(errors)},
            )
            return CreationOutcome.failed(errors)

        result = (body.get("data") or {}).get("discountCreate") or {}
        user_errors = map_user_errors(result.get("userErrors") or [])
        if user_errors:
            logger.info(
                f"Discount not created for {context.shop_domain}: {user_errors[0].message}",
                extra={"shop": context.shop_domain, "code": code, "error_count": len(user_errors)},
            )
            return CreationOutcome.failed(user_errors)

        logger.info(
            f"Discount created for {context.shop_domain}",
            extra={"shop": context.shop_domain, "code": code},
        )
        return CreationOutcome.ok()

    def _execute(self, context: ShopContext, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "X-Shopify-Access-Token": context.access_token,
            "Content-Type": "application/json",
        }
        response = self.session.post(
            context.graphql_url,
            json={"query": query, "variables": variables},
            headers=headers,
            timeout=self.timeout,
        )
        if response.status_code != 200:
            logger.error(
                f"Shopify API error: {response.status_code} - {response.text}",
                extra={"shop": context.shop_domain, "status_code": response.status_code},
            )
            response.raise_for_status()
        return response.json()


def get_discount_client() -> ShopifyDiscountClient:
    return ShopifyDiscountClient()
