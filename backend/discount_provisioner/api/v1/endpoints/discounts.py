"""
Discount creation endpoints used by the admin UI.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Form, Header, HTTPException, status

from discount_provisioner.core.config import settings
from discount_provisioner.schemas.discount import (
    CreationOutcome,
    DiscountMethod,
    NewDiscountFormResponse,
    ShopContext,
)
from discount_provisioner.services.orchestrator import create_discount
from discount_provisioner.services.shopify_discount_service import (
    ShopifyDiscountClient,
    get_discount_client,
)

router = APIRouter()


def get_shop_context(
    x_shopify_shop_domain: Optional[str] = Header(None, alias="X-Shopify-Shop-Domain"),
    x_shopify_access_token: Optional[str] = Header(None, alias="X-Shopify-Access-Token"),
) -> ShopContext:
    shop_domain = x_shopify_shop_domain or settings.SHOPIFY_SHOP_DOMAIN
    access_token = x_shopify_access_token or settings.SHOPIFY_ACCESS_TOKEN
    if not shop_domain or not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-Shopify-Shop-Domain or X-Shopify-Access-Token header.",
        )
    return ShopContext(
        shop_domain=shop_domain,
        access_token=access_token,
        api_version=settings.SHOPIFY_API_VERSION,
    )


@router.get("/{function_id}/new", response_model=NewDiscountFormResponse)
def new_discount_form(function_id: str):
    """Initial values for the create-discount form. No collections are selected yet."""
    return NewDiscountFormResponse(
        initial_data={
            "title": "",
            "method": DiscountMethod.CODE.value,
            "code": "",
            "discountClasses": [],
            "combinesWith": {
                "orderDiscounts": False,
                "productDiscounts": False,
                "shippingDiscounts": False,
            },
            "usageLimit": None,
            "appliesOncePerCustomer": False,
            "startsAt": datetime.now(timezone.utc).isoformat(),
            "endsAt": None,
            "configuration": {
                "cartLinePercentage": "0",
                "orderPercentage": "0",
                "deliveryPercentage": "0",
                "collectionIds": [],
                "minimumQuantity": "0",
                "quantityToDiscount": "0",
            },
        },
        collections=[],
    )


@router.post(
    "/{function_id}",
    response_model=CreationOutcome,
    response_model_exclude_none=True,
)
def create_discounts(
    function_id: str,
    discount: Optional[str] = Form(None),
    context: ShopContext = Depends(get_shop_context),
    client: ShopifyDiscountClient = Depends(get_discount_client),
):
    """
    Create a code, bulk or automatic discount.

    The `discount` form field holds the JSON discount definition. The response is
    always 200: either {"success": true} or {"errors": [{message, field, code?}]}.
    Bulk requests add {"items": [...]} when INCLUDE_BULK_ITEM_REPORT is enabled.
    """
    return create_discount(context, function_id, discount, client)
