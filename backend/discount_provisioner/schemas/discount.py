import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DiscountMethod(str, Enum):
    CODE = "CODE"
    BULK = "BULK"
    AUTOMATIC = "AUTOMATIC"

    @classmethod
    def resolve(cls, value: Optional[str]) -> "DiscountMethod":
        # Anything that is not a code or bulk request creates an automatic discount
        if value == cls.CODE.value:
            return cls.CODE
        if value == cls.BULK.value:
            return cls.BULK
        return cls.AUTOMATIC


class CombinesWith(CamelModel):
    order_discounts: bool = False
    product_discounts: bool = False
    shipping_discounts: bool = False


class RawConfiguration(CamelModel):
    cart_line_percentage: Any = None
    order_percentage: Any = None
    delivery_percentage: Any = None
    collection_ids: Optional[List[Any]] = None
    apply_to_cheapest_line_only: Any = None
    minimum_quantity: Any = None
    quantity_to_discount: Any = None
    bulk_prefix: Any = None
    bulk_quantity: Any = None


class DiscountSubmission(CamelModel):
    """The JSON document posted in the `discount` form field."""
    title: Optional[str] = None
    method: Optional[str] = None
    code: Optional[str] = None
    combines_with: CombinesWith = Field(default_factory=CombinesWith)
    usage_limit: Optional[int] = None
    applies_once_per_customer: bool = False
    starts_at: datetime
    ends_at: Optional[datetime] = None
    discount_classes: List[str] = Field(default_factory=list)
    configuration: RawConfiguration

    @field_validator("ends_at", mode="before")
    @classmethod
    def blank_end_is_open_ended(cls, v):
        return v or None


class BaseDiscount(BaseModel):
    function_id: str
    title: Optional[str] = None
    combines_with: CombinesWith
    discount_classes: List[str]
    starts_at: datetime
    ends_at: Optional[datetime] = None


class NormalizedConfiguration(BaseModel):
    cart_line_percentage: float
    order_percentage: float
    delivery_percentage: float
    collection_ids: List[Any] = Field(default_factory=list)
    apply_to_cheapest_line_only: Any = None
    minimum_quantity: float
    quantity_to_discount: float
    parse_failures: List[str] = Field(default_factory=list)

    def to_function_configuration(self) -> Dict[str, Any]:
        """Payload stored in the discount function metafield. NaN and infinities go out as null."""
        def number(value: float) -> Optional[float]:
            return value if math.isfinite(value) else None

        return {
            "cartLinePercentage": number(self.cart_line_percentage),
            "orderPercentage": number(self.order_percentage),
            "deliveryPercentage": number(self.delivery_percentage),
            "collectionIds": self.collection_ids,
            "applyToCheapestLineOnly": self.apply_to_cheapest_line_only,
            "minimumQuantity": number(self.minimum_quantity),
            "quantityToDiscount": number(self.quantity_to_discount),
        }


class DiscountError(BaseModel):
    message: str
    field: List[str] = Field(default_factory=list)
    code: Optional[str] = None


class BulkItemResult(BaseModel):
    index: int
    code: str
    success: bool
    errors: List[DiscountError] = Field(default_factory=list)


class CreationOutcome(BaseModel):
    success: Optional[bool] = None
    errors: Optional[List[DiscountError]] = None
    items: Optional[List[BulkItemResult]] = None  # only with INCLUDE_BULK_ITEM_REPORT

    @classmethod
    def ok(cls) -> "CreationOutcome":
        return cls(success=True)

    @classmethod
    def failed(cls, errors: List[DiscountError]) -> "CreationOutcome":
        return cls(errors=list(errors))

    @classmethod
    def error(cls, message: str, field: Optional[List[str]] = None) -> "CreationOutcome":
        return cls.failed([DiscountError(message=message, field=field or [])])

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ShopContext(BaseModel):
    """Credentials for one request against the Shopify Admin API."""
    shop_domain: str
    access_token: str
    api_version: str

    @property
    def graphql_url(self) -> str:
        domain = self.shop_domain.removeprefix("https://").rstrip("/")
        return f"https://{domain}/admin/api/{self.api_version}/graphql.json"


class Collection(BaseModel):
    id: str
    title: str


class NewDiscountFormResponse(CamelModel):
    initial_data: Dict[str, Any]
    collections: List[Collection] = Field(default_factory=list)
