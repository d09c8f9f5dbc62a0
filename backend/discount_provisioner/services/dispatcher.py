"""
Dispatches discount creation to Shopify according to the requested method.

CODE and AUTOMATIC make exactly one call. BULK makes one code-discount call
per generated code; every item is attempted once and a failing item never
stops the rest of the batch.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import List, NamedTuple, Optional

from discount_provisioner.core.config import settings
from discount_provisioner.core.logging_config import get_logger
from discount_provisioner.schemas.discount import (
    BaseDiscount,
    BulkItemResult,
    CreationOutcome,
    DiscountError,
    DiscountMethod,
    DiscountSubmission,
    NormalizedConfiguration,
    ShopContext,
)
from discount_provisioner.services.code_generator import BulkCodeGenerator
from discount_provisioner.services.configuration import parse_int

logger = get_logger("dispatcher")

BULK_PRECONDITION_MESSAGE = "Prefix and valid quantity are required for bulk creation"


class DispatchResult(NamedTuple):
    method: DiscountMethod
    outcome: Optional[CreationOutcome] = None
    items: Optional[List[BulkItemResult]] = None


def dispatch(
    context: ShopContext,
    method: DiscountMethod,
    base: BaseDiscount,
    submission: DiscountSubmission,
    configuration: NormalizedConfiguration,
    client,
) -> DispatchResult:
    if method == DiscountMethod.CODE:
        outcome = client.create_code_discount(
            context,
            base,
            submission.code,
            submission.usage_limit,
            submission.applies_once_per_customer,
            configuration,
        )
        return DispatchResult(method, outcome=outcome)

    if method == DiscountMethod.BULK:
        return dispatch_bulk(context, base, submission, configuration, client)

    outcome = client.create_automatic_discount(context, base, configuration)
    return DispatchResult(method, outcome=outcome)


def dispatch_bulk(
    context: ShopContext,
    base: BaseDiscount,
    submission: DiscountSubmission,
    configuration: NormalizedConfiguration,
    client,
) -> DispatchResult:
    prefix = submission.configuration.bulk_prefix
    quantity = parse_int(submission.configuration.bulk_quantity)

    if not prefix or quantity <= 0:
        return DispatchResult(DiscountMethod.BULK, outcome=CreationOutcome.error(BULK_PRECONDITION_MESSAGE))
    # numeric prefixes such as 2024 are used as text
    prefix = str(prefix)
    if settings.BULK_MAX_QUANTITY and quantity > settings.BULK_MAX_QUANTITY:
        return DispatchResult(
            DiscountMethod.BULK,
            outcome=CreationOutcome.error(
                f"Bulk creation is limited to {settings.BULK_MAX_QUANTITY} codes per batch"
            ),
        )

    generator = BulkCodeGenerator(prefix)
    codes = [generator.next_code() for _ in range(quantity)]

    def create_item(index: int, code: str) -> BulkItemResult:
        try:
            outcome = client.create_code_discount(
                context,
                base,
                code,
                submission.usage_limit,
                submission.applies_once_per_customer,
                configuration,
            )
        except Exception as e:
            logger.error(
                f"Bulk item {index} ({code}) raised: {str(e)}",
                exc_info=True,
                extra={"shop": context.shop_domain, "code": code},
            )
            return BulkItemResult(
                index=index,
                code=code,
                success=False,
                errors=[DiscountError(message=str(e) or "An unexpected error occurred", field=[])],
            )
        return BulkItemResult(
            index=index,
            code=code,
            success=not outcome.has_errors,
            errors=outcome.errors or [],
        )

    workers = max(1, min(settings.BULK_MAX_WORKERS, quantity))
    logger.info(
        f"Creating {quantity} bulk discount codes with prefix '{prefix}'",
        extra={"shop": context.shop_domain, "quantity": quantity, "workers": workers},
    )

    if workers == 1:
        items = [create_item(index, code) for index, code in enumerate(codes)]
    else:
        # map() yields in submission order, so items line up with codes
        with ThreadPoolExecutor(max_workers=workers) as executor:
            items = list(executor.map(create_item, range(quantity), codes))

    return DispatchResult(DiscountMethod.BULK, items=items)
