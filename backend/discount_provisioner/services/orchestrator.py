"""
Discount creation entry point.

Takes the serialized discount submitted by the admin UI, builds the shared
discount definition, dispatches by method and reduces the per-call results
to a single outcome. Every failure on this path ends up as an outcome with
errors; nothing is raised to the caller.
"""
from typing import Any

from discount_provisioner.core.config import settings
from discount_provisioner.core.logging_config import get_logger
from discount_provisioner.schemas.discount import (
    BaseDiscount,
    CreationOutcome,
    DiscountMethod,
    DiscountSubmission,
    ShopContext,
)
from discount_provisioner.services.aggregator import aggregate, summarize_bulk
from discount_provisioner.services.configuration import (
    configuration_parse_errors,
    normalize_configuration,
)
from discount_provisioner.services.dispatcher import dispatch

logger = get_logger("orchestrator")

NO_DISCOUNT_DATA_MESSAGE = "No discount data provided"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def build_base_discount(function_id: str, submission: DiscountSubmission) -> BaseDiscount:
    return BaseDiscount(
        function_id=function_id,
        title=submission.title,
        combines_with=submission.combines_with,
        discount_classes=submission.discount_classes,
        starts_at=submission.starts_at,
        ends_at=submission.ends_at,
    )


def create_discount(context: ShopContext, function_id: str, payload: Any, client) -> CreationOutcome:
    """
    Create the discount(s) described by `payload` for the given function.

    Args:
        context: Shop credentials for this request
        function_id: Shopify function the discount runs
        payload: JSON string from the `discount` form field
        client: Object exposing create_code_discount / create_automatic_discount

    Returns:
        CreationOutcome with success=True, or with the collected errors
    """
    if not payload or not isinstance(payload, str):
        logger.warning(
            "Discount create rejected: no discount data provided",
            extra={"shop": context.shop_domain, "function_id": function_id},
        )
        return CreationOutcome.error(NO_DISCOUNT_DATA_MESSAGE)

    try:
        submission = DiscountSubmission.model_validate_json(payload)
        method = DiscountMethod.resolve(submission.method)
        base = build_base_discount(function_id, submission)
        configuration = normalize_configuration(submission.configuration)

        if configuration.parse_failures:
            if settings.STRICT_CONFIGURATION_PARSING:
                return CreationOutcome.failed(configuration_parse_errors(configuration))
            logger.debug(
                f"Forwarding unparseable configuration fields as NaN: {configuration.parse_failures}",
                extra={"shop": context.shop_domain, "function_id": function_id},
            )

        result = dispatch(context, method, base, submission, configuration, client)
        outcome = aggregate(result)

        if result.items is not None:
            summary = summarize_bulk(result.items)
            logger.info(
                f"Bulk discount batch finished: {summary['succeeded']}/{summary['attempted']} created",
                extra={"shop": context.shop_domain, "function_id": function_id, **summary},
            )
            if settings.INCLUDE_BULK_ITEM_REPORT:
                outcome.items = result.items

        return outcome

    except Exception as e:
        logger.error(
            f"Discount create failed: {str(e)}",
            exc_info=True,
            extra={"shop": context.shop_domain, "function_id": function_id},
        )
        return CreationOutcome.error(str(e) or UNEXPECTED_ERROR_MESSAGE)
