from typing import Dict, List

from discount_provisioner.schemas.discount import BulkItemResult, CreationOutcome, DiscountError
from discount_provisioner.services.dispatcher import DispatchResult


def aggregate_single(outcome: CreationOutcome) -> CreationOutcome:
    if outcome.has_errors:
        return CreationOutcome.failed(outcome.errors)
    return CreationOutcome.ok()


def aggregate_bulk(items: List[BulkItemResult]) -> CreationOutcome:
    """Errors of every failed item in batch order; successful items are not reported."""
    errors: List[DiscountError] = []
    for item in items:
        if not item.success:
            errors.extend(item.errors)
    if errors:
        return CreationOutcome.failed(errors)
    return CreationOutcome.ok()


def summarize_bulk(items: List[BulkItemResult]) -> Dict[str, int]:
    succeeded = sum(1 for item in items if item.success)
    return {
        "attempted": len(items),
        "succeeded": succeeded,
        "failed": len(items) - succeeded,
    }


def aggregate(result: DispatchResult) -> CreationOutcome:
    if result.items is not None:
        return aggregate_bulk(result.items)
    return aggregate_single(result.outcome)
