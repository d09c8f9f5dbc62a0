"""
Discount code generation for bulk creation.

Codes look like PREFIX-1234. The suffix comes from the non-cryptographic
`random` module; codes only need to look distinct, not be unguessable.
"""
import random
from typing import Optional, Set

SUFFIX_MIN = 1000
SUFFIX_SPAN = 9000  # suffixes 1000..9999


class CodeSpaceExhausted(ValueError):
    pass


def generate_code(prefix: str, rng: Optional[random.Random] = None) -> str:
    suffix = (rng or random).randrange(SUFFIX_SPAN) + SUFFIX_MIN
    return f"{prefix}-{suffix}"


class BulkCodeGenerator:
    """
    Issues codes for one bulk batch without repeating a suffix.

    Only the current batch is tracked. A code that already exists in the shop
    is still possible and comes back from Shopify as an error for that item.
    """

    def __init__(self, prefix: str, rng: Optional[random.Random] = None):
        self.prefix = prefix
        self.rng = rng or random.Random()
        self.issued: Set[str] = set()

    def next_code(self) -> str:
        if len(self.issued) >= SUFFIX_SPAN:
            raise CodeSpaceExhausted(
                f"All {SUFFIX_SPAN} codes for prefix '{self.prefix}' have been issued in this batch"
            )
        code = generate_code(self.prefix, self.rng)
        while code in self.issued:
            code = generate_code(self.prefix, self.rng)
        self.issued.add(code)
        return code
