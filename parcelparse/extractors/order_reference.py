"""Order reference extraction."""

import logging
import re

logger = logging.getLogger(__name__)

# Tokens start alphanumeric and must contain a digit, so "Order details"
# or "order confirmation" never count as references
_TOKEN = r"(?=[\w-]*\d)([A-Z0-9][\w-]{5,29})"

# Tried in order; the first pattern that matches anywhere wins
ORDER_REFERENCE_PATTERNS = [
    re.compile(rf"\border\s*(?:#|number|no\.?|ref\.?)?\s*:?\s*#?\s*{_TOKEN}", re.IGNORECASE),
    re.compile(rf"\breference\s*(?:#|number|no\.?)?\s*:?\s*#?\s*{_TOKEN}", re.IGNORECASE),
    re.compile(
        r"\btracking\s*(?:#|number|no\.?)?\s*:?\s*#?\s*(?=[\w-]*\d)([A-Z0-9][\w-]{7,29})",
        re.IGNORECASE,
    ),
    re.compile(rf"\bshipment\s*(?:#|number|no\.?)?\s*:?\s*#?\s*{_TOKEN}", re.IGNORECASE),
]


def extract_order_reference(text: str | None) -> str | None:
    """
    Find the order reference in email text.

    Args:
        text: Subject and body text

    Returns:
        The first reference found, or None
    """
    if not text:
        return None

    for pattern in ORDER_REFERENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            logger.debug("Order reference %s matched %s", match.group(1), pattern.pattern)
            return match.group(1)

    return None
