"""
Product description extraction.

Three line-based strategies each propose candidate descriptions, which
are then cleaned, filtered and deduplicated together:

- names followed by attribute lines (Color:/Size:/Qty:/SKU:)
- bulleted lines and "Items:" style lists
- quantity-prefixed lines ("2x Leather Wallet")
"""

import logging
import re

from parcelparse.config import (
    MAX_DESCRIPTION_LENGTH,
    MAX_PRODUCT_DESCRIPTIONS,
    MIN_DESCRIPTION_LENGTH,
)
from parcelparse.patterns.blocklists import (
    BRACKET_ONLY_RE,
    GENERIC_DESCRIPTION_RES,
    NON_PRODUCT_LINE_RE,
    NON_PRODUCT_PHRASE_RE,
    NUMERIC_LINE_RE,
    PRICE_LINE_RE,
    PRODUCT_ATTRIBUTE_RE,
)

logger = logging.getLogger(__name__)

# Attribute-following strategy
MAX_CANDIDATE_LINE_LENGTH = 80
ATTRIBUTE_LOOKAHEAD_LINES = 6
COLOR_RE = re.compile(r"\bColou?r\s*:\s*(.+)$", re.IGNORECASE)
MATERIAL_RE = re.compile(r"\bMaterial\s*:\s*(.+)$", re.IGNORECASE)
QUANTITY_LINE_RE = re.compile(r"^(?:Qty|Quantity)\b", re.IGNORECASE)

BULLET_LINE_RE = re.compile(r"^[ \t]*[-•*][ \t]+(.+?)[ \t]*$", re.MULTILINE)
LIST_RE = re.compile(
    r"\b(?:items?|products?|contains?):\s*(.+?)(?:\n\s*\n|\Z)",
    re.IGNORECASE | re.DOTALL,
)
QUANTITY_PREFIX_RE = re.compile(r"^\s*\d+\s*[x×]\s+(.+?)\s*$", re.IGNORECASE | re.MULTILINE)

# Cleaning
LEADING_MARKERS_RE = re.compile(r"^[\s\-•*·>\[\](){}]+")
CURRENCY_AMOUNT_RE = re.compile(r"[$£€]\s?[\d,.]*\d")
CURRENCY_CODE_AMOUNT_RE = re.compile(r"\d[\d,.]*\s*(?:USD|GBP|EUR)\b", re.IGNORECASE)
TRAILING_SEPARATORS_RE = re.compile(r"[\s\-|:,]+$")

# looks_like_product bounds
MIN_PRODUCT_LENGTH = 5
MAX_PRODUCT_LENGTH = 200


def extract_product_descriptions(text: str | None) -> list[str]:
    """
    Extract product descriptions from email text.

    Args:
        text: Subject and body text

    Returns:
        Up to ten cleaned descriptions in discovery order, no two sharing a
        normalized key
    """
    if not text:
        return []

    candidates = []
    candidates.extend(_products_before_attributes(text))
    candidates.extend(_listed_products(text))
    candidates.extend(_quantity_prefixed_products(text))

    descriptions = []
    seen = set()
    for candidate in candidates:
        cleaned = clean_product_description(candidate)
        if cleaned is None:
            continue
        key = dedup_key(cleaned)
        if not key or key in seen:
            continue
        seen.add(key)
        descriptions.append(cleaned)
        if len(descriptions) >= MAX_PRODUCT_DESCRIPTIONS:
            break

    logger.debug("Extracted %d product descriptions", len(descriptions))
    return descriptions


def dedup_key(description: str) -> str:
    """Lowercase and strip everything but letters and digits."""
    return re.sub(r"[^a-z0-9]", "", description.lower())


def clean_product_description(description: str | None) -> str | None:
    """
    Normalize one candidate description, or reject it.

    Strips bullets, brackets and prices, collapses whitespace, and returns
    None for numbers, boilerplate phrases, links and anything outside the
    allowed length.
    """
    if not description:
        return None

    cleaned = LEADING_MARKERS_RE.sub("", description.strip())
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = CURRENCY_AMOUNT_RE.sub("", cleaned)
    cleaned = CURRENCY_CODE_AMOUNT_RE.sub("", cleaned)
    cleaned = TRAILING_SEPARATORS_RE.sub("", cleaned).strip()

    if NUMERIC_LINE_RE.match(cleaned):
        return None
    if NON_PRODUCT_PHRASE_RE.match(cleaned):
        return None
    if "://" in cleaned or "@" in cleaned:
        return None
    if not MIN_DESCRIPTION_LENGTH <= len(cleaned) <= MAX_DESCRIPTION_LENGTH:
        return None

    return cleaned


def looks_like_product(description: str | None) -> bool:
    """
    Whether a description names a real product rather than the shipment.

    "Item from Amazon" or "Your package" describe the parcel, not what is
    in it.
    """
    if not description:
        return False

    description = description.strip()
    if not MIN_PRODUCT_LENGTH <= len(description) <= MAX_PRODUCT_LENGTH:
        return False
    if any(pattern.search(description) for pattern in GENERIC_DESCRIPTION_RES):
        return False

    return re.search(r"[a-zA-Z]{3,}", description) is not None


def _is_candidate_line(line: str) -> bool:
    """A line that could be a product name in the attribute strategy."""
    if NON_PRODUCT_LINE_RE.match(line):
        return False
    if PRICE_LINE_RE.match(line) or NUMERIC_LINE_RE.match(line):
        return False
    if BRACKET_ONLY_RE.match(line):
        return False
    if line.endswith(":"):
        return False
    if PRODUCT_ATTRIBUTE_RE.search(line):
        return False
    return MIN_DESCRIPTION_LENGTH <= len(line) <= MAX_CANDIDATE_LINE_LENGTH


def _is_attribute_line(line: str) -> bool:
    return PRODUCT_ATTRIBUTE_RE.search(line) is not None


def _products_before_attributes(text: str) -> list[str]:
    lines = [line.strip() for line in text.split("\n")]
    lines = [line for line in lines if line]

    products = []
    seen = set()

    for index, line in enumerate(lines):
        if not _is_candidate_line(line):
            continue

        following = lines[index + 1 : index + 1 + ATTRIBUTE_LOOKAHEAD_LINES]
        if not any(_is_attribute_line(follower) for follower in following):
            continue

        key = dedup_key(line)
        if key in seen:
            continue
        seen.add(key)

        products.append(_with_attributes(line, following))

    return products


def _with_attributes(name: str, following: list[str]) -> str:
    """Append Color/Material values found before the price or quantity."""
    color = None
    material = None

    for line in following:
        if PRICE_LINE_RE.match(line) or QUANTITY_LINE_RE.match(line):
            break
        color_match = COLOR_RE.search(line)
        if color_match and color is None:
            color = color_match.group(1).strip()
        material_match = MATERIAL_RE.search(line)
        if material_match and material is None:
            material = material_match.group(1).strip()

    parts = [name]
    if color:
        parts.append(f"Color: {color}")
    if material:
        parts.append(f"Material: {material}")
    return " - ".join(parts)


def _listed_products(text: str) -> list[str]:
    products = [match.group(1) for match in BULLET_LINE_RE.finditer(text)]

    for match in LIST_RE.finditer(text):
        for item in re.split(r"[,\n]", match.group(1)):
            item = item.strip()
            if item:
                products.append(item)

    return products


def _quantity_prefixed_products(text: str) -> list[str]:
    return [match.group(1) for match in QUANTITY_PREFIX_RE.finditer(text)]
