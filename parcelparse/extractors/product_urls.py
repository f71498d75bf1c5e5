"""Product page links in email text."""

import logging
import re

from parcelparse.models.extraction import ProductUrl
from parcelparse.patterns.product_urls import (
    EXCLUDE_PATTERNS,
    GENERIC_PRODUCT_URL_PATTERNS,
    PRODUCT_URL_DROP_PARAM_RE,
    PRODUCT_URL_PATTERNS,
)
from parcelparse.patterns.retailers import RETAILER_KEYS, match_retailer
from parcelparse.utils.merchant import primary_domain_label
from parcelparse.utils.urls import clean_url, drop_query_params

logger = logging.getLogger(__name__)


def clean_product_url(url: str) -> str:
    """Strip trailing punctuation, force https and drop marketing params."""
    url = clean_url(url)
    url = re.sub(r"^http:", "https:", url, flags=re.IGNORECASE)
    return drop_query_params(url, PRODUCT_URL_DROP_PARAM_RE.match)


def is_excluded(url: str) -> bool:
    """Account, help, cart, tracking and static-asset links are never products."""
    return any(pattern.search(url) for pattern in EXCLUDE_PATTERNS)


def extract_product_urls(text: str | None) -> list[ProductUrl]:
    """
    Find product page links in email text.

    Known retailers' URL shapes come first and carry a product id; other
    shops are recognized by generic /product/, /item/ and /p/ paths.

    Returns:
        Product URLs in discovery order, one per cleaned URL
    """
    if not text:
        return []

    found: dict[str, ProductUrl] = {}

    for entry in PRODUCT_URL_PATTERNS:
        for match in entry.pattern.finditer(text):
            if is_excluded(match.group(0)):
                continue
            url = clean_product_url(match.group(0))
            product_id = match.group(1) if entry.pattern.groups else None
            found.setdefault(
                url, ProductUrl(url=url, retailer=entry.retailer, product_id=product_id)
            )

    for pattern in GENERIC_PRODUCT_URL_PATTERNS:
        for match in pattern.finditer(text):
            raw = match.group(0)
            if is_excluded(raw) or match_retailer(raw, RETAILER_KEYS):
                continue
            url = clean_product_url(raw)
            retailer = primary_domain_label(url) or "unknown"
            found.setdefault(url, ProductUrl(url=url, retailer=retailer, product_id=None))

    logger.debug("Extracted %d product URLs", len(found))
    return list(found.values())
