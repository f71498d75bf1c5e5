"""Retailer tables keyed by domain."""

import re
from typing import NamedTuple


class RetailerPattern(NamedTuple):
    name: str
    pattern: re.Pattern


def _domain(body: str) -> re.Pattern:
    # Not preceded by a host character, so "hm.com" does not match "ohm.com"
    return re.compile(rf"(?<![\w-]){body}(?![\w-])", re.IGNORECASE)


# Display names used for the parse result's retailer_name. Order matters:
# the first match wins.
RETAILER_PATTERNS: list[RetailerPattern] = [
    RetailerPattern("Amazon", _domain(r"amazon\.(?:com|co\.uk|de|fr|es|it|ca|com\.au)")),
    RetailerPattern("eBay", _domain(r"ebay\.(?:com|co\.uk|de|fr)")),
    RetailerPattern("AliExpress", _domain(r"aliexpress\.com")),
    RetailerPattern("ASOS", _domain(r"asos\.com")),
    RetailerPattern("Zara", _domain(r"zara\.com")),
    RetailerPattern("H&M", _domain(r"hm\.com")),
    RetailerPattern("Apple", _domain(r"apple\.com")),
    RetailerPattern("John Lewis", _domain(r"johnlewis\.com")),
    RetailerPattern("Argos", _domain(r"argos\.co\.uk")),
    RetailerPattern("Currys", _domain(r"currys\.co\.uk")),
    RetailerPattern("Very", _domain(r"very\.co\.uk")),
    RetailerPattern("Next", _domain(r"next\.co\.uk")),
    RetailerPattern("Marks & Spencer", _domain(r"marksandspencer\.com")),
    RetailerPattern("Boots", _domain(r"boots\.com")),
    RetailerPattern("Superdrug", _domain(r"superdrug\.com")),
    RetailerPattern("Etsy", _domain(r"etsy\.com")),
    RetailerPattern("Wayfair", _domain(r"wayfair\.(?:com|co\.uk)")),
    RetailerPattern("Zalando", _domain(r"zalando\.[a-z.]{2,6}")),
    RetailerPattern("Lululemon", _domain(r"lululemon\.com")),
    RetailerPattern("Pro:Direct", _domain(r"prodirectsport\.com")),
]

# Lowercase keys for product pages and product URLs
RETAILER_KEYS: list[RetailerPattern] = [
    RetailerPattern("amazon", _domain(r"amazon\.(?:com|co\.uk|de|fr|es|it|ca|com\.au)")),
    RetailerPattern("ebay", _domain(r"ebay\.(?:com|co\.uk|de|fr)")),
    RetailerPattern("asos", _domain(r"asos\.com")),
    RetailerPattern("zalando", _domain(r"zalando\.[a-z.]{2,6}")),
    RetailerPattern("john_lewis", _domain(r"johnlewis\.com")),
    RetailerPattern("argos", _domain(r"argos\.co\.uk")),
    RetailerPattern("currys", _domain(r"currys\.co\.uk")),
    RetailerPattern("very", _domain(r"very\.co\.uk")),
    RetailerPattern("next", _domain(r"next\.co\.uk")),
    RetailerPattern("marks_spencer", _domain(r"marksandspencer\.com")),
    RetailerPattern("boots", _domain(r"boots\.com")),
    RetailerPattern("superdrug", _domain(r"superdrug\.com")),
    RetailerPattern("aliexpress", _domain(r"aliexpress\.com")),
    RetailerPattern("etsy", _domain(r"etsy\.com")),
    RetailerPattern("wayfair", _domain(r"wayfair\.(?:com|co\.uk)")),
    RetailerPattern("lululemon", _domain(r"lululemon\.com")),
    RetailerPattern("prodirect", _domain(r"prodirectsport\.com")),
]


def match_retailer(text: str | None, table: list[RetailerPattern]) -> str | None:
    """Return the name of the first table entry found in text."""
    if not text:
        return None
    for entry in table:
        if entry.pattern.search(text):
            return entry.name
    return None
