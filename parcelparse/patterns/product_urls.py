"""Product-page URL shapes per retailer, and links that are never products."""

import re
from typing import NamedTuple

_URL_CHARS = r"[^\s\"'<>]"


class ProductUrlPattern(NamedTuple):
    retailer: str
    pattern: re.Pattern  # group 1, when present, is the product id


def _url(body: str) -> re.Pattern:
    return re.compile(rf"https?://(?:www\.)?{body}{_URL_CHARS}*", re.IGNORECASE)


PRODUCT_URL_PATTERNS: list[ProductUrlPattern] = [
    ProductUrlPattern(
        "amazon",
        _url(
            rf"amazon\.(?:com|co\.uk|de|fr|es|it|ca|com\.au)/(?:{_URL_CHARS}*/)?"
            r"dp/([A-Z0-9]{10})"
        ),
    ),
    ProductUrlPattern(
        "amazon",
        _url(
            rf"amazon\.(?:com|co\.uk|de|fr|es|it|ca|com\.au)/(?:{_URL_CHARS}*/)?"
            r"gp/product/([A-Z0-9]{10})"
        ),
    ),
    ProductUrlPattern(
        "ebay", _url(rf"ebay\.(?:com|co\.uk|de|fr)/itm/{_URL_CHARS}*?(\d{{10,14}})")
    ),
    ProductUrlPattern("asos", _url(rf"asos\.com/{_URL_CHARS}*/prd/(\d+)")),
    ProductUrlPattern("john_lewis", _url(rf"johnlewis\.com/{_URL_CHARS}*/p(\d+)")),
    ProductUrlPattern("argos", _url(r"argos\.co\.uk/product/(\d+)")),
    ProductUrlPattern("currys", _url(rf"currys\.co\.uk/{_URL_CHARS}*-(\d+)\.html")),
    ProductUrlPattern("very", _url(rf"very\.co\.uk/{_URL_CHARS}*/(\d+)\.prd")),
    ProductUrlPattern("very", _url(rf"very\.co\.uk/{_URL_CHARS}*/(\d+)\.d")),
    ProductUrlPattern("next", _url(r"next\.co\.uk/style/([a-z0-9]+)")),
    ProductUrlPattern("etsy", _url(rf"etsy\.com/(?:{_URL_CHARS}*/)?listing/(\d+)")),
    ProductUrlPattern(
        "aliexpress", _url(rf"aliexpress\.com/item/{_URL_CHARS}*?(\d+)\.html")
    ),
    ProductUrlPattern("wayfair", _url(rf"wayfair\.(?:com|co\.uk)/{_URL_CHARS}*\.html")),
]

# Paths that often indicate a product page on any shop
GENERIC_PRODUCT_URL_PATTERNS: list[re.Pattern] = [
    re.compile(rf"https?://{_URL_CHARS}+/products?/{_URL_CHARS}*", re.IGNORECASE),
    re.compile(rf"https?://{_URL_CHARS}+/item/{_URL_CHARS}*", re.IGNORECASE),
    re.compile(rf"https?://{_URL_CHARS}+/p/[a-z0-9-]+{_URL_CHARS}*", re.IGNORECASE),
]

# Links common in emails that are not product pages
EXCLUDE_PATTERNS: list[re.Pattern] = [
    re.compile(r"unsubscribe", re.IGNORECASE),
    re.compile(r"privacy", re.IGNORECASE),
    re.compile(r"terms", re.IGNORECASE),
    re.compile(r"help", re.IGNORECASE),
    re.compile(r"contact", re.IGNORECASE),
    re.compile(r"support", re.IGNORECASE),
    re.compile(r"account", re.IGNORECASE),
    re.compile(r"login", re.IGNORECASE),
    re.compile(r"signin", re.IGNORECASE),
    re.compile(r"cart", re.IGNORECASE),
    re.compile(r"checkout", re.IGNORECASE),
    re.compile(r"order-?(?:status|history|tracking)", re.IGNORECASE),
    re.compile(r"mailto:", re.IGNORECASE),
    re.compile(r"tracking", re.IGNORECASE),
    re.compile(r"shipment", re.IGNORECASE),
    re.compile(r"delivery", re.IGNORECASE),
    re.compile(r"#"),
    re.compile(r"\.(?:jpg|jpeg|png|gif|svg|css|js)(?:\?|$)", re.IGNORECASE),
]

# Query parameters dropped from product URLs
PRODUCT_URL_DROP_PARAM_RE = re.compile(
    r"^(?:utm_|ref|tag|source|campaign|affiliate|tracking)", re.IGNORECASE
)
