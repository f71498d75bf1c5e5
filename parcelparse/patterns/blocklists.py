"""Phrases and URL fragments that mark text or images as not being products."""

import re

# Lines that are headers or order metadata, not product names
NON_PRODUCT_LINE_RE = re.compile(
    r"^(?:Color|Colour|Size|Qty|Quantity|Article|SKU|Item\s*#|Price|Total|Subtotal|"
    r"Shipping|Discount|Order|Payment|Delivery|Material|Thank|Info|Subscribe|Follow)[\s:]",
    re.IGNORECASE,
)

# Attribute labels that follow a product name
PRODUCT_ATTRIBUTE_RE = re.compile(
    r"\b(?:Colou?r|Size|Qty|Quantity|Article|SKU)\s*:", re.IGNORECASE
)

PRICE_LINE_RE = re.compile(r"^(?:\d+\s*(?:USD|GBP|EUR|£|\$|€|x\s)|[£$€]\s?\d)", re.IGNORECASE)
NUMERIC_LINE_RE = re.compile(r"^[\d\s.,£$€%-]+$")
BRACKET_ONLY_RE = re.compile(r"^[\[(].*[\])]$")

# Descriptions that are boilerplate after cleaning
NON_PRODUCT_PHRASE_RE = re.compile(
    r"^(?:Total|Subtotal|Sub-total|Shipping|Tax|VAT|Discount|Order|Thank|Subscribe|"
    r"Follow|View|Copyright|Colou?r|Size|Qty|Quantity|Price|Payment|Delivery|"
    r"Unsubscribe|Privacy|Terms|Click|Track|Manage|Download|Sign\s?in|Log\s?in|"
    r"Contact|Help|Returns?)\b",
    re.IGNORECASE,
)

# Generic phrases that describe a shipment rather than a product
GENERIC_DESCRIPTION_RES: list[re.Pattern] = [
    re.compile(r"^item from\b", re.IGNORECASE),
    re.compile(r"^your (?:order|package|shipment|delivery)\b", re.IGNORECASE),
    re.compile(r"^order\s*#?\s*\d+", re.IGNORECASE),
    re.compile(r"^package\b", re.IGNORECASE),
    re.compile(r"^shipment\b", re.IGNORECASE),
    re.compile(r"^delivery\b", re.IGNORECASE),
    re.compile(r"^tracking\b", re.IGNORECASE),
    re.compile(r"^parcel\b", re.IGNORECASE),
]

# Image URL fragments for logos, social icons, pixels and other chrome.
# Letter boundaries keep words like "silicone" from matching "icon".
NON_PRODUCT_IMAGE_URL_RES: list[re.Pattern] = [
    re.compile(r"(?<![a-z])logos?(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])icons?(?![a-z])", re.IGNORECASE),
    re.compile(
        r"facebook|twitter|instagram|pinterest|youtube|tiktok|linkedin|snapchat",
        re.IGNORECASE,
    ),
    re.compile(r"(?<![a-z])(?:social|share)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:pixel|beacon|spacer|blank|transparent)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:tracking|tracker|open-?track)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:button|btn|cta)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])badges?(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:visa|mastercard|amex|paypal|klarna|clearpay|applepay)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:rating|ratings|stars?[-_]?\d|review[-_]?stars?)(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])avatars?(?![a-z])", re.IGNORECASE),
    re.compile(r"(?<![a-z])(?:header|footer|banner|divider)(?![a-z])", re.IGNORECASE),
    re.compile(r"\.gif(?:\?|$)", re.IGNORECASE),
    re.compile(r"^data:", re.IGNORECASE),
]

NON_PRODUCT_ALT_RE = re.compile(
    r"\b(?:logo|icon|facebook|twitter|instagram|pinterest|youtube|tiktok|linkedin|"
    r"social|follow us|app store|google play|download|pixel|spacer|banner|"
    r"stars|rating|avatar|visa|mastercard|paypal|klarna)\b",
    re.IGNORECASE,
)

# Words ignored when matching image alt text to product descriptions
MATCH_STOPWORDS = frozenset(
    {
        "the",
        "and",
        "for",
        "with",
        "from",
        "color",
        "size",
        "qty",
        "quantity",
        "item",
        "product",
        "order",
        "your",
    }
)
