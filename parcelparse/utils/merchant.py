"""
Domain and merchant-name helpers.

Turns sender addresses and URLs into domains, and derives a readable
merchant name from a domain when no retailer table entry matches.
"""

import re
from urllib.parse import urlparse

# Common suffixes to remove when deriving a name from a domain
DOMAIN_SUFFIXES = [
    ".com",
    ".co.uk",
    ".ca",
    ".de",
    ".fr",
    ".jp",
    ".co.jp",
    ".com.au",
    ".au",
    ".ie",
    ".in",
    ".net",
    ".org",
    ".io",
    ".store",
    ".shop",
]

# Mail-sending subdomains that never carry the merchant name
SENDER_SUBDOMAIN_RE = re.compile(
    r"^(?:www|mail|email|e|em|mailer|noreply|no-reply|shipping|orders?|support|"
    r"info|news|notifications?|service|hello|store|shop)\.",
    re.IGNORECASE,
)

EMAIL_DOMAIN_RE = re.compile(r"@([^@\s>]+)\s*>?\s*$")

# Brands written in capitals
KNOWN_ACRONYMS = {"rei", "ikea", "h&m", "dhl", "ups", "usps", "dpd", "asos", "bh"}


def extract_domain_from_email(address: str | None) -> str | None:
    """
    Extract the lowercase domain from an email address.

    Accepts bare addresses and ``"Name <user@host>"`` forms.
    """
    if not address:
        return None

    match = EMAIL_DOMAIN_RE.search(address.strip())
    if not match:
        return None

    return match.group(1).lower().rstrip(".")


def primary_domain_label(url: str) -> str | None:
    """
    Return the registrable name of a URL's host.

    "https://www.shop.example.co.uk/x" -> "example"
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return None
    if not host:
        return None

    parts = host.lower().removeprefix("www.").split(".")
    if len(parts) < 2:
        return None

    # Handle co.uk style domains
    if len(parts) >= 3 and parts[-2] in {"co", "com", "org", "net"} and len(parts[-1]) == 2:
        return parts[-3]
    return parts[-2]


def readable_name_from_domain(domain: str | None) -> str | None:
    """
    Derive a display name from a sender domain.

    Strips the TLD and mail-sending subdomains, then title-cases what is
    left: "noreply.boutique-clothing.com" -> "Boutique Clothing".

    Returns:
        Display name, or None when fewer than three characters remain
    """
    if not domain:
        return None

    name = domain.lower().strip()

    for suffix in sorted(DOMAIN_SUFFIXES, key=len, reverse=True):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break

    while True:
        stripped = SENDER_SUBDOMAIN_RE.sub("", name, count=1)
        if stripped == name or not stripped:
            break
        name = stripped

    name = re.sub(r"[._-]+", " ", name).strip()
    if len(name) <= 2:
        return None

    return _title_case_merchant(name)


def _title_case_merchant(name: str) -> str:
    """Capitalize each word, upper-casing known acronyms ("asos" -> "ASOS")."""
    return " ".join(
        word.upper() if word in KNOWN_ACRONYMS else word.capitalize() for word in name.split()
    )
